"""ORM helpers shared by the Django repositories."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore


def lock_queryset_if_possible(queryset, *, of=("self",)):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update(of=of)
    except NotSupportedError:
        return queryset


def aware_datetime(value):
    """Attach the current timezone to naive domain timestamps before saving."""

    if value is not None and timezone.is_naive(value):
        return timezone.make_aware(value)
    return value

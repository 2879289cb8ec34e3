"""Officer registration queries."""

from typing import List

from apps.officers.domain.entities import Officer, RegistrationStatus


def pending_registrations(uow, project_name: str) -> List[Officer]:
    """Officers waiting for the project's manager to decide"""
    return uow.officers.list_registered_for(project_name, RegistrationStatus.PENDING)


def approved_officers(uow, project_name: str) -> List[Officer]:
    return uow.officers.list_registered_for(project_name, RegistrationStatus.APPROVED)

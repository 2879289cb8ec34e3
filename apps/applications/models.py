"""Applicant models: profile plus the single application it carries."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.projects.models import Room


class Applicant(models.Model):
    """Applicant profile and application linkage (project, room type, status)."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        SUCCESSFUL = "SUCCESSFUL", _("Successful")
        UNSUCCESSFUL = "UNSUCCESSFUL", _("Unsuccessful")
        BOOKED = "BOOKED", _("Booked")
        PENDING_WITHDRAWAL = "PENDING_WITHDRAWAL", _("Pending withdrawal")

    nric = models.CharField(max_length=9, primary_key=True)
    name = models.CharField(max_length=150)
    age = models.PositiveSmallIntegerField()
    is_married = models.BooleanField(default=False)
    applied_project = models.ForeignKey(
        "projects.Project",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="applicants",
    )
    chosen_room_type = models.CharField(
        max_length=16,
        choices=Room.RoomType.choices,
        blank=True,
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        blank=True,
    )
    status_before_withdrawal = models.CharField(
        max_length=20,
        choices=Status.choices,
        blank=True,
        help_text=_("Status recorded when the withdrawal was requested."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Applicant")
        verbose_name_plural = _("Applicants")
        ordering = ["nric"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status__in=["", "UNSUCCESSFUL"])
                    | (models.Q(applied_project__isnull=False) & ~models.Q(chosen_room_type=""))
                ),
                name="applicant_live_application_has_project",
            ),
        ]
        indexes = [
            models.Index(fields=["applied_project", "status"], name="applicant_project_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.nric})"

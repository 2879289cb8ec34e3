"""Officer models: the officer role and its per-project registrations."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Officer(models.Model):
    """Officer role of an applicant; the applicant row carries the profile."""

    applicant = models.OneToOneField(
        "applications.Applicant",
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="officer_role",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Officer")
        verbose_name_plural = _("Officers")
        ordering = ["applicant"]

    def __str__(self) -> str:
        return f"Officer {self.applicant_id}"


class OfficerRegistration(models.Model):
    """Request of an officer to handle one project."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    officer = models.ForeignKey(
        Officer,
        on_delete=models.CASCADE,
        related_name="registrations",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="officer_registrations",
    )
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    decided_by = models.ForeignKey(
        "projects.Manager",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="officer_decisions",
    )
    requested_at = models.DateTimeField()
    decided_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Officer registration")
        verbose_name_plural = _("Officer registrations")
        ordering = ["requested_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["officer"],
                condition=models.Q(status="PENDING"),
                name="officer_single_pending_registration",
            ),
        ]
        indexes = [
            models.Index(fields=["project", "status"], name="officer_reg_project_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.officer_id} -> {self.project_id} ({self.status})"

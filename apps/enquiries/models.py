"""Enquiry model."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Enquiry(models.Model):
    """Question of an applicant about a project, with an optional reply."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    applicant = models.ForeignKey(
        "applications.Applicant",
        on_delete=models.CASCADE,
        related_name="enquiries",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="enquiries",
    )
    message = models.TextField()
    reply = models.TextField(null=True, blank=True)
    replied_by = models.CharField(
        max_length=9,
        blank=True,
        help_text=_("NRIC of the manager or officer who replied."),
    )
    created_at = models.DateTimeField()
    replied_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Enquiry")
        verbose_name_plural = _("Enquiries")
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["project", "created_at"], name="enquiry_project_created_idx"),
            models.Index(fields=["applicant", "created_at"], name="enquiry_applicant_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Enquiry {self.pk} ({self.applicant_id} -> {self.project_id})"

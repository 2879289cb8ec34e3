"""Project catalogue models for the housing allocation system."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Manager(models.Model):
    """Manager who owns projects and decides on applications."""

    nric = models.CharField(max_length=9, primary_key=True)
    name = models.CharField(max_length=150, blank=True)

    class Meta:
        verbose_name = _("Manager")
        verbose_name_plural = _("Managers")
        ordering = ["nric"]

    def __str__(self) -> str:
        return f"{self.name} ({self.nric})"


class Project(models.Model):
    """Housing project open for applications during its period."""

    name = models.CharField(max_length=150, primary_key=True)
    neighbourhood = models.CharField(max_length=150)
    open_date = models.DateField()
    close_date = models.DateField()
    manager = models.ForeignKey(
        Manager,
        on_delete=models.PROTECT,
        related_name="projects",
    )
    officer_slots = models.PositiveSmallIntegerField(
        default=0,
        help_text=_("Remaining number of officers that can still be approved."),
    )
    visible = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Project")
        verbose_name_plural = _("Projects")
        ordering = ["open_date", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(close_date__gte=models.F("open_date")),
                name="project_valid_period",
            ),
        ]
        indexes = [
            models.Index(fields=["manager", "open_date", "close_date"], name="project_manager_period_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Room(models.Model):
    """Inventory bucket of one room type within a project."""

    class RoomType(models.TextChoices):
        TWO_ROOM = "TwoRoom", _("2-Room")
        THREE_ROOM = "ThreeRoom", _("3-Room")

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="rooms",
    )
    room_type = models.CharField(max_length=16, choices=RoomType.choices)
    total_units = models.PositiveIntegerField(default=0)
    available_units = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["project", "room_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "room_type"],
                name="room_type_unique_per_project",
            ),
            models.CheckConstraint(
                condition=models.Q(available_units__lte=models.F("total_units")),
                name="room_available_within_total",
            ),
            models.CheckConstraint(
                condition=models.Q(available_units__gte=0),
                name="room_available_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.room_type} in {self.project_id}: {self.available_units}/{self.total_units}"


class SavedProjectFilter(models.Model):
    """Project-list filter a user chose to keep; blank columns match everything."""

    nric = models.CharField(max_length=9, primary_key=True)
    neighbourhood = models.CharField(max_length=150, blank=True)
    room_type = models.CharField(max_length=16, choices=Room.RoomType.choices, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Saved project filter")
        verbose_name_plural = _("Saved project filters")
        ordering = ["nric"]

    def __str__(self) -> str:
        return f"{self.nric}: {self.neighbourhood or '*'} / {self.room_type or '*'}"

"""
Project Domain Entities

Core business entities for the project catalogue:
- Manager: Staff member who owns projects and decides on applications
- Project: Aggregate owning the room inventories of one housing project
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Tuple

from shared.domain.base import Aggregate, Entity
from shared.domain.exceptions import NoSlotAvailable, NotFound
from shared.domain.value_objects import DateRange, normalize_nric

from apps.projects.domain.events import (
    OfficerSlotTaken,
    ProjectCreated,
    ProjectRescheduled,
    ProjectVisibilityChanged,
)
from apps.projects.domain.inventory import Room, RoomType


@dataclass(eq=False)
class Manager(Entity):
    """A manager, identified by NRIC"""
    nric: str
    name: str = ''

    def __post_init__(self):
        self.nric = normalize_nric(self.nric)

    @property
    def identity(self):
        return self.nric


@dataclass(eq=False)
class Project(Aggregate):
    """
    Project Aggregate Root

    A housing project open for applications during its application period.
    The project exclusively owns one Room per room type it offers.

    Key invariants:
    - application_period start <= end (enforced by DateRange)
    - Room types are unique within a project
    - Officer slots never go below zero
    - A manager never owns two projects with overlapping periods
      (checked by the catalogue handlers, which see every project)
    """

    name: str
    neighbourhood: str
    application_period: DateRange
    manager_nric: str
    officer_slots: int = 0
    visible: bool = True
    rooms: List[Room] = field(default_factory=list)

    def __post_init__(self):
        self.name = (self.name or '').strip()
        if not self.name:
            raise ValueError("Project name is required")
        self.manager_nric = normalize_nric(self.manager_nric)
        if self.officer_slots < 0:
            raise ValueError("Officer slots cannot be negative")

        seen = set()
        for room in self.rooms:
            if room.room_type in seen:
                raise ValueError(f"Room type {room.room_type.value} listed twice in project {self.name}")
            if room.project_name.casefold() != self.name.casefold():
                raise ValueError(f"Room {room!r} does not belong to project {self.name}")
            seen.add(room.room_type)

    @classmethod
    def create(cls, name: str, neighbourhood: str, application_period: DateRange,
               manager_nric: str, officer_slots: int = 0, rooms=(), visible: bool = True) -> 'Project':
        """Build a new project and record its creation"""
        project = cls(
            name=name,
            neighbourhood=neighbourhood,
            application_period=application_period,
            manager_nric=manager_nric,
            officer_slots=officer_slots,
            visible=visible,
            rooms=list(rooms),
        )
        project.add_event(ProjectCreated(
            project_name=project.name,
            manager_nric=project.manager_nric,
            application_period=application_period,
            aggregate_id=project.name,
        ))
        return project

    @property
    def identity(self):
        return self.name.casefold()

    @property
    def room_types(self) -> Tuple[RoomType, ...]:
        return tuple(room.room_type for room in self.rooms)

    def offers(self, room_type: RoomType) -> bool:
        return RoomType.parse(room_type) in self.room_types

    def room(self, room_type: RoomType) -> Room:
        """Get the inventory bucket for a room type"""
        room_type = RoomType.parse(room_type)
        for room in self.rooms:
            if room.room_type == room_type:
                return room
        raise NotFound('Room type', f"{getattr(room_type, 'value', room_type)} in {self.name}")

    def is_managed_by(self, manager_nric: str) -> bool:
        return self.manager_nric == normalize_nric(manager_nric)

    def overlaps(self, other: 'Project') -> bool:
        return self.application_period.overlaps_with(other.application_period)

    def accepts_applications_on(self, day: date) -> bool:
        """Visible and within the application period"""
        return self.visible and self.application_period.contains(day)

    def take_officer_slot(self, officer_nric: str):
        """
        Consume one officer slot (PENDING -> APPROVED registration)

        Raises:
            NoSlotAvailable: If the project is already fully staffed
        """
        if self.officer_slots <= 0:
            raise NoSlotAvailable(self.name)

        self.officer_slots -= 1

        self.add_event(OfficerSlotTaken(
            project_name=self.name,
            officer_nric=officer_nric,
            remaining_slots=self.officer_slots,
            aggregate_id=self.name,
        ))

    def edit(self, period: DateRange | None = None, neighbourhood: str | None = None,
             officer_slots: int | None = None):
        """
        Apply a catalogue edit

        Every field is checked before any is changed, so a refused edit
        leaves the project untouched.
        """
        if neighbourhood is not None:
            neighbourhood = neighbourhood.strip()
            if not neighbourhood:
                raise ValueError("Neighbourhood cannot be empty")
        if officer_slots is not None and officer_slots < 0:
            raise ValueError("Officer slots cannot be negative")

        if neighbourhood is not None:
            self.neighbourhood = neighbourhood
        if officer_slots is not None:
            self.officer_slots = officer_slots
        if period is not None and period != self.application_period:
            self.application_period = period
            self.add_event(ProjectRescheduled(
                project_name=self.name,
                application_period=period,
                aggregate_id=self.name,
            ))

    def set_visibility(self, visible: bool):
        if visible == self.visible:
            return
        self.visible = visible
        self.add_event(ProjectVisibilityChanged(
            project_name=self.name,
            visible=visible,
            aggregate_id=self.name,
        ))

    def __str__(self):
        return f"Project {self.name} ({self.neighbourhood}, {self.application_period})"

    def __repr__(self):
        return (
            f"Project(name={self.name!r}, manager_nric={self.manager_nric!r}, "
            f"application_period={self.application_period!r}, rooms={len(self.rooms)})"
        )

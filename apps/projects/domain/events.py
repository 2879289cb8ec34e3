"""
Project Domain Events

Events raised by projects and their room inventories. Room types travel
as their string value so consumers need no domain imports.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


# ===== Inventory Events =====

@dataclass
class UnitReserved(DomainEvent):
    """
    Event: One unit of a room type was committed to an applicant

    Raised when a manager approves an application.
    """
    project_name: str
    room_type: str
    available_units: int


@dataclass
class UnitReleased(DomainEvent):
    """
    Event: One committed unit returned to the pool

    Raised when a withdrawal of a SUCCESSFUL or BOOKED application is approved.
    """
    project_name: str
    room_type: str
    available_units: int


@dataclass
class RoomSupplyIncreased(DomainEvent):
    """Event: A manager added units to a room type"""
    project_name: str
    room_type: str
    additional_units: int


# ===== Project Events =====

@dataclass
class ProjectCreated(DomainEvent):
    project_name: str
    manager_nric: str
    application_period: DateRange


@dataclass
class ProjectRescheduled(DomainEvent):
    project_name: str
    application_period: DateRange


@dataclass
class ProjectVisibilityChanged(DomainEvent):
    project_name: str
    visible: bool


@dataclass
class OfficerSlotTaken(DomainEvent):
    """Event: An officer registration consumed one of the project's slots"""
    project_name: str
    officer_nric: str
    remaining_slots: int

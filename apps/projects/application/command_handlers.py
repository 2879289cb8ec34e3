"""
Project Catalogue Command Handlers

Manager-side maintenance of projects and their room inventories.

Commands:
- CreateProjectCommand: Create a project with its room types
- EditProjectCommand: Change neighbourhood, period, officer slots or prices
- AddRoomSupplyCommand: Add newly built units to a room type
- ToggleVisibilityCommand: Show or hide a project from applicants
- DeleteProjectCommand: Remove a project nobody refers to any more
- SetProjectFilterCommand: Save the filter a user browses project lists with

A manager never owns two projects whose application periods overlap;
creating and rescheduling check this against every project they own.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional
import logging

from shared.domain.exceptions import InvalidStateTransition, NotAuthorized, ScheduleConflict
from shared.domain.value_objects import DateRange, Money, normalize_nric

from apps.projects.domain.entities import Project
from apps.projects.domain.filters import ProjectFilter
from apps.projects.domain.inventory import Room, RoomType

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class RoomSpec:
    """Room type offered by a new project"""
    room_type: RoomType
    units: int
    price: Decimal = Decimal('0')


@dataclass
class CreateProjectCommand:
    manager_nric: str
    name: str
    neighbourhood: str
    open_date: date
    close_date: date
    rooms: List[RoomSpec]
    officer_slots: int = 0
    visible: bool = True


@dataclass
class EditProjectCommand:
    """Fields left as None are not changed"""
    manager_nric: str
    project_name: str
    neighbourhood: Optional[str] = None
    open_date: Optional[date] = None
    close_date: Optional[date] = None
    officer_slots: Optional[int] = None
    prices: Dict[RoomType, Decimal] = field(default_factory=dict)


@dataclass
class AddRoomSupplyCommand:
    manager_nric: str
    project_name: str
    room_type: RoomType
    units: int


@dataclass
class ToggleVisibilityCommand:
    """Flip the visibility, or set it when ``visible`` is given"""
    manager_nric: str
    project_name: str
    visible: Optional[bool] = None


@dataclass
class DeleteProjectCommand:
    manager_nric: str
    project_name: str


@dataclass
class SetProjectFilterCommand:
    """Both criteria None clears the saved filter"""
    nric: str
    neighbourhood: Optional[str] = None
    room_type: Optional[RoomType] = None


# ===== Helpers =====

def ensure_manages(project: Project, manager_nric: str):
    if not project.is_managed_by(manager_nric):
        raise NotAuthorized(
            f"Manager {normalize_nric(manager_nric)} is not in charge of project '{project.name}'"
        )


def ensure_schedule_free(uow, manager_nric: str, period: DateRange, name: str, exclude: str | None = None):
    """
    Raises:
        ScheduleConflict: If another project of the manager overlaps ``period``
    """
    excluded = exclude.casefold() if exclude else None
    for other in uow.projects.list_by_manager(manager_nric):
        if other.identity == excluded:
            continue
        if other.application_period.overlaps_with(period):
            raise ScheduleConflict(
                f"Manager {normalize_nric(manager_nric)} already handles project '{other.name}' "
                f"({other.application_period}) which overlaps '{name}' ({period})"
            )


# ===== Command Handlers =====

class CreateProjectHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: CreateProjectCommand) -> Project:
        logger.info(f"Manager {command.manager_nric} creating project '{command.name}'")

        if not command.rooms:
            raise ValueError("A project must offer at least one room type")

        period = DateRange(command.open_date, command.close_date)

        with self.uow_factory() as uow:
            manager = uow.managers.get(command.manager_nric)
            ensure_schedule_free(uow, manager.nric, period, command.name)

            name = command.name.strip()
            rooms = [
                Room(
                    project_name=name,
                    room_type=spec.room_type,
                    total_units=spec.units,
                    available_units=spec.units,
                    price=Money(spec.price),
                )
                for spec in command.rooms
            ]
            project = Project.create(
                name=name,
                neighbourhood=command.neighbourhood,
                application_period=period,
                manager_nric=manager.nric,
                officer_slots=command.officer_slots,
                rooms=rooms,
                visible=command.visible,
            )

            uow.projects.add(project)
            uow.collect_events(project)

        logger.info(f"Project '{project.name}' created with {len(project.rooms)} room types")
        return project


class EditProjectHandler:
    """
    Handler for EditProject command

    Project columns go through the project repository, prices through the
    room repository, each room locked after the project.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: EditProjectCommand) -> Project:
        logger.info(f"Manager {command.manager_nric} editing project '{command.project_name}'")

        with self.uow_factory() as uow:
            project = uow.projects.get(command.project_name, lock=True)
            ensure_manages(project, command.manager_nric)

            repriced = [
                (uow.rooms.get(project.name, room_type, lock=True), Money(price))
                for room_type, price in command.prices.items()
            ]

            period = None
            if command.open_date is not None or command.close_date is not None:
                period = DateRange(
                    command.open_date or project.application_period.start_date,
                    command.close_date or project.application_period.end_date,
                )
                ensure_schedule_free(uow, project.manager_nric, period, project.name, exclude=project.name)

            project.edit(
                period=period,
                neighbourhood=command.neighbourhood,
                officer_slots=command.officer_slots,
            )

            for room, price in repriced:
                room.reprice(price)
                uow.rooms.save(room)

            uow.projects.save(project)
            uow.collect_events(project)
            project = uow.projects.get(project.name)

        return project


class AddRoomSupplyHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: AddRoomSupplyCommand) -> Room:
        logger.info(
            f"Manager {command.manager_nric} adding {command.units} units "
            f"to {command.room_type} in '{command.project_name}'"
        )

        with self.uow_factory() as uow:
            project = uow.projects.get(command.project_name)
            ensure_manages(project, command.manager_nric)

            room = uow.rooms.get(project.name, command.room_type, lock=True)
            room.increase_supply(command.units)

            uow.rooms.save(room)
            uow.collect_events(room)

        return room


class ToggleVisibilityHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: ToggleVisibilityCommand) -> Project:
        with self.uow_factory() as uow:
            project = uow.projects.get(command.project_name, lock=True)
            ensure_manages(project, command.manager_nric)

            visible = (not project.visible) if command.visible is None else command.visible
            project.set_visibility(visible)

            uow.projects.save(project)
            uow.collect_events(project)

        logger.info(f"Project '{project.name}' is now {'visible' if project.visible else 'hidden'}")
        return project


class DeleteProjectHandler:
    """
    Handler for DeleteProject command

    Refused while any applicant's application or any officer's live
    registration refers to the project. Its enquiries go with it.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: DeleteProjectCommand) -> None:
        logger.info(f"Manager {command.manager_nric} deleting project '{command.project_name}'")

        with self.uow_factory() as uow:
            project = uow.projects.get(command.project_name, lock=True)
            ensure_manages(project, command.manager_nric)

            applicants = uow.applicants.list_by_project(project.name)
            officers = [
                o for o in uow.officers.list_registered_for(project.name)
                if any(r.is_live and r.concerns(project.name) for r in o.registrations)
            ]
            if applicants or officers:
                raise InvalidStateTransition(
                    f"project '{project.name}' "
                    f"({len(applicants)} applications, {len(officers)} officers)",
                    'IN_USE',
                    'delete',
                )

            for enquiry in uow.enquiries.list_by_project(project.name):
                uow.enquiries.delete(enquiry.id)
            uow.projects.delete(project.name)

        logger.info(f"Project '{project.name}' deleted")


class SetProjectFilterHandler:
    """
    Handler for SetProjectFilter command

    Any user may save a filter; the project lists they are shown apply it
    until it is replaced or cleared.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: SetProjectFilterCommand) -> ProjectFilter:
        nric = normalize_nric(command.nric)
        project_filter = ProjectFilter(command.neighbourhood, command.room_type)

        with self.uow_factory() as uow:
            if project_filter.is_empty:
                uow.project_filters.clear(nric)
            else:
                uow.project_filters.save(nric, project_filter)

        logger.info(f"Project filter of {nric} set to {project_filter}")
        return project_filter

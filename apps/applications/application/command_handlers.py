"""
Application Command Handlers

Use cases of the application lifecycle. Each handler opens one unit of
work, loads the aggregates it changes with locked reads (applicant, then
project, then room), lets the domain perform the transition and saves
what changed. Events are published after commit.

Commands:
- SubmitApplicationCommand: Applicant applies for a room type of a project
- ApproveApplicationCommand: Manager approves, one unit is reserved
- RejectApplicationCommand: Manager rejects
- RequestWithdrawalCommand: Applicant asks to withdraw
- ApproveWithdrawalCommand: Manager approves, a held unit is released
- RejectWithdrawalCommand: Manager rejects, the prior status is restored
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable
import logging

from shared.domain.exceptions import InvalidStateTransition, NotAuthorized, NotEligible, RoleConflict
from shared.domain.value_objects import normalize_nric

from apps.applications.domain.eligibility import EligibilityPolicy, eligible_room_types
from apps.applications.domain.entities import Applicant
from apps.projects.domain.inventory import RoomType

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class SubmitApplicationCommand:
    """Command to apply for one room type of a project"""
    nric: str
    project_name: str
    room_type: RoomType


@dataclass
class ApproveApplicationCommand:
    """Command for a project's manager to approve a PENDING application"""
    manager_nric: str
    applicant_nric: str


@dataclass
class RejectApplicationCommand:
    """Command for a project's manager to reject a PENDING application"""
    manager_nric: str
    applicant_nric: str


@dataclass
class RequestWithdrawalCommand:
    """Command for an applicant to ask to withdraw their application"""
    nric: str


@dataclass
class ApproveWithdrawalCommand:
    manager_nric: str
    applicant_nric: str


@dataclass
class RejectWithdrawalCommand:
    manager_nric: str
    applicant_nric: str


# ===== Helpers =====

def authorize_manager(uow, applicant: Applicant, manager_nric: str):
    """
    Check that ``manager_nric`` owns the applicant's project.

    Applicants without a project are left to the state machine, which
    refuses every manager decision for them.
    """
    if applicant.applied_project is None:
        return None

    project = uow.projects.get(applicant.applied_project)
    if not project.is_managed_by(manager_nric):
        raise NotAuthorized(
            f"Manager {normalize_nric(manager_nric)} is not in charge of project "
            f"'{project.name}' applied for by {applicant.nric}"
        )
    return project


# ===== Command Handlers =====

class SubmitApplicationHandler:
    """
    Handler for SubmitApplication command

    Checks performed before the state machine is touched:
    1. The project is visible and open today
    2. The applicant is eligible for the room type (NotEligible otherwise,
       apply() is never invoked)
    3. An officer does not apply to a project overlapping one of its live
       registrations (RoleConflict)
    """

    def __init__(
        self,
        uow_factory: Callable,
        clock: Callable[[], date] = date.today,
        policy: EligibilityPolicy | None = None,
    ):
        self.uow_factory = uow_factory
        self.clock = clock
        self.policy = policy or EligibilityPolicy.from_settings()

    def handle(self, command: SubmitApplicationCommand) -> Applicant:
        room_type = RoomType.parse(command.room_type)
        logger.info(
            f"Applicant {command.nric} applying for {room_type.value} "
            f"in project '{command.project_name}'"
        )

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.nric, lock=True)
            officer = uow.officers.find(command.nric, lock=True)
            project = uow.projects.get(command.project_name)

            today = self.clock()
            if not project.accepts_applications_on(today):
                raise NotEligible(
                    f"Project '{project.name}' is not open for applications on {today}"
                )

            allowed = eligible_room_types(
                applicant.age, applicant.is_married, project.room_types, self.policy
            )
            if room_type not in allowed:
                raise NotEligible(
                    f"{applicant.marital_status} applicant {applicant.nric} aged {applicant.age} "
                    f"may not apply for {room_type.value} in '{project.name}'"
                )

            if officer is not None:
                live_projects = [uow.projects.get(r.project_name) for r in officer.live_registrations]
                if officer.handles_period_of(project, live_projects):
                    raise RoleConflict(
                        f"Officer {officer.nric} handles a project overlapping "
                        f"'{project.name}' and cannot apply for it"
                    )

            applicant.apply(project, room_type)

            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        logger.info(f"Application of {applicant.nric} submitted for '{project.name}'")
        return applicant


class ApproveApplicationHandler:
    """
    Handler for ApproveApplication command

    The room row is locked before the unit is reserved, so two approvals
    racing for the last unit of a room type are serialized and the second
    one fails with InventoryExhausted, leaving its applicant PENDING.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: ApproveApplicationCommand) -> Applicant:
        logger.info(f"Manager {command.manager_nric} approving application of {command.applicant_nric}")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric, lock=True)
            project = authorize_manager(uow, applicant, command.manager_nric)

            if project is None:
                raise InvalidStateTransition(f"application of {applicant.nric}", applicant.status, 'approve')

            room = uow.rooms.get(project.name, applicant.chosen_room_type, lock=True)
            applicant.approve(room)

            uow.rooms.save(room)
            uow.applicants.save(applicant)
            uow.collect_events(room)
            uow.collect_events(applicant)

        logger.info(
            f"Application of {applicant.nric} approved; "
            f"{room.available_units} {room.room_type.value} units left in '{room.project_name}'"
        )
        return applicant


class RejectApplicationHandler:
    """Handler for RejectApplication command"""

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: RejectApplicationCommand) -> Applicant:
        logger.info(f"Manager {command.manager_nric} rejecting application of {command.applicant_nric}")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric, lock=True)
            authorize_manager(uow, applicant, command.manager_nric)

            applicant.reject()

            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        return applicant


class RequestWithdrawalHandler:
    """Handler for RequestWithdrawal command"""

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: RequestWithdrawalCommand) -> Applicant:
        logger.info(f"Applicant {command.nric} requesting withdrawal")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.nric, lock=True)
            applicant.request_withdrawal()

            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        return applicant


class ApproveWithdrawalHandler:
    """
    Handler for ApproveWithdrawal command

    Only an application that had reached SUCCESSFUL or BOOKED holds a
    unit; for those the room is locked and the unit released.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: ApproveWithdrawalCommand) -> Applicant:
        logger.info(f"Manager {command.manager_nric} approving withdrawal of {command.applicant_nric}")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric, lock=True)
            project = authorize_manager(uow, applicant, command.manager_nric)

            room = None
            if project is not None and applicant.holds_unit:
                room = uow.rooms.get(project.name, applicant.chosen_room_type, lock=True)

            applicant.approve_withdrawal(room)

            if room is not None:
                uow.rooms.save(room)
                uow.collect_events(room)
            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        logger.info(
            f"Withdrawal of {applicant.nric} approved"
            + (f"; unit returned to '{room.project_name}'" if room is not None else "")
        )
        return applicant


class RejectWithdrawalHandler:
    """Handler for RejectWithdrawal command"""

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: RejectWithdrawalCommand) -> Applicant:
        logger.info(f"Manager {command.manager_nric} rejecting withdrawal of {command.applicant_nric}")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric, lock=True)
            authorize_manager(uow, applicant, command.manager_nric)

            applicant.reject_withdrawal()

            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        logger.info(f"Withdrawal of {applicant.nric} rejected, status back to {applicant.status.value}")
        return applicant

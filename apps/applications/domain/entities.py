"""
Application Domain Entities

Core business entities for the application lifecycle:
- ApplicationStatus: FSM states of an applicant's application
- Applicant: Aggregate holding an applicant's profile and application
"""

from dataclasses import dataclass
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidStateTransition, NotFound
from shared.domain.value_objects import normalize_nric

from apps.applications.domain.events import (
    ApplicationApproved,
    ApplicationRejected,
    ApplicationSubmitted,
    FlatBooked,
    WithdrawalApproved,
    WithdrawalRejected,
    WithdrawalRequested,
)
from apps.projects.domain.entities import Project
from apps.projects.domain.inventory import Room, RoomType


class ApplicationStatus(Enum):
    """
    Application Status Finite State Machine

    ``None`` on the applicant stands for "no application".

    State transitions:
    - NONE/UNSUCCESSFUL -> PENDING (applicant applied)
    - PENDING -> SUCCESSFUL (manager approved, unit reserved)
    - PENDING -> UNSUCCESSFUL (manager rejected)
    - SUCCESSFUL -> BOOKED (officer booked the flat)
    - PENDING/SUCCESSFUL/BOOKED -> PENDING_WITHDRAWAL (applicant asked to withdraw)
    - PENDING_WITHDRAWAL -> NONE (withdrawal approved, unit released if held)
    - PENDING_WITHDRAWAL -> previous status (withdrawal rejected)
    """
    PENDING = 'PENDING'
    SUCCESSFUL = 'SUCCESSFUL'
    UNSUCCESSFUL = 'UNSUCCESSFUL'
    BOOKED = 'BOOKED'
    PENDING_WITHDRAWAL = 'PENDING_WITHDRAWAL'


# Statuses from which a new application may be submitted
APPLICABLE_STATUSES = (None, ApplicationStatus.UNSUCCESSFUL)

# Statuses that hold one reserved unit
UNIT_HOLDING_STATUSES = (ApplicationStatus.SUCCESSFUL, ApplicationStatus.BOOKED)

WITHDRAWABLE_STATUSES = (
    ApplicationStatus.PENDING,
    ApplicationStatus.SUCCESSFUL,
    ApplicationStatus.BOOKED,
)

# Statuses that carry a project and a room type
LIVE_STATUSES = WITHDRAWABLE_STATUSES + (ApplicationStatus.PENDING_WITHDRAWAL,)


@dataclass(eq=False)
class Applicant(Aggregate):
    """
    Applicant Aggregate Root

    An end user seeking a flat, together with their single application.
    The applied project is a weak reference by name; the project itself is
    loaded through its repository when needed.

    Key invariants:
    - A live application (PENDING, SUCCESSFUL, BOOKED, PENDING_WITHDRAWAL)
      always names a project and a room type
    - status_before_withdrawal is set exactly while PENDING_WITHDRAWAL
    - An application holds a unit exactly when it reached SUCCESSFUL or
      BOOKED and has not been withdrawn since
    """

    nric: str
    name: str
    age: int
    is_married: bool
    applied_project: str | None = None
    chosen_room_type: RoomType | None = None
    status: ApplicationStatus | None = None
    status_before_withdrawal: ApplicationStatus | None = None

    def __post_init__(self):
        self.nric = normalize_nric(self.nric)
        if self.age < 0:
            raise ValueError("Age cannot be negative")
        if self.chosen_room_type is not None:
            self.chosen_room_type = RoomType.parse(self.chosen_room_type)

        if self.status in LIVE_STATUSES and (self.applied_project is None or self.chosen_room_type is None):
            raise ValueError(f"Applicant {self.nric} with status {self.status.value} must reference a project and room type")
        if (self.status == ApplicationStatus.PENDING_WITHDRAWAL) != (self.status_before_withdrawal is not None):
            raise ValueError(f"Applicant {self.nric}: previous status must be recorded exactly while PENDING_WITHDRAWAL")
        if self.status_before_withdrawal not in (None,) + WITHDRAWABLE_STATUSES:
            raise ValueError(f"Applicant {self.nric}: cannot withdraw from {self.status_before_withdrawal.value}")

    @property
    def identity(self):
        return self.nric

    @property
    def has_application(self) -> bool:
        """True while the application is live (project and room bound)"""
        return self.status in LIVE_STATUSES

    @property
    def holds_unit(self) -> bool:
        """True while one unit of the chosen room type is reserved for this applicant"""
        if self.status == ApplicationStatus.PENDING_WITHDRAWAL:
            return self.status_before_withdrawal in UNIT_HOLDING_STATUSES
        return self.status in UNIT_HOLDING_STATUSES

    @property
    def marital_status(self) -> str:
        return 'Married' if self.is_married else 'Single'

    def apply(self, project: Project, room_type: RoomType):
        """
        Submit an application (NONE/UNSUCCESSFUL -> PENDING)

        Eligibility is the caller's concern; here only membership of the
        room type in the project is checked. No unit is reserved.

        Raises:
            InvalidStateTransition: If an application is already live
            NotFound: If the project does not offer the room type
        """
        if self.status not in APPLICABLE_STATUSES:
            raise InvalidStateTransition(f"applicant {self.nric}", self.status, 'apply for')

        room_type = RoomType.parse(room_type)
        if not project.offers(room_type):
            raise NotFound('Room type', f"{room_type.value} in {project.name}")

        self.applied_project = project.name
        self.chosen_room_type = room_type
        self.status = ApplicationStatus.PENDING

        self.add_event(ApplicationSubmitted(
            nric=self.nric,
            project_name=project.name,
            room_type=room_type.value,
            aggregate_id=self.nric,
        ))

    def approve(self, room: Room):
        """
        Approve the application (PENDING -> SUCCESSFUL)

        Reserves one unit from ``room``, the inventory bucket of the chosen
        project and room type. If the room is exhausted the error propagates
        and the status stays PENDING for the manager to decide on.

        Raises:
            InvalidStateTransition: If the status is not PENDING
            InventoryExhausted: If no unit is left
        """
        if self.status != ApplicationStatus.PENDING:
            raise InvalidStateTransition(f"application of {self.nric}", self.status, 'approve')
        self._check_room(room)

        room.reserve()
        self.status = ApplicationStatus.SUCCESSFUL

        self.add_event(ApplicationApproved(
            nric=self.nric,
            project_name=self.applied_project,
            room_type=self.chosen_room_type.value,
            aggregate_id=self.nric,
        ))

    def reject(self):
        """
        Reject the application (PENDING -> UNSUCCESSFUL)

        Nothing was reserved, so the inventory is untouched. The project and
        room references are cleared so the applicant may apply again.
        """
        if self.status != ApplicationStatus.PENDING:
            raise InvalidStateTransition(f"application of {self.nric}", self.status, 'reject')

        project_name = self.applied_project
        self.applied_project = None
        self.chosen_room_type = None
        self.status = ApplicationStatus.UNSUCCESSFUL

        self.add_event(ApplicationRejected(
            nric=self.nric,
            project_name=project_name,
            aggregate_id=self.nric,
        ))

    def request_withdrawal(self):
        """
        Ask to withdraw (PENDING/SUCCESSFUL/BOOKED -> PENDING_WITHDRAWAL)

        The current status is recorded so a rejected withdrawal can restore
        it. The inventory is untouched until a manager decides.
        """
        if self.status not in WITHDRAWABLE_STATUSES:
            raise InvalidStateTransition(f"application of {self.nric}", self.status, 'withdraw')

        previous = self.status
        self.status_before_withdrawal = previous
        self.status = ApplicationStatus.PENDING_WITHDRAWAL

        self.add_event(WithdrawalRequested(
            nric=self.nric,
            project_name=self.applied_project,
            previous_status=previous.value,
            aggregate_id=self.nric,
        ))

    def approve_withdrawal(self, room: Room | None = None):
        """
        Approve the withdrawal (PENDING_WITHDRAWAL -> NONE)

        If the application held a unit (it had reached SUCCESSFUL or BOOKED)
        that unit is released back to ``room``, which is then required.

        Raises:
            InvalidStateTransition: If the status is not PENDING_WITHDRAWAL
            InventoryOverflow: If the room has no committed unit to take back
        """
        if self.status != ApplicationStatus.PENDING_WITHDRAWAL:
            raise InvalidStateTransition(f"withdrawal of {self.nric}", self.status, 'approve')

        released = self.holds_unit
        if released:
            if room is None:
                raise ValueError(f"Applicant {self.nric} holds a unit; its room is required to release it")
            self._check_room(room)
            room.release()

        project_name = self.applied_project
        self.applied_project = None
        self.chosen_room_type = None
        self.status = None
        self.status_before_withdrawal = None

        self.add_event(WithdrawalApproved(
            nric=self.nric,
            project_name=project_name,
            unit_released=released,
            aggregate_id=self.nric,
        ))

    def reject_withdrawal(self):
        """
        Reject the withdrawal (PENDING_WITHDRAWAL -> previous status)

        The status recorded at request time is restored, so a BOOKED
        applicant stays BOOKED. The inventory is untouched.
        """
        if self.status != ApplicationStatus.PENDING_WITHDRAWAL:
            raise InvalidStateTransition(f"withdrawal of {self.nric}", self.status, 'reject')

        self.status = self.status_before_withdrawal
        self.status_before_withdrawal = None

        self.add_event(WithdrawalRejected(
            nric=self.nric,
            project_name=self.applied_project,
            restored_status=self.status.value,
            aggregate_id=self.nric,
        ))

    def book(self, officer_nric: str):
        """
        Book the reserved flat (SUCCESSFUL -> BOOKED)

        The unit was reserved at approval, so the inventory is untouched.
        Officer authorization is checked by the booking workflow.
        """
        if self.status != ApplicationStatus.SUCCESSFUL:
            raise InvalidStateTransition(f"application of {self.nric}", self.status, 'book')

        self.status = ApplicationStatus.BOOKED

        self.add_event(FlatBooked(
            nric=self.nric,
            project_name=self.applied_project,
            room_type=self.chosen_room_type.value,
            officer_nric=normalize_nric(officer_nric),
            aggregate_id=self.nric,
        ))

    def _check_room(self, room: Room):
        if room.project_name.casefold() != self.applied_project.casefold() or room.room_type != self.chosen_room_type:
            raise ValueError(
                f"Room {room!r} is not the {self.chosen_room_type.value} room of "
                f"{self.applied_project} chosen by {self.nric}"
            )

    def __str__(self):
        state = self.status.value if self.status else 'NONE'
        return f"Applicant {self.nric} ({state})"

    def __repr__(self):
        return (
            f"Applicant(nric={self.nric}, applied_project={self.applied_project!r}, "
            f"chosen_room_type={self.chosen_room_type}, status={self.status})"
        )

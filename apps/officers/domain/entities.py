"""
Officer Domain Entities

An officer is an applicant who may additionally be authorized to handle
projects. The two roles are composed, not inherited: an Officer holds its
applicant-role state (an Applicant) next to an independent list of
registrations, and each role is exposed through its own protocol.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Protocol
from uuid import UUID, uuid4

from shared.domain.base import Aggregate, Entity
from shared.domain.exceptions import (
    InvalidStateTransition,
    NoSlotAvailable,
    NotAuthorized,
    RoleConflict,
    ScheduleConflict,
)
from shared.domain.value_objects import normalize_nric

from apps.applications.domain.entities import Applicant, ApplicationStatus
from apps.officers.domain.events import (
    OfficerRegistrationApproved,
    OfficerRegistrationRejected,
    OfficerRegistrationRequested,
)
from apps.projects.domain.entities import Project


class RegistrationStatus(Enum):
    """
    Officer Registration Finite State Machine (per officer and project)

    State transitions:
    - NONE -> PENDING (officer asked to handle the project)
    - PENDING -> APPROVED (project manager approved, one slot taken)
    - PENDING -> REJECTED (project manager rejected)
    """
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'


class ApplicantRole(Protocol):
    """What the application lifecycle needs to know about a person"""
    nric: str
    status: Optional[ApplicationStatus]
    applied_project: Optional[str]

    @property
    def has_application(self) -> bool: ...


class OfficerRole(Protocol):
    """What the booking workflow needs to know about an officer"""

    @property
    def nric(self) -> str: ...

    def is_approved_for(self, project_name: str) -> bool: ...


@dataclass(eq=False)
class OfficerRegistration(Entity):
    """One request of an officer to handle one project"""
    project_name: str
    status: RegistrationStatus = RegistrationStatus.PENDING
    decided_by: str | None = None
    requested_at: datetime = field(default_factory=datetime.now)
    decided_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    @property
    def identity(self):
        return self.id

    @property
    def is_live(self) -> bool:
        """PENDING and APPROVED registrations tie the officer to the project's period"""
        return self.status in (RegistrationStatus.PENDING, RegistrationStatus.APPROVED)

    def concerns(self, project_name: str) -> bool:
        return self.project_name.casefold() == project_name.strip().casefold()


@dataclass(eq=False)
class Officer(Aggregate):
    """
    Officer Aggregate Root

    Key invariants:
    - At most one PENDING registration at a time
    - Live registrations never cover overlapping project periods
    - No registration may be requested while the applicant role has a
      live application
    """

    applicant: Applicant
    registrations: List[OfficerRegistration] = field(default_factory=list)

    def __post_init__(self):
        pending = [r for r in self.registrations if r.status == RegistrationStatus.PENDING]
        if len(pending) > 1:
            raise ValueError(f"Officer {self.nric} has more than one pending registration")

    @property
    def identity(self):
        return self.applicant.nric

    @property
    def nric(self) -> str:
        return self.applicant.nric

    @property
    def name(self) -> str:
        return self.applicant.name

    @property
    def applicant_role(self) -> ApplicantRole:
        """The officer seen through the application lifecycle"""
        return self.applicant

    @property
    def pending_registration(self) -> Optional[OfficerRegistration]:
        return next(
            (r for r in self.registrations if r.status == RegistrationStatus.PENDING),
            None
        )

    @property
    def live_registrations(self) -> List[OfficerRegistration]:
        return [r for r in self.registrations if r.is_live]

    def registration_for(self, project_name: str) -> Optional[OfficerRegistration]:
        """Most recent registration for a project"""
        matching = [r for r in self.registrations if r.concerns(project_name)]
        return matching[-1] if matching else None

    def is_approved_for(self, project_name: str) -> bool:
        return any(
            r.status == RegistrationStatus.APPROVED and r.concerns(project_name)
            for r in self.registrations
        )

    def handles_period_of(self, project: Project, live_projects: Iterable[Project]) -> bool:
        """True if a live registration covers a period overlapping ``project``"""
        live_names = {r.project_name.casefold() for r in self.live_registrations}
        return any(
            p.identity in live_names and p.overlaps(project)
            for p in live_projects
        )

    def request_registration(self, project: Project, live_projects: Iterable[Project]):
        """
        Ask to handle a project (NONE -> PENDING)

        ``live_projects`` are the projects of this officer's PENDING and
        APPROVED registrations, needed for the period overlap check.

        Raises:
            RoleConflict: If the applicant role has a live application
            InvalidStateTransition: If another registration is still pending
            ScheduleConflict: If a live registration's period overlaps
            NoSlotAvailable: If the project has no free officer slot
        """
        applicant = self.applicant_role
        if applicant.has_application:
            raise RoleConflict(
                f"Officer {self.nric} has an application for project "
                f"'{applicant.applied_project}' and cannot register to handle projects"
            )

        pending = self.pending_registration
        if pending is not None:
            raise InvalidStateTransition(
                f"officer {self.nric} (pending for '{pending.project_name}')",
                pending.status,
                'request another registration for',
            )

        live_projects = list(live_projects)
        for other in live_projects:
            registration = self.registration_for(other.name)
            if registration is not None and registration.is_live and other.overlaps(project):
                raise ScheduleConflict(
                    f"Officer {self.nric} is {registration.status.value} for project "
                    f"'{other.name}' ({other.application_period}) which overlaps "
                    f"'{project.name}' ({project.application_period})"
                )

        if project.officer_slots <= 0:
            raise NoSlotAvailable(project.name)

        self.registrations.append(OfficerRegistration(project_name=project.name))

        self.add_event(OfficerRegistrationRequested(
            officer_nric=self.nric,
            project_name=project.name,
            aggregate_id=self.nric,
        ))

    def approve_registration(self, manager_nric: str, project: Project):
        """
        Approve the pending registration (PENDING -> APPROVED)

        Takes one of the project's officer slots.

        Raises:
            InvalidStateTransition: If nothing is pending
            NotAuthorized: If the manager does not own the project
            NoSlotAvailable: If the project has no slot left
        """
        registration = self._pending_for(project, 'approve registration of')
        manager_nric = normalize_nric(manager_nric)
        if not project.is_managed_by(manager_nric):
            raise NotAuthorized(
                f"Manager {manager_nric} is not in charge of project '{project.name}'"
            )

        project.take_officer_slot(self.nric)
        registration.status = RegistrationStatus.APPROVED
        registration.decided_by = manager_nric
        registration.decided_at = datetime.now()

        self.add_event(OfficerRegistrationApproved(
            officer_nric=self.nric,
            project_name=project.name,
            manager_nric=manager_nric,
            aggregate_id=self.nric,
        ))

    def reject_registration(self, manager_nric: str, project: Project):
        """Reject the pending registration (PENDING -> REJECTED)"""
        registration = self._pending_for(project, 'reject registration of')
        manager_nric = normalize_nric(manager_nric)
        if not project.is_managed_by(manager_nric):
            raise NotAuthorized(
                f"Manager {manager_nric} is not in charge of project '{project.name}'"
            )

        registration.status = RegistrationStatus.REJECTED
        registration.decided_by = manager_nric
        registration.decided_at = datetime.now()

        self.add_event(OfficerRegistrationRejected(
            officer_nric=self.nric,
            project_name=project.name,
            manager_nric=manager_nric,
            aggregate_id=self.nric,
        ))

    def require_pending(self, action: str) -> OfficerRegistration:
        """The PENDING registration; InvalidStateTransition if there is none"""
        registration = self.pending_registration
        if registration is None:
            latest = self.registrations[-1] if self.registrations else None
            raise InvalidStateTransition(
                f"officer {self.nric}", latest.status if latest else None, action
            )
        return registration

    def _pending_for(self, project: Project, action: str) -> OfficerRegistration:
        registration = self.require_pending(action)
        if not registration.concerns(project.name):
            raise ValueError(
                f"Officer {self.nric} is pending for '{registration.project_name}', not '{project.name}'"
            )
        return registration

    def __str__(self):
        return f"Officer {self.nric} ({len(self.live_registrations)} live registrations)"

"""
Housing Units of Work

Bind the repositories of every bounded context to one consistency scope.
Handlers receive a zero-argument factory and open a fresh unit of work per
command:

    with self.uow_factory() as uow:
        applicant = uow.applicants.get(nric, lock=True)
        ...

Lock order inside a unit of work is applicant/officer, then project, then
room; handlers request locked reads in that order.
"""

from dataclasses import dataclass, field
from typing import Dict
from uuid import UUID

from shared.application.locks import KeyedLockRegistry
from shared.application.uow import DjangoUnitOfWork, InMemoryUnitOfWork

from apps.applications.domain.entities import Applicant
from apps.applications.repositories import (
    ApplicantRepository,
    DjangoApplicantRepository,
    InMemoryApplicantRepository,
)
from apps.enquiries.domain.entities import Enquiry
from apps.enquiries.repositories import (
    DjangoEnquiryRepository,
    EnquiryRepository,
    InMemoryEnquiryRepository,
)
from apps.officers.domain.entities import Officer
from apps.officers.repositories import (
    DjangoOfficerRepository,
    InMemoryOfficerRepository,
    OfficerRepository,
)
from apps.projects.domain.entities import Manager, Project
from apps.projects.domain.filters import ProjectFilter
from apps.projects.repositories import (
    DjangoManagerRepository,
    DjangoProjectRepository,
    DjangoRoomInventoryRepository,
    DjangoProjectFilterRepository,
    InMemoryManagerRepository,
    InMemoryProjectFilterRepository,
    InMemoryProjectRepository,
    InMemoryRoomInventoryRepository,
    ManagerRepository,
    ProjectFilterRepository,
    ProjectRepository,
    RoomInventoryRepository,
)


class HousingUnitOfWork:
    """Repositories every housing unit of work exposes"""
    managers: ManagerRepository
    projects: ProjectRepository
    rooms: RoomInventoryRepository
    applicants: ApplicantRepository
    officers: OfficerRepository
    enquiries: EnquiryRepository
    project_filters: ProjectFilterRepository


class DjangoHousingUnitOfWork(HousingUnitOfWork, DjangoUnitOfWork):
    """Database-backed unit of work; one transaction per command"""

    def __init__(self, bus=None):
        super().__init__(bus)
        self.managers = DjangoManagerRepository()
        self.projects = DjangoProjectRepository()
        self.rooms = DjangoRoomInventoryRepository()
        self.applicants = DjangoApplicantRepository()
        self.officers = DjangoOfficerRepository()
        self.enquiries = DjangoEnquiryRepository()
        self.project_filters = DjangoProjectFilterRepository()


@dataclass
class InMemoryStore:
    """
    Process-wide state shared by in-memory units of work.

    Officers share their embedded Applicant object with ``applicants``.
    """
    managers: Dict[str, Manager] = field(default_factory=dict)
    projects: Dict[str, Project] = field(default_factory=dict)
    applicants: Dict[str, Applicant] = field(default_factory=dict)
    officers: Dict[str, Officer] = field(default_factory=dict)
    enquiries: Dict[UUID, Enquiry] = field(default_factory=dict)
    project_filters: Dict[str, ProjectFilter] = field(default_factory=dict)
    locks: KeyedLockRegistry = field(default_factory=KeyedLockRegistry)

    def unit_of_work(self, bus=None) -> 'InMemoryHousingUnitOfWork':
        return InMemoryHousingUnitOfWork(self, bus)


class InMemoryHousingUnitOfWork(HousingUnitOfWork, InMemoryUnitOfWork):
    """Unit of work over an InMemoryStore, serialized with keyed locks"""

    def __init__(self, store: InMemoryStore, bus=None):
        super().__init__(store.locks, bus)
        self.store = store
        self.managers = InMemoryManagerRepository(store.managers)
        self.projects = InMemoryProjectRepository(store.projects, self.acquire)
        self.rooms = InMemoryRoomInventoryRepository(store.projects, self.acquire)
        self.applicants = InMemoryApplicantRepository(store.applicants, self.acquire)
        self.officers = InMemoryOfficerRepository(store.officers, store.applicants, self.acquire)
        self.enquiries = InMemoryEnquiryRepository(store.enquiries, self.acquire)
        self.project_filters = InMemoryProjectFilterRepository(store.project_filters)

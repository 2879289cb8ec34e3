"""Shared pytest fixtures: an in-memory housing store seeded with one project."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.value_objects import DateRange, Money

from apps.applications.domain.eligibility import EligibilityPolicy
from apps.applications.domain.entities import Applicant
from apps.core.bootstrap import bootstrap
from apps.core.uow import InMemoryStore
from apps.officers.domain.entities import Officer
from apps.projects.domain.entities import Manager, Project
from apps.projects.domain.inventory import Room, RoomType

TODAY = date(2025, 2, 15)


def make_project(name, manager_nric, start, end, two_room=(2, '350000'), three_room=(3, '450000'), officer_slots=2):
    rooms = []
    if two_room:
        rooms.append(Room(name, RoomType.TWO_ROOM, two_room[0], two_room[0], Money(Decimal(two_room[1]))))
    if three_room:
        rooms.append(Room(name, RoomType.THREE_ROOM, three_room[0], three_room[0], Money(Decimal(three_room[1]))))
    return Project(
        name=name,
        neighbourhood='Yishun',
        application_period=DateRange(start, end),
        manager_nric=manager_nric,
        officer_slots=officer_slots,
        rooms=rooms,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def event_bus():
    return MessageBus()


@pytest.fixture
def uow_factory(store, event_bus):
    def factory():
        return store.unit_of_work(event_bus)
    return factory


@pytest.fixture
def bus(uow_factory, event_bus):
    return bootstrap(
        uow_factory=uow_factory,
        bus=event_bus,
        clock=lambda: TODAY,
        policy=EligibilityPolicy(),
    )


@pytest.fixture
def seed(store, uow_factory):
    """
    Manager Jessica owns Acacia Breeze (2 two-room, 3 three-room units,
    open all of Q1 2025). John is single and 35, Sarah married and 24,
    Grace single and 30. Daniel is an officer without registrations.
    """
    people = SimpleNamespace(
        manager='S5678901G',
        other_manager='T8765432F',
        single='S1234567A',
        married='T7654321B',
        young='S9876543C',
        officer='T2109876H',
        project='Acacia Breeze',
        today=TODAY,
    )

    with uow_factory() as uow:
        uow.managers.add(Manager(people.manager, 'Jessica'))
        uow.managers.add(Manager(people.other_manager, 'Michael'))
        uow.projects.add(make_project(people.project, people.manager, date(2025, 1, 1), date(2025, 3, 31)))
        uow.applicants.add(Applicant(people.single, 'John', 35, False))
        uow.applicants.add(Applicant(people.married, 'Sarah', 24, True))
        uow.applicants.add(Applicant(people.young, 'Grace', 30, False))
        uow.officers.add(Officer(applicant=Applicant(people.officer, 'Daniel', 36, False)))

    return people

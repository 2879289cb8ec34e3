"""Application lifecycle through the message bus on the in-memory store."""

import threading
import time
from datetime import date
from decimal import Decimal

import pytest

from shared.domain.exceptions import (
    InvalidStateTransition,
    InventoryExhausted,
    NotAuthorized,
    NotEligible,
    NotFound,
    RoleConflict,
)

from apps.applications.application.command_handlers import (
    ApproveApplicationCommand,
    ApproveWithdrawalCommand,
    RejectApplicationCommand,
    RejectWithdrawalCommand,
    RequestWithdrawalCommand,
    SubmitApplicationCommand,
)
from apps.applications.application.queries import applications_for_project, pending_withdrawals
from apps.applications.domain.eligibility import eligible_room_types
from apps.applications.domain.entities import Applicant, ApplicationStatus
from apps.applications.domain.events import ApplicationApproved
from apps.officers.application.command_handlers import (
    ApproveRegistrationCommand,
    RequestRegistrationCommand,
)
from apps.projects.application.command_handlers import CreateProjectCommand, RoomSpec
from apps.projects.domain.inventory import Room, RoomType


def applicant(uow_factory, nric):
    with uow_factory() as uow:
        return uow.applicants.get(nric)


def room(uow_factory, project_name, room_type):
    with uow_factory() as uow:
        return uow.rooms.get(project_name, room_type)


def test_scenario_a_third_approval_exhausts_two_room(bus, seed, uow_factory):
    with uow_factory() as uow:
        uow.applicants.add(Applicant('S3456789D', 'Aisha', 29, True))
    nrics = [seed.single, seed.married, 'S3456789D']
    for nric in nrics:
        bus.handle_command(SubmitApplicationCommand(nric, seed.project, RoomType.TWO_ROOM))

    bus.handle_command(ApproveApplicationCommand(seed.manager, nrics[0]))
    bus.handle_command(ApproveApplicationCommand(seed.manager, nrics[1]))
    assert room(uow_factory, seed.project, RoomType.TWO_ROOM).available_units == 0

    with pytest.raises(InventoryExhausted):
        bus.handle_command(ApproveApplicationCommand(seed.manager, nrics[2]))

    assert applicant(uow_factory, nrics[2]).status == ApplicationStatus.PENDING
    assert room(uow_factory, seed.project, RoomType.TWO_ROOM).available_units == 0


def test_scenario_c_single_under_age_is_not_eligible(bus, seed, uow_factory):
    bus.handle_command(CreateProjectCommand(
        manager_nric=seed.other_manager,
        name='Bedok Vista',
        neighbourhood='Bedok',
        open_date=date(2025, 2, 1),
        close_date=date(2025, 2, 28),
        rooms=[RoomSpec(RoomType.THREE_ROOM, 5, Decimal('450000'))],
    ))

    assert eligible_room_types(30, False, [RoomType.THREE_ROOM]) == frozenset()
    with pytest.raises(NotEligible):
        bus.handle_command(SubmitApplicationCommand(seed.young, 'Bedok Vista', RoomType.THREE_ROOM))

    assert applicant(uow_factory, seed.young).status is None


def test_scenario_d_rejected_withdrawal_keeps_successful(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.THREE_ROOM))
    bus.handle_command(ApproveApplicationCommand(seed.manager, seed.married))
    assert room(uow_factory, seed.project, RoomType.THREE_ROOM).available_units == 2

    bus.handle_command(RequestWithdrawalCommand(seed.married))
    assert room(uow_factory, seed.project, RoomType.THREE_ROOM).available_units == 2
    with uow_factory() as uow:
        assert [a.nric for a in pending_withdrawals(uow, seed.project)] == [seed.married]

    bus.handle_command(RejectWithdrawalCommand(seed.manager, seed.married))

    assert applicant(uow_factory, seed.married).status == ApplicationStatus.SUCCESSFUL
    assert room(uow_factory, seed.project, RoomType.THREE_ROOM).available_units == 2


def test_approved_withdrawal_releases_unit(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, 'TwoRoom'))
    bus.handle_command(ApproveApplicationCommand(seed.manager, seed.single))
    bus.handle_command(RequestWithdrawalCommand(seed.single))

    bus.handle_command(ApproveWithdrawalCommand(seed.manager, seed.single))

    withdrawn = applicant(uow_factory, seed.single)
    assert withdrawn.status is None
    assert withdrawn.applied_project is None
    assert room(uow_factory, seed.project, RoomType.TWO_ROOM).available_units == 2


def test_rejected_application_frees_applicant(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, RoomType.TWO_ROOM))
    bus.handle_command(RejectApplicationCommand(seed.manager, seed.single))

    with pytest.raises(InvalidStateTransition):
        bus.handle_command(RejectApplicationCommand(seed.manager, seed.single))

    rejected = applicant(uow_factory, seed.single)
    assert rejected.status == ApplicationStatus.UNSUCCESSFUL
    assert room(uow_factory, seed.project, RoomType.TWO_ROOM).available_units == 2


def test_single_applicant_cannot_pick_three_room(bus, seed, uow_factory):
    with pytest.raises(NotEligible):
        bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, RoomType.THREE_ROOM))
    assert applicant(uow_factory, seed.single).status is None


def test_hidden_project_refuses_applications(bus, seed, uow_factory):
    with uow_factory() as uow:
        uow.projects.get(seed.project).set_visibility(False)

    with pytest.raises(NotEligible):
        bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.TWO_ROOM))


def test_unknown_project_or_applicant(bus, seed):
    with pytest.raises(NotFound):
        bus.handle_command(SubmitApplicationCommand(seed.married, 'Nowhere', RoomType.TWO_ROOM))
    with pytest.raises(NotFound):
        bus.handle_command(SubmitApplicationCommand('S0000000Z', seed.project, RoomType.TWO_ROOM))


def test_only_the_project_manager_decides(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.TWO_ROOM))

    with pytest.raises(NotAuthorized):
        bus.handle_command(ApproveApplicationCommand(seed.other_manager, seed.married))

    assert applicant(uow_factory, seed.married).status == ApplicationStatus.PENDING
    assert room(uow_factory, seed.project, RoomType.TWO_ROOM).available_units == 2


def test_approving_without_application_is_refused(bus, seed):
    with pytest.raises(InvalidStateTransition):
        bus.handle_command(ApproveApplicationCommand(seed.manager, seed.married))


def test_officer_cannot_apply_to_project_they_handle(bus, seed, uow_factory):
    bus.handle_command(RequestRegistrationCommand(seed.officer, seed.project))
    bus.handle_command(ApproveRegistrationCommand(seed.manager, seed.officer))

    with pytest.raises(RoleConflict):
        bus.handle_command(SubmitApplicationCommand(seed.officer, seed.project, RoomType.TWO_ROOM))

    assert applicant(uow_factory, seed.officer).status is None


def test_applications_for_project_filters_by_status(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, RoomType.TWO_ROOM))
    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.THREE_ROOM))
    bus.handle_command(ApproveApplicationCommand(seed.manager, seed.married))

    with uow_factory() as uow:
        everyone = applications_for_project(uow, 'acacia breeze')
        pending = applications_for_project(uow, seed.project, ApplicationStatus.PENDING)

    assert [a.nric for a in everyone] == sorted([seed.single, seed.married])
    assert [a.nric for a in pending] == [seed.single]


def test_events_are_published_after_commit(bus, seed, event_bus):
    received = []
    event_bus.register_event_handler(ApplicationApproved, received.append)

    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.TWO_ROOM))
    bus.handle_command(ApproveApplicationCommand(seed.manager, seed.married))

    [event] = received
    assert event.nric == seed.married
    assert event.room_type == 'TwoRoom'


def test_failed_command_publishes_nothing(bus, seed, event_bus):
    received = []
    event_bus.register_event_handler(ApplicationApproved, received.append)

    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.TWO_ROOM))
    with pytest.raises(NotAuthorized):
        bus.handle_command(ApproveApplicationCommand(seed.other_manager, seed.married))

    assert received == []


def test_concurrent_approvals_for_last_unit(bus, seed, uow_factory, monkeypatch):
    bus.handle_command(CreateProjectCommand(
        manager_nric=seed.other_manager,
        name='Bedok Vista',
        neighbourhood='Bedok',
        open_date=date(2025, 2, 1),
        close_date=date(2025, 2, 28),
        rooms=[RoomSpec(RoomType.TWO_ROOM, 1, Decimal('300000'))],
    ))
    contenders = [seed.single, seed.married]
    for nric in contenders:
        bus.handle_command(SubmitApplicationCommand(nric, 'Bedok Vista', RoomType.TWO_ROOM))

    original_reserve = Room.reserve
    inside = []
    overlapped = []

    def slow_reserve(self):
        inside.append(threading.get_ident())
        if len(inside) > 1:
            overlapped.append(True)
        time.sleep(0.05)
        try:
            original_reserve(self)
        finally:
            inside.pop()

    monkeypatch.setattr(Room, 'reserve', slow_reserve)

    start = threading.Barrier(len(contenders))
    outcomes = {}

    def approve(nric):
        start.wait()
        try:
            bus.handle_command(ApproveApplicationCommand(seed.other_manager, nric))
            outcomes[nric] = 'approved'
        except InventoryExhausted:
            outcomes[nric] = 'exhausted'

    threads = [threading.Thread(target=approve, args=(nric,)) for nric in contenders]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert sorted(outcomes.values()) == ['approved', 'exhausted']
    assert overlapped == []
    assert room(uow_factory, 'Bedok Vista', RoomType.TWO_ROOM).available_units == 0

    statuses = sorted(applicant(uow_factory, nric).status.value for nric in contenders)
    assert statuses == ['PENDING', 'SUCCESSFUL']

"""Project catalogue commands and queries."""

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.exceptions import (
    AlreadyExists,
    InvalidStateTransition,
    NotAuthorized,
    NotFound,
    ScheduleConflict,
)
from shared.domain.value_objects import Money

from apps.applications.application.command_handlers import SubmitApplicationCommand
from apps.applications.domain.eligibility import EligibilityPolicy
from apps.enquiries.application.command_handlers import SubmitEnquiryCommand
from apps.projects.application.command_handlers import (
    AddRoomSupplyCommand,
    CreateProjectCommand,
    DeleteProjectCommand,
    EditProjectCommand,
    RoomSpec,
    SetProjectFilterCommand,
    ToggleVisibilityCommand,
)
from apps.projects.application.queries import available_projects_for, projects_managed_by
from apps.projects.domain.filters import ProjectFilter
from apps.projects.domain.inventory import RoomType


def create_command(manager, name='Bedok Vista', open_date=date(2025, 2, 1), close_date=date(2025, 2, 28), **extra):
    values = dict(
        manager_nric=manager,
        name=name,
        neighbourhood='Bedok',
        open_date=open_date,
        close_date=close_date,
        rooms=[
            RoomSpec(RoomType.TWO_ROOM, 4, Decimal('300000')),
            RoomSpec('ThreeRoom', 2, Decimal('420000')),
        ],
        officer_slots=3,
    )
    values.update(extra)
    return CreateProjectCommand(**values)


def test_create_project(bus, seed, uow_factory):
    project = bus.handle_command(create_command(seed.other_manager))

    assert project.manager_nric == seed.other_manager
    with uow_factory() as uow:
        stored = uow.projects.get('bedok vista')
        assert stored.room(RoomType.TWO_ROOM).available_units == 4
        assert stored.room(RoomType.THREE_ROOM).price == Money(Decimal('420000'))
        assert [p.name for p in projects_managed_by(uow, seed.other_manager)] == ['Bedok Vista']


def test_create_requires_rooms_and_valid_period(bus, seed):
    with pytest.raises(ValueError):
        bus.handle_command(create_command(seed.other_manager, rooms=[]))
    with pytest.raises(ValueError):
        bus.handle_command(create_command(
            seed.other_manager, open_date=date(2025, 3, 1), close_date=date(2025, 2, 1),
        ))


def test_manager_periods_may_not_overlap(bus, seed):
    with pytest.raises(ScheduleConflict):
        bus.handle_command(create_command(seed.manager))

    project = bus.handle_command(create_command(
        seed.manager, open_date=date(2025, 4, 1), close_date=date(2025, 4, 30),
    ))
    assert project.name == 'Bedok Vista'


def test_duplicate_name_and_unknown_manager(bus, seed):
    with pytest.raises(AlreadyExists):
        bus.handle_command(create_command(seed.other_manager, name='ACACIA BREEZE'))
    with pytest.raises(NotFound):
        bus.handle_command(create_command('S0000000Z'))


def test_edit_project(bus, seed, uow_factory):
    bus.handle_command(EditProjectCommand(
        manager_nric=seed.manager,
        project_name=seed.project,
        neighbourhood='Yishun North',
        close_date=date(2025, 4, 30),
        officer_slots=5,
        prices={RoomType.TWO_ROOM: Decimal('360000')},
    ))

    with uow_factory() as uow:
        project = uow.projects.get(seed.project)
        assert project.neighbourhood == 'Yishun North'
        assert project.application_period.end_date == date(2025, 4, 30)
        assert project.officer_slots == 5
        assert project.room(RoomType.TWO_ROOM).price == Money(Decimal('360000'))
        assert project.room(RoomType.THREE_ROOM).price == Money(Decimal('450000'))


def test_edit_into_overlap_is_refused(bus, seed, uow_factory):
    bus.handle_command(create_command(seed.manager, open_date=date(2025, 5, 1), close_date=date(2025, 5, 31)))

    with pytest.raises(ScheduleConflict):
        bus.handle_command(EditProjectCommand(
            manager_nric=seed.manager,
            project_name=seed.project,
            close_date=date(2025, 5, 10),
        ))

    with uow_factory() as uow:
        assert uow.projects.get(seed.project).application_period.end_date == date(2025, 3, 31)


def test_edit_with_unknown_room_type_changes_nothing(bus, seed, uow_factory):
    bus.handle_command(create_command(seed.other_manager, rooms=[RoomSpec(RoomType.TWO_ROOM, 1)]))

    with pytest.raises(NotFound):
        bus.handle_command(EditProjectCommand(
            manager_nric=seed.other_manager,
            project_name='Bedok Vista',
            neighbourhood='Tampines',
            prices={RoomType.THREE_ROOM: Decimal('1')},
        ))

    with uow_factory() as uow:
        assert uow.projects.get('Bedok Vista').neighbourhood == 'Bedok'


@pytest.mark.parametrize('details', [
    {'neighbourhood': '   '},
    {'officer_slots': -1},
])
def test_refused_edit_keeps_the_period(bus, seed, uow_factory, details):
    with pytest.raises(ValueError):
        bus.handle_command(EditProjectCommand(
            manager_nric=seed.manager,
            project_name=seed.project,
            close_date=date(2025, 6, 30),
            **details,
        ))

    with uow_factory() as uow:
        project = uow.projects.get(seed.project)
        assert project.application_period.end_date == date(2025, 3, 31)
        assert project.neighbourhood == 'Yishun'
        assert project.officer_slots == 2


def test_only_owner_edits(bus, seed):
    with pytest.raises(NotAuthorized):
        bus.handle_command(EditProjectCommand(seed.other_manager, seed.project, neighbourhood='Woodlands'))
    with pytest.raises(NotAuthorized):
        bus.handle_command(ToggleVisibilityCommand(seed.other_manager, seed.project))
    with pytest.raises(NotAuthorized):
        bus.handle_command(AddRoomSupplyCommand(seed.other_manager, seed.project, RoomType.TWO_ROOM, 1))


def test_add_room_supply(bus, seed, uow_factory):
    room = bus.handle_command(AddRoomSupplyCommand(seed.manager, seed.project, 'TwoRoom', 3))

    assert (room.available_units, room.total_units) == (5, 5)
    with uow_factory() as uow:
        assert uow.rooms.get(seed.project, RoomType.TWO_ROOM).total_units == 5


def test_toggle_visibility(bus, seed):
    hidden = bus.handle_command(ToggleVisibilityCommand(seed.manager, seed.project))
    assert not hidden.visible

    still_hidden = bus.handle_command(ToggleVisibilityCommand(seed.manager, seed.project, visible=False))
    assert not still_hidden.visible

    shown = bus.handle_command(ToggleVisibilityCommand(seed.manager, seed.project))
    assert shown.visible


def test_available_projects_respect_eligibility_and_visibility(bus, seed, uow_factory):
    bus.handle_command(create_command(
        seed.other_manager, rooms=[RoomSpec(RoomType.THREE_ROOM, 2, Decimal('420000'))],
    ))
    policy = EligibilityPolicy()

    with uow_factory() as uow:
        for_single = available_projects_for(uow, seed.single, seed.today, policy)
        for_married = available_projects_for(uow, seed.married, seed.today, policy)
        for_young = available_projects_for(uow, seed.young, seed.today, policy)

    assert [(a.project.name, a.eligible_room_types) for a in for_single] == [
        (seed.project, frozenset({RoomType.TWO_ROOM})),
    ]
    assert [a.project.name for a in for_married] == [seed.project, 'Bedok Vista']
    assert for_young == []

    bus.handle_command(ToggleVisibilityCommand(seed.manager, seed.project, visible=False))
    with uow_factory() as uow:
        assert available_projects_for(uow, seed.single, seed.today, policy) == []
        assert available_projects_for(uow, seed.single, date(2025, 4, 1), policy) == []


def test_project_filter_matches_neighbourhood_and_room_type(seed, uow_factory):
    with uow_factory() as uow:
        project = uow.projects.get(seed.project)

    assert ProjectFilter().matches(project)
    assert ProjectFilter(neighbourhood=' YISHUN ').matches(project)
    assert ProjectFilter(room_type='ThreeRoom').matches(project)
    assert not ProjectFilter(neighbourhood='Bedok').matches(project)
    assert ProjectFilter(neighbourhood='   ').is_empty
    with pytest.raises(ValueError):
        ProjectFilter(room_type='FiveRoom')


def test_saved_filter_narrows_available_projects(bus, seed, uow_factory):
    bus.handle_command(create_command(seed.other_manager))
    policy = EligibilityPolicy()

    bus.handle_command(SetProjectFilterCommand(seed.married, neighbourhood='bedok'))
    bus.handle_command(SetProjectFilterCommand(seed.single, room_type=RoomType.THREE_ROOM))

    with uow_factory() as uow:
        for_married = available_projects_for(uow, seed.married, seed.today, policy)
        for_single = available_projects_for(uow, seed.single, seed.today, policy)
        overridden = available_projects_for(uow, seed.married, seed.today, policy, project_filter=ProjectFilter())

    assert [a.project.name for a in for_married] == ['Bedok Vista']
    assert for_single == []
    assert [a.project.name for a in overridden] == [seed.project, 'Bedok Vista']

    cleared = bus.handle_command(SetProjectFilterCommand(seed.married))
    assert cleared.is_empty
    with uow_factory() as uow:
        assert uow.project_filters.get(seed.married).is_empty
        assert len(available_projects_for(uow, seed.married, seed.today, policy)) == 2


def test_managed_projects_sorted_by_name(bus, seed, uow_factory):
    bus.handle_command(create_command(
        seed.other_manager, name='zenith court', open_date=date(2025, 1, 1), close_date=date(2025, 1, 31),
        rooms=[RoomSpec(RoomType.TWO_ROOM, 1)],
    ))
    bus.handle_command(create_command(seed.other_manager))

    with uow_factory() as uow:
        assert [p.name for p in projects_managed_by(uow, seed.other_manager)] == ['Bedok Vista', 'zenith court']
        only_three_room = projects_managed_by(uow, seed.other_manager, ProjectFilter(room_type='ThreeRoom'))
        assert [p.name for p in only_three_room] == ['Bedok Vista']

    bus.handle_command(SetProjectFilterCommand(seed.other_manager, neighbourhood='Tampines'))
    with uow_factory() as uow:
        assert projects_managed_by(uow, seed.other_manager) == []


def test_delete_project_in_use_is_refused(bus, seed, uow_factory):
    bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, RoomType.TWO_ROOM))

    with pytest.raises(InvalidStateTransition):
        bus.handle_command(DeleteProjectCommand(seed.manager, seed.project))

    with uow_factory() as uow:
        assert uow.projects.find(seed.project) is not None


def test_delete_project_removes_enquiries(bus, seed, uow_factory):
    bus.handle_command(create_command(seed.other_manager))
    bus.handle_command(SubmitEnquiryCommand(seed.single, 'Bedok Vista', 'Is it near the MRT?'))

    bus.handle_command(DeleteProjectCommand(seed.other_manager, 'Bedok Vista'))

    with uow_factory() as uow:
        assert uow.projects.find('Bedok Vista') is None
        assert uow.enquiries.list_by_applicant(seed.single) == []

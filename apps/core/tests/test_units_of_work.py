"""In-memory unit of work: keyed locks, commit and rollback."""

import threading
from datetime import date

import pytest

from shared.application.locks import KeyedLockRegistry, applicant_key, officer_key, room_key
from shared.application.message_bus import MessageBus
from shared.domain.exceptions import NotFound
from shared.domain.value_objects import DateRange, normalize_nric

from apps.applications.application.command_handlers import SubmitApplicationCommand
from apps.applications.domain.events import ApplicationSubmitted
from apps.projects.domain.inventory import RoomType


def test_lock_keys_are_normalized_and_evicted():
    registry = KeyedLockRegistry()

    assert registry.acquire(applicant_key('s1234567a'))
    assert registry.acquire(applicant_key('S1234567A'))
    assert len(registry) == 1

    registry.release(applicant_key('S1234567A'))
    assert applicant_key('s1234567a') in registry
    registry.release(applicant_key('s1234567a'))
    assert len(registry) == 0

    assert room_key('Acacia Breeze', RoomType.TWO_ROOM) == room_key('ACACIA BREEZE', 'TwoRoom')


def test_timed_out_waiter_leaves_no_lock_behind():
    registry = KeyedLockRegistry()
    key = applicant_key('S1234567A')
    registry.acquire(key)
    results = []

    thread = threading.Thread(target=lambda: results.append(registry.acquire(key, timeout=0.05)))
    thread.start()
    thread.join()

    assert results == [False]
    registry.release(key)
    assert key not in registry


def test_locks_are_released_when_command_fails(store, seed):
    with pytest.raises(NotFound):
        with store.unit_of_work() as uow:
            uow.applicants.get(seed.single, lock=True)
            uow.projects.get('Nowhere', lock=True)

    assert len(store.locks) == 0

    acquired = []

    def other_thread():
        key = applicant_key(seed.single)
        acquired.append(store.locks.acquire(key, timeout=1))
        store.locks.release(key)

    thread = threading.Thread(target=other_thread)
    thread.start()
    thread.join()
    assert acquired == [True]


def test_non_officer_lookup_takes_no_lock(bus, store, seed):
    with store.unit_of_work() as uow:
        assert uow.officers.find(seed.single, lock=True) is None
        assert officer_key(seed.single) not in store.locks
        assert applicant_key(seed.single) not in store.locks

    bus.handle_command(SubmitApplicationCommand(seed.single, seed.project, RoomType.TWO_ROOM))
    assert len(store.locks) == 0


def test_rollback_discards_events(store, seed):
    bus = MessageBus()
    received = []
    bus.register_event_handler(ApplicationSubmitted, received.append)

    with pytest.raises(RuntimeError):
        with store.unit_of_work(bus) as uow:
            applicant = uow.applicants.get(seed.married, lock=True)
            applicant.apply(uow.projects.get(seed.project), RoomType.TWO_ROOM)
            uow.collect_events(applicant)
            raise RuntimeError('abort')

    assert received == []

    with store.unit_of_work(bus) as uow:
        applicant = uow.applicants.get(seed.single, lock=True)
        applicant.apply(uow.projects.get(seed.project), RoomType.TWO_ROOM)
        uow.collect_events(applicant)

    assert [event.nric for event in received] == [seed.single]


def test_date_range_rules():
    period = DateRange(date(2025, 1, 1), date(2025, 1, 31))

    assert period.days == 31
    assert period.contains(date(2025, 1, 31))
    assert str(period) == '01/01/2025 - 31/01/2025'
    with pytest.raises(ValueError):
        DateRange(date(2025, 2, 1), date(2025, 1, 1))


def test_nric_normalization():
    assert normalize_nric(' s1234567a ') == 'S1234567A'
    with pytest.raises(ValueError):
        normalize_nric('  ')

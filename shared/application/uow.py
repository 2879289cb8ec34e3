"""
Unit of Work Pattern

Manages the consistency scope of a single command and ensures that domain
events are published only after a successful commit.

Two flavours are provided:
- DjangoUnitOfWork: database transaction, rows locked with SELECT FOR UPDATE
- InMemoryUnitOfWork: keyed in-process locks held until the scope exits
"""

from abc import ABC, abstractmethod
from typing import Hashable, List
import logging

from django.db import transaction

from shared.application.locks import KeyedLockRegistry
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __init__(self, bus=None):
        self._events: List[DomainEvent] = []
        self._bus = bus

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the unit of work"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the unit of work"""
        pass

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        if hasattr(aggregate, 'events'):
            new_events = aggregate.events
            if new_events:
                self._events.extend(new_events)
                aggregate.clear_events()
                logger.debug(
                    f"Collected {len(new_events)} events from "
                    f"{aggregate.__class__.__name__} ({aggregate.identity})"
                )

    def _drain_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful commit. Without a bus the events are only
        logged.
        """
        if self._bus is None:
            logger.debug(f"No message bus, dropping {len(events)} committed events")
            return

        logger.info(f"Publishing {len(events)} domain events after commit")
        try:
            self._bus.publish_events(events)
        except Exception as e:
            logger.error(f"Error publishing events: {e}", exc_info=True)
            # State is already committed


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Manages Django database transactions and ensures domain events
    are published after successful commit. Repositories asked for a
    locked read issue SELECT FOR UPDATE, which only holds inside the
    atomic block opened here.

    Usage:
        with DjangoHousingUnitOfWork() as uow:
            applicant = uow.applicants.get(nric, lock=True)
            room = uow.rooms.get(project_name, room_type, lock=True)
            applicant.approve(room)
            uow.rooms.save(room)
            uow.applicants.save(applicant)
            uow.collect_events(room)
            uow.collect_events(applicant)
        # Events are published after commit
    """

    def __init__(self, bus=None):
        super().__init__(bus)
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Commit changes and publish events

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._drain_events()
        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        """Rollback changes and discard events"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    In-process implementation of Unit of Work

    Repositories call ``acquire(key)`` before handing out an aggregate for
    update; the lock stays held until the scope exits, which serializes
    every command touching the same applicant or room type.

    Aggregates are shared live objects, so rollback only discards events.
    """

    def __init__(self, locks: KeyedLockRegistry, bus=None):
        super().__init__(bus)
        self._locks = locks
        self._held = []

    def __enter__(self):
        self._held = []
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            while self._held:
                self._locks.release(self._held.pop())

    def acquire(self, key: Hashable):
        """Take the lock for ``key`` until the unit of work ends"""
        self._locks.acquire(key)
        self._held.append(key)
        logger.debug(f"Acquired lock {key}")

    def commit(self):
        events = self._drain_events()
        logger.debug(f"Committing in-memory unit of work with {len(events)} events")
        if events:
            self._publish_events(events)

    def rollback(self):
        logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()

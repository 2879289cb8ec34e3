"""
Base Domain Classes

Foundational building blocks shared by every housing context:
- Entity: Objects with a natural identity (NRIC, project name, ...)
- ValueObject: Immutable objects compared by value
- Aggregate: Consistency boundaries that record domain events
- DomainEvent: Something that happened to an aggregate
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Hashable, List
from uuid import UUID, uuid4


@dataclass(eq=False)
class Entity(ABC):
    """
    Base class for all entities

    Entities are mutable and compared by identity. Subclasses expose their
    natural key through ``identity``; two entities of the same class with
    the same identity are equal.
    """

    @property
    @abstractmethod
    def identity(self) -> Hashable:
        """Natural key of the entity"""

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.identity == other.identity

    def __hash__(self):
        return hash((self.__class__.__name__, self.identity))


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Aggregates are the consistency boundaries of the domain. They collect
    domain events which the unit of work publishes after a successful commit.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        """Record a domain event to be published"""
        self._events.append(event)

    def clear_events(self):
        """Clear all collected events (called after collection)"""
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return self._events.copy()


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Subclasses declare their payload as positional fields; the envelope
    fields are keyword-only so they never clash with the payload order.
    """
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=datetime.now, kw_only=True)
    aggregate_id: str | None = field(default=None, kw_only=True)

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }

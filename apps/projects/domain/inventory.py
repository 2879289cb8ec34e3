"""
Room Inventory Aggregate

This is the CRITICAL aggregate for preventing double allocation.
Every unit handed to an applicant MUST go through ``Room.reserve()`` and
every unit handed back through ``Room.release()``.

Key invariant, held at all times:

    0 <= available_units <= total_units

Strategy (Defense in Depth):
1. Domain validation: reserve()/release() refuse to cross either bound
2. Database constraint: CHECK constraints on the room table
3. Pessimistic locking: SELECT FOR UPDATE (or a keyed lock in memory)
   around every reserve/release
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import InventoryExhausted, InventoryOverflow
from shared.domain.value_objects import Money

from apps.projects.domain.events import RoomSupplyIncreased, UnitReleased, UnitReserved


class RoomType(Enum):
    """Flat types a project can offer, smallest first"""
    TWO_ROOM = 'TwoRoom'
    THREE_ROOM = 'ThreeRoom'

    @classmethod
    def parse(cls, value) -> 'RoomType':
        """Accept a RoomType, its value ('TwoRoom') or its name ('TWO_ROOM')"""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.name):
                return member
        raise ValueError(f"Unknown room type: {value!r}")


@dataclass(eq=False)
class Room(Aggregate):
    """
    Room Aggregate Root

    One room-type inventory bucket of a project: how many units of this
    flat type exist, how many are still free and what one costs.

    Usage:
        # Load the room with its lock held for the rest of the unit of work
        room = uow.rooms.get(project_name, RoomType.TWO_ROOM, lock=True)

        room.reserve()          # raises InventoryExhausted at zero
        uow.rooms.save(room)
    """

    project_name: str
    room_type: RoomType
    total_units: int
    available_units: int
    price: Money = field(default_factory=lambda: Money(Decimal('0')))

    def __post_init__(self):
        self.room_type = RoomType.parse(self.room_type)
        if self.total_units < 0:
            raise ValueError("Total units cannot be negative")
        if not 0 <= self.available_units <= self.total_units:
            raise ValueError(
                f"Available units ({self.available_units}) must be between 0 "
                f"and total units ({self.total_units})"
            )

    @property
    def identity(self):
        return (self.project_name.casefold(), self.room_type)

    def reserve(self):
        """
        Commit one unit to an applicant

        Raises:
            InventoryExhausted: If no unit is available; the count is unchanged
        """
        if self.available_units == 0:
            raise InventoryExhausted(self.project_name, self.room_type)

        self.available_units -= 1

        self.add_event(UnitReserved(
            project_name=self.project_name,
            room_type=self.room_type.value,
            available_units=self.available_units,
            aggregate_id=self.project_name,
        ))

    def release(self):
        """
        Return one previously reserved unit

        Raises:
            InventoryOverflow: If every unit is already available; the count is unchanged
        """
        if self.available_units == self.total_units:
            raise InventoryOverflow(self.project_name, self.room_type)

        self.available_units += 1

        self.add_event(UnitReleased(
            project_name=self.project_name,
            room_type=self.room_type.value,
            available_units=self.available_units,
            aggregate_id=self.project_name,
        ))

    def increase_supply(self, additional_units: int):
        """Add newly built units; they are immediately available"""
        if additional_units <= 0:
            raise ValueError("Cannot increase room supply by a non-positive number")

        self.total_units += additional_units
        self.available_units += additional_units

        self.add_event(RoomSupplyIncreased(
            project_name=self.project_name,
            room_type=self.room_type.value,
            additional_units=additional_units,
            aggregate_id=self.project_name,
        ))

    def reprice(self, price: Money):
        self.price = price

    @property
    def committed_units(self) -> int:
        """Units currently held by SUCCESSFUL or BOOKED applicants"""
        return self.total_units - self.available_units

    def __str__(self):
        return (
            f"{self.room_type.value} in {self.project_name}: "
            f"{self.available_units}/{self.total_units} available at {self.price}"
        )

    def __repr__(self):
        return (
            f"Room(project_name={self.project_name!r}, room_type={self.room_type.value}, "
            f"available_units={self.available_units}, total_units={self.total_units})"
        )

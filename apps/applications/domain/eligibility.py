"""
Eligibility

Maps an applicant's age and marital status to the room types they may
apply for in a given project. Pure and deterministic: no state is read
or written, so it can be evaluated any number of times.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from apps.projects.domain.inventory import RoomType


@dataclass(frozen=True)
class EligibilityPolicy:
    """Age thresholds of the allocation rules"""
    single_min_age: int = 35
    married_min_age: int = 21
    single_room_types: FrozenSet[RoomType] = frozenset({RoomType.TWO_ROOM})

    @classmethod
    def from_settings(cls) -> 'EligibilityPolicy':
        """Build the policy from the ``HOUSING`` Django setting"""
        from django.conf import settings

        housing = getattr(settings, 'HOUSING', {})
        return cls(
            single_min_age=housing.get('SINGLE_MIN_AGE', cls.single_min_age),
            married_min_age=housing.get('MARRIED_MIN_AGE', cls.married_min_age),
        )


DEFAULT_POLICY = EligibilityPolicy()


def eligible_room_types(
    age: int,
    is_married: bool,
    project_room_types: Iterable[RoomType],
    policy: EligibilityPolicy = DEFAULT_POLICY,
) -> FrozenSet[RoomType]:
    """
    Room types an applicant may apply for in a project

    - Single, aged single_min_age or older: only the two-room type, if offered
    - Married, aged married_min_age or older: every room type offered
    - Anyone else: nothing
    """
    offered = frozenset(project_room_types)

    if not is_married and age >= policy.single_min_age:
        return offered & policy.single_room_types
    if is_married and age >= policy.married_min_age:
        return offered
    return frozenset()

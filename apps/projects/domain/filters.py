"""
Project View Filter

A user's saved narrowing of the project lists they browse: by
neighbourhood, by room type, or both. Lists are always shown in name
order regardless of the filter.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from shared.domain.base import ValueObject

from apps.projects.domain.entities import Project
from apps.projects.domain.inventory import RoomType


@dataclass(frozen=True)
class ProjectFilter(ValueObject):
    """
    Filter criteria; a criterion left as None matches every project

    Usage:
        only_bedok = ProjectFilter(neighbourhood='bedok', room_type='ThreeRoom')
        shown = only_bedok.apply(uow.projects.list())
    """
    neighbourhood: Optional[str] = None
    room_type: Optional[RoomType] = None

    def __post_init__(self):
        neighbourhood = (self.neighbourhood or '').strip() or None
        object.__setattr__(self, 'neighbourhood', neighbourhood)
        if self.room_type is not None:
            object.__setattr__(self, 'room_type', RoomType.parse(self.room_type))

    @property
    def is_empty(self) -> bool:
        return self.neighbourhood is None and self.room_type is None

    def matches(self, project: Project) -> bool:
        if self.neighbourhood is not None and project.neighbourhood.casefold() != self.neighbourhood.casefold():
            return False
        if self.room_type is not None and not project.offers(self.room_type):
            return False
        return True

    def apply(self, projects: Iterable[Project]) -> List[Project]:
        """Matching projects sorted by name, ignoring case"""
        return sorted(
            (project for project in projects if self.matches(project)),
            key=lambda project: project.name.casefold(),
        )

    def __str__(self):
        if self.is_empty:
            return "no filter"
        parts = []
        if self.neighbourhood is not None:
            parts.append(f"neighbourhood={self.neighbourhood}")
        if self.room_type is not None:
            parts.append(f"room_type={self.room_type.value}")
        return ", ".join(parts)

"""
Project Repositories

Storage seams for projects, their room inventories, managers and the
project-list filters users save. Each repository is an ABC with a Django ORM
implementation and an in-memory implementation; handlers only ever see the
ABC through a unit of work.

``ProjectRepository.save`` writes project-level columns only. Room counts
and prices are written through ``RoomInventoryRepository.save`` so a
stale project snapshot can never overwrite a concurrent reservation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, List, Optional

from shared.application.locks import project_key, room_key
from shared.domain.exceptions import AlreadyExists, NotFound
from shared.domain.value_objects import DateRange, Money, normalize_nric
from shared.infrastructure.orm import lock_queryset_if_possible

from apps.projects.domain.entities import Manager, Project
from apps.projects.domain.filters import ProjectFilter
from apps.projects.domain.inventory import Room, RoomType


class ManagerRepository(ABC):

    @abstractmethod
    def get(self, nric: str) -> Manager:
        """Raises NotFound for an unknown NRIC"""

    @abstractmethod
    def add(self, manager: Manager) -> None:
        pass

    @abstractmethod
    def list(self) -> List[Manager]:
        pass


class ProjectRepository(ABC):

    @abstractmethod
    def get(self, name: str, lock: bool = False) -> Project:
        """Load a project with its rooms; raises NotFound"""

    @abstractmethod
    def find(self, name: str) -> Optional[Project]:
        pass

    @abstractmethod
    def add(self, project: Project) -> None:
        """Store a new project and its rooms; raises AlreadyExists"""

    @abstractmethod
    def save(self, project: Project) -> None:
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        pass

    @abstractmethod
    def list(self) -> List[Project]:
        pass

    def list_by_manager(self, manager_nric: str) -> List[Project]:
        nric = normalize_nric(manager_nric)
        return [p for p in self.list() if p.manager_nric == nric]


class RoomInventoryRepository(ABC):

    @abstractmethod
    def get(self, project_name: str, room_type: RoomType, lock: bool = False) -> Room:
        """Load one room-type bucket; raises NotFound"""

    @abstractmethod
    def save(self, room: Room) -> None:
        pass


class ProjectFilterRepository(ABC):
    """Saved project-list filter per user NRIC"""

    @abstractmethod
    def get(self, nric: str) -> ProjectFilter:
        """The saved filter, or an empty one"""

    @abstractmethod
    def save(self, nric: str, project_filter: ProjectFilter) -> None:
        pass

    @abstractmethod
    def clear(self, nric: str) -> None:
        pass


# ===== In-memory implementations =====

class InMemoryManagerRepository(ManagerRepository):

    def __init__(self, managers: Dict[str, Manager]):
        self._managers = managers

    def get(self, nric: str) -> Manager:
        try:
            return self._managers[normalize_nric(nric)]
        except KeyError:
            raise NotFound('Manager', nric) from None

    def add(self, manager: Manager) -> None:
        if manager.nric in self._managers:
            raise AlreadyExists('Manager', manager.nric)
        self._managers[manager.nric] = manager

    def list(self) -> List[Manager]:
        return list(self._managers.values())


class InMemoryProjectRepository(ProjectRepository):

    def __init__(self, projects: Dict[str, Project], acquire: Callable[[Hashable], None]):
        self._projects = projects
        self._acquire = acquire

    def get(self, name: str, lock: bool = False) -> Project:
        project = self.find(name)
        if project is None:
            raise NotFound('Project', name)
        if lock:
            self._acquire(project_key(project.name))
        return project

    def find(self, name: str) -> Optional[Project]:
        return self._projects.get((name or '').strip().casefold())

    def add(self, project: Project) -> None:
        if project.identity in self._projects:
            raise AlreadyExists('Project', project.name)
        self._projects[project.identity] = project

    def save(self, project: Project) -> None:
        self._projects[project.identity] = project

    def delete(self, name: str) -> None:
        if self._projects.pop(name.strip().casefold(), None) is None:
            raise NotFound('Project', name)

    def list(self) -> List[Project]:
        return sorted(self._projects.values(), key=lambda p: (p.application_period.start_date, p.name))


class InMemoryRoomInventoryRepository(RoomInventoryRepository):

    def __init__(self, projects: Dict[str, Project], acquire: Callable[[Hashable], None]):
        self._projects = projects
        self._acquire = acquire

    def get(self, project_name: str, room_type: RoomType, lock: bool = False) -> Room:
        project = self._projects.get(project_name.strip().casefold())
        if project is None:
            raise NotFound('Project', project_name)
        room = project.room(room_type)
        if lock:
            self._acquire(room_key(project.name, room.room_type))
        return room

    def save(self, room: Room) -> None:
        # Rooms are owned by their project object, nothing else to write
        pass


class InMemoryProjectFilterRepository(ProjectFilterRepository):

    def __init__(self, filters: Dict[str, ProjectFilter]):
        self._filters = filters

    def get(self, nric: str) -> ProjectFilter:
        return self._filters.get(normalize_nric(nric), ProjectFilter())

    def save(self, nric: str, project_filter: ProjectFilter) -> None:
        self._filters[normalize_nric(nric)] = project_filter

    def clear(self, nric: str) -> None:
        self._filters.pop(normalize_nric(nric), None)


# ===== Django ORM implementations =====

class DjangoManagerRepository(ManagerRepository):

    def get(self, nric: str) -> Manager:
        from apps.projects.models import Manager as ManagerModel

        try:
            model = ManagerModel.objects.get(nric=normalize_nric(nric))
        except ManagerModel.DoesNotExist:
            raise NotFound('Manager', nric) from None
        return Manager(nric=model.nric, name=model.name)

    def add(self, manager: Manager) -> None:
        from apps.projects.models import Manager as ManagerModel

        if ManagerModel.objects.filter(nric=manager.nric).exists():
            raise AlreadyExists('Manager', manager.nric)
        ManagerModel.objects.create(nric=manager.nric, name=manager.name)

    def list(self) -> List[Manager]:
        from apps.projects.models import Manager as ManagerModel

        return [Manager(nric=m.nric, name=m.name) for m in ManagerModel.objects.all()]


def room_to_domain(model) -> Room:
    return Room(
        project_name=model.project_id,
        room_type=RoomType(model.room_type),
        total_units=model.total_units,
        available_units=model.available_units,
        price=Money(model.price),
    )


def project_to_domain(model) -> Project:
    return Project(
        name=model.name,
        neighbourhood=model.neighbourhood,
        application_period=DateRange(model.open_date, model.close_date),
        manager_nric=model.manager_id,
        officer_slots=model.officer_slots,
        visible=model.visible,
        rooms=[room_to_domain(room) for room in model.rooms.all()],
    )


class DjangoProjectRepository(ProjectRepository):

    def get(self, name: str, lock: bool = False) -> Project:
        from apps.projects.models import Project as ProjectModel

        queryset = ProjectModel.objects.filter(name__iexact=(name or '').strip())
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        model = queryset.first()
        if model is None:
            raise NotFound('Project', name)
        return project_to_domain(model)

    def find(self, name: str) -> Optional[Project]:
        try:
            return self.get(name)
        except NotFound:
            return None

    def add(self, project: Project) -> None:
        from apps.projects.models import Project as ProjectModel, Room as RoomModel

        if ProjectModel.objects.filter(name__iexact=project.name).exists():
            raise AlreadyExists('Project', project.name)

        model = ProjectModel.objects.create(
            name=project.name,
            neighbourhood=project.neighbourhood,
            open_date=project.application_period.start_date,
            close_date=project.application_period.end_date,
            manager_id=project.manager_nric,
            officer_slots=project.officer_slots,
            visible=project.visible,
        )
        RoomModel.objects.bulk_create([
            RoomModel(
                project=model,
                room_type=room.room_type.value,
                total_units=room.total_units,
                available_units=room.available_units,
                price=room.price.amount,
            )
            for room in project.rooms
        ])

    def save(self, project: Project) -> None:
        from apps.projects.models import Project as ProjectModel

        updated = ProjectModel.objects.filter(name=project.name).update(
            neighbourhood=project.neighbourhood,
            open_date=project.application_period.start_date,
            close_date=project.application_period.end_date,
            manager_id=project.manager_nric,
            officer_slots=project.officer_slots,
            visible=project.visible,
        )
        if not updated:
            raise NotFound('Project', project.name)

    def delete(self, name: str) -> None:
        from apps.projects.models import Project as ProjectModel

        deleted, _ = ProjectModel.objects.filter(name__iexact=name.strip()).delete()
        if not deleted:
            raise NotFound('Project', name)

    def list(self) -> List[Project]:
        from apps.projects.models import Project as ProjectModel

        return [
            project_to_domain(model)
            for model in ProjectModel.objects.prefetch_related('rooms').order_by('open_date', 'name')
        ]

    def list_by_manager(self, manager_nric: str) -> List[Project]:
        from apps.projects.models import Project as ProjectModel

        queryset = ProjectModel.objects.filter(manager_id=normalize_nric(manager_nric)).prefetch_related('rooms')
        return [project_to_domain(model) for model in queryset]


class DjangoRoomInventoryRepository(RoomInventoryRepository):

    def get(self, project_name: str, room_type: RoomType, lock: bool = False) -> Room:
        from apps.projects.models import Room as RoomModel

        room_type = RoomType.parse(room_type)
        queryset = RoomModel.objects.filter(
            project__name__iexact=project_name.strip(),
            room_type=room_type.value,
        )
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        model = queryset.first()
        if model is None:
            raise NotFound('Room type', f"{room_type.value} in {project_name}")
        return room_to_domain(model)

    def save(self, room: Room) -> None:
        from apps.projects.models import Room as RoomModel

        RoomModel.objects.update_or_create(
            project_id=room.project_name,
            room_type=room.room_type.value,
            defaults={
                'total_units': room.total_units,
                'available_units': room.available_units,
                'price': room.price.amount,
            },
        )


class DjangoProjectFilterRepository(ProjectFilterRepository):

    def get(self, nric: str) -> ProjectFilter:
        from apps.projects.models import SavedProjectFilter

        model = SavedProjectFilter.objects.filter(nric=normalize_nric(nric)).first()
        if model is None:
            return ProjectFilter()
        return ProjectFilter(
            neighbourhood=model.neighbourhood or None,
            room_type=RoomType(model.room_type) if model.room_type else None,
        )

    def save(self, nric: str, project_filter: ProjectFilter) -> None:
        from apps.projects.models import SavedProjectFilter

        SavedProjectFilter.objects.update_or_create(
            nric=normalize_nric(nric),
            defaults={
                'neighbourhood': project_filter.neighbourhood or '',
                'room_type': project_filter.room_type.value if project_filter.room_type else '',
            },
        )

    def clear(self, nric: str) -> None:
        from apps.projects.models import SavedProjectFilter

        SavedProjectFilter.objects.filter(nric=normalize_nric(nric)).delete()

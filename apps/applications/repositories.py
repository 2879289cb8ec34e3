"""
Applicant Repositories

Storage seam for applicants and their application linkage. The ORM
implementation locks the applicant row with SELECT FOR UPDATE; the
in-memory implementation takes the applicant's keyed lock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, List, Optional

from shared.application.locks import applicant_key
from shared.domain.exceptions import AlreadyExists, NotFound
from shared.domain.value_objects import normalize_nric
from shared.infrastructure.orm import lock_queryset_if_possible

from apps.applications.domain.entities import Applicant, ApplicationStatus
from apps.projects.domain.inventory import RoomType


class ApplicantRepository(ABC):

    @abstractmethod
    def get(self, nric: str, lock: bool = False) -> Applicant:
        """Raises NotFound for an unknown NRIC"""

    @abstractmethod
    def add(self, applicant: Applicant) -> None:
        """Register a new applicant; raises AlreadyExists"""

    @abstractmethod
    def save(self, applicant: Applicant) -> None:
        pass

    @abstractmethod
    def list(self) -> List[Applicant]:
        pass

    def find(self, nric: str) -> Optional[Applicant]:
        try:
            return self.get(nric)
        except NotFound:
            return None

    def list_by_project(self, project_name: str) -> List[Applicant]:
        key = project_name.strip().casefold()
        return [a for a in self.list() if a.applied_project and a.applied_project.casefold() == key]

    def list_by_status(self, *statuses: ApplicationStatus) -> List[Applicant]:
        return [a for a in self.list() if a.status in statuses]


class InMemoryApplicantRepository(ApplicantRepository):

    def __init__(self, applicants: Dict[str, Applicant], acquire: Callable[[Hashable], None]):
        self._applicants = applicants
        self._acquire = acquire

    def get(self, nric: str, lock: bool = False) -> Applicant:
        key = normalize_nric(nric)
        if lock:
            self._acquire(applicant_key(key))
        try:
            return self._applicants[key]
        except KeyError:
            raise NotFound('Applicant', nric) from None

    def add(self, applicant: Applicant) -> None:
        if applicant.nric in self._applicants:
            raise AlreadyExists('Applicant', applicant.nric)
        self._applicants[applicant.nric] = applicant

    def save(self, applicant: Applicant) -> None:
        self._applicants[applicant.nric] = applicant

    def list(self) -> List[Applicant]:
        return sorted(self._applicants.values(), key=lambda a: a.nric)


def applicant_to_domain(model) -> Applicant:
    return Applicant(
        nric=model.nric,
        name=model.name,
        age=model.age,
        is_married=model.is_married,
        applied_project=model.applied_project_id,
        chosen_room_type=RoomType(model.chosen_room_type) if model.chosen_room_type else None,
        status=ApplicationStatus(model.status) if model.status else None,
        status_before_withdrawal=(
            ApplicationStatus(model.status_before_withdrawal) if model.status_before_withdrawal else None
        ),
    )


def applicant_columns(applicant: Applicant) -> dict:
    return {
        'name': applicant.name,
        'age': applicant.age,
        'is_married': applicant.is_married,
        'applied_project_id': applicant.applied_project,
        'chosen_room_type': applicant.chosen_room_type.value if applicant.chosen_room_type else '',
        'status': applicant.status.value if applicant.status else '',
        'status_before_withdrawal': (
            applicant.status_before_withdrawal.value if applicant.status_before_withdrawal else ''
        ),
    }


class DjangoApplicantRepository(ApplicantRepository):

    def get(self, nric: str, lock: bool = False) -> Applicant:
        from apps.applications.models import Applicant as ApplicantModel

        queryset = ApplicantModel.objects.filter(nric=normalize_nric(nric))
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        model = queryset.first()
        if model is None:
            raise NotFound('Applicant', nric)
        return applicant_to_domain(model)

    def add(self, applicant: Applicant) -> None:
        from apps.applications.models import Applicant as ApplicantModel

        if ApplicantModel.objects.filter(nric=applicant.nric).exists():
            raise AlreadyExists('Applicant', applicant.nric)
        ApplicantModel.objects.create(nric=applicant.nric, **applicant_columns(applicant))

    def save(self, applicant: Applicant) -> None:
        from apps.applications.models import Applicant as ApplicantModel

        updated = ApplicantModel.objects.filter(nric=applicant.nric).update(**applicant_columns(applicant))
        if not updated:
            raise NotFound('Applicant', applicant.nric)

    def list(self) -> List[Applicant]:
        from apps.applications.models import Applicant as ApplicantModel

        return [applicant_to_domain(model) for model in ApplicantModel.objects.order_by('nric')]

    def list_by_project(self, project_name: str) -> List[Applicant]:
        from apps.applications.models import Applicant as ApplicantModel

        queryset = ApplicantModel.objects.filter(applied_project__name__iexact=project_name.strip())
        return [applicant_to_domain(model) for model in queryset.order_by('nric')]

    def list_by_status(self, *statuses: ApplicationStatus) -> List[Applicant]:
        from apps.applications.models import Applicant as ApplicantModel

        queryset = ApplicantModel.objects.filter(status__in=[s.value for s in statuses])
        return [applicant_to_domain(model) for model in queryset.order_by('nric')]

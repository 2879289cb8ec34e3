"""
Officer Repositories

An officer is stored as its applicant row plus an officer row and its
registrations. Saving an officer writes both roles, so the applicant
repository and the officer repository always agree on the profile.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, List, Optional

from shared.application.locks import applicant_key, officer_key
from shared.domain.exceptions import AlreadyExists, NotFound
from shared.domain.value_objects import normalize_nric
from shared.infrastructure.orm import aware_datetime, lock_queryset_if_possible

from apps.applications.domain.entities import Applicant
from apps.applications.repositories import applicant_columns, applicant_to_domain
from apps.officers.domain.entities import Officer, OfficerRegistration, RegistrationStatus


class OfficerRepository(ABC):

    @abstractmethod
    def get(self, nric: str, lock: bool = False) -> Officer:
        """Raises NotFound if the NRIC is not an officer"""

    @abstractmethod
    def add(self, officer: Officer) -> None:
        pass

    @abstractmethod
    def save(self, officer: Officer) -> None:
        pass

    @abstractmethod
    def list(self) -> List[Officer]:
        pass

    def find(self, nric: str, lock: bool = False) -> Optional[Officer]:
        try:
            return self.get(nric, lock=lock)
        except NotFound:
            return None

    def list_registered_for(self, project_name: str, status: RegistrationStatus | None = None) -> List[Officer]:
        """Officers with a registration for the project, optionally in one status"""
        result = []
        for officer in self.list():
            registration = officer.registration_for(project_name)
            if registration is not None and (status is None or registration.status == status):
                result.append(officer)
        return result


class InMemoryOfficerRepository(OfficerRepository):
    """
    Officers share their Applicant object with the applicant store, so a
    status change made through either repository is seen by both.
    """

    def __init__(
        self,
        officers: Dict[str, Officer],
        applicants: Dict[str, Applicant],
        acquire: Callable[[Hashable], None],
    ):
        self._officers = officers
        self._applicants = applicants
        self._acquire = acquire

    def get(self, nric: str, lock: bool = False) -> Officer:
        key = normalize_nric(nric)
        officer = self._officers.get(key)
        if officer is None:
            raise NotFound('Officer', nric)
        if lock:
            # Applicant role first, the same order applicant handlers use
            self._acquire(applicant_key(key))
            self._acquire(officer_key(key))
        return officer

    def add(self, officer: Officer) -> None:
        if officer.nric in self._officers:
            raise AlreadyExists('Officer', officer.nric)
        existing = self._applicants.get(officer.nric)
        if existing is not None and existing is not officer.applicant:
            raise AlreadyExists('Applicant', officer.nric)
        self._applicants[officer.nric] = officer.applicant
        self._officers[officer.nric] = officer

    def save(self, officer: Officer) -> None:
        self._applicants[officer.nric] = officer.applicant
        self._officers[officer.nric] = officer

    def list(self) -> List[Officer]:
        return sorted(self._officers.values(), key=lambda o: o.nric)


def registration_to_domain(model) -> OfficerRegistration:
    return OfficerRegistration(
        id=model.id,
        project_name=model.project_id,
        status=RegistrationStatus(model.status),
        decided_by=model.decided_by_id,
        requested_at=model.requested_at,
        decided_at=model.decided_at,
    )


def officer_to_domain(model) -> Officer:
    return Officer(
        applicant=applicant_to_domain(model.applicant),
        registrations=[
            registration_to_domain(r) for r in model.registrations.all()
        ],
    )


class DjangoOfficerRepository(OfficerRepository):

    def get(self, nric: str, lock: bool = False) -> Officer:
        from apps.applications.models import Applicant as ApplicantModel
        from apps.officers.models import Officer as OfficerModel

        key = normalize_nric(nric)
        if lock:
            # Applicant row first, then the officer row; both roles change together
            list(lock_queryset_if_possible(ApplicantModel.objects.filter(nric=key)))
            list(lock_queryset_if_possible(OfficerModel.objects.filter(pk=key)))
        model = OfficerModel.objects.select_related('applicant').filter(pk=key).first()
        if model is None:
            raise NotFound('Officer', nric)
        return officer_to_domain(model)

    def add(self, officer: Officer) -> None:
        from apps.applications.models import Applicant as ApplicantModel
        from apps.officers.models import Officer as OfficerModel

        if OfficerModel.objects.filter(pk=officer.nric).exists():
            raise AlreadyExists('Officer', officer.nric)
        applicant, _ = ApplicantModel.objects.update_or_create(
            nric=officer.nric,
            defaults=applicant_columns(officer.applicant),
        )
        OfficerModel.objects.create(applicant=applicant)
        self._write_registrations(officer)

    def save(self, officer: Officer) -> None:
        from apps.applications.models import Applicant as ApplicantModel

        updated = ApplicantModel.objects.filter(nric=officer.nric).update(**applicant_columns(officer.applicant))
        if not updated:
            raise NotFound('Officer', officer.nric)
        self._write_registrations(officer)

    def list(self) -> List[Officer]:
        from apps.officers.models import Officer as OfficerModel

        queryset = OfficerModel.objects.select_related('applicant').prefetch_related('registrations')
        return [officer_to_domain(model) for model in queryset.order_by('applicant')]

    def list_registered_for(self, project_name: str, status: RegistrationStatus | None = None) -> List[Officer]:
        from apps.officers.models import Officer as OfficerModel

        lookups = {'registrations__project__name__iexact': project_name.strip()}
        if status is not None:
            lookups['registrations__status'] = status.value
        queryset = OfficerModel.objects.filter(**lookups)
        queryset = queryset.select_related('applicant').distinct().order_by('applicant')
        return [officer_to_domain(model) for model in queryset]

    def _write_registrations(self, officer: Officer):
        from apps.officers.models import OfficerRegistration as RegistrationModel

        for registration in officer.registrations:
            RegistrationModel.objects.update_or_create(
                id=registration.id,
                defaults={
                    'officer_id': officer.nric,
                    'project_id': registration.project_name,
                    'status': registration.status.value,
                    'decided_by_id': registration.decided_by,
                    'requested_at': aware_datetime(registration.requested_at),
                    'decided_at': aware_datetime(registration.decided_at),
                },
            )

"""Enquiry Repositories"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Hashable, List
from uuid import UUID

from shared.application.locks import enquiry_key
from shared.domain.exceptions import NotFound
from shared.domain.value_objects import normalize_nric
from shared.infrastructure.orm import aware_datetime, lock_queryset_if_possible

from apps.enquiries.domain.entities import Enquiry


class EnquiryRepository(ABC):

    @abstractmethod
    def get(self, enquiry_id, lock: bool = False) -> Enquiry:
        """Raises NotFound for an unknown id"""

    @abstractmethod
    def add(self, enquiry: Enquiry) -> None:
        pass

    @abstractmethod
    def save(self, enquiry: Enquiry) -> None:
        pass

    @abstractmethod
    def delete(self, enquiry_id) -> None:
        pass

    @abstractmethod
    def list_by_applicant(self, nric: str) -> List[Enquiry]:
        pass

    @abstractmethod
    def list_by_project(self, project_name: str) -> List[Enquiry]:
        pass


def _as_uuid(enquiry_id) -> UUID:
    if isinstance(enquiry_id, UUID):
        return enquiry_id
    try:
        return UUID(str(enquiry_id))
    except ValueError:
        raise NotFound('Enquiry', enquiry_id) from None


class InMemoryEnquiryRepository(EnquiryRepository):

    def __init__(self, enquiries: Dict[UUID, Enquiry], acquire: Callable[[Hashable], None]):
        self._enquiries = enquiries
        self._acquire = acquire

    def get(self, enquiry_id, lock: bool = False) -> Enquiry:
        key = _as_uuid(enquiry_id)
        if lock:
            self._acquire(enquiry_key(key))
        try:
            return self._enquiries[key]
        except KeyError:
            raise NotFound('Enquiry', enquiry_id) from None

    def add(self, enquiry: Enquiry) -> None:
        self._enquiries[enquiry.id] = enquiry

    def save(self, enquiry: Enquiry) -> None:
        self._enquiries[enquiry.id] = enquiry

    def delete(self, enquiry_id) -> None:
        if self._enquiries.pop(_as_uuid(enquiry_id), None) is None:
            raise NotFound('Enquiry', enquiry_id)

    def list_by_applicant(self, nric: str) -> List[Enquiry]:
        nric = normalize_nric(nric)
        return sorted(
            (e for e in self._enquiries.values() if e.applicant_nric == nric),
            key=lambda e: e.created_at,
        )

    def list_by_project(self, project_name: str) -> List[Enquiry]:
        key = project_name.strip().casefold()
        return sorted(
            (e for e in self._enquiries.values() if e.project_name.casefold() == key),
            key=lambda e: e.created_at,
        )


def enquiry_to_domain(model) -> Enquiry:
    return Enquiry(
        id=model.id,
        applicant_nric=model.applicant_id,
        project_name=model.project_id,
        message=model.message,
        reply=model.reply,
        replied_by=model.replied_by or None,
        created_at=model.created_at,
        replied_at=model.replied_at,
    )


class DjangoEnquiryRepository(EnquiryRepository):

    def get(self, enquiry_id, lock: bool = False) -> Enquiry:
        from apps.enquiries.models import Enquiry as EnquiryModel

        queryset = EnquiryModel.objects.filter(pk=_as_uuid(enquiry_id))
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        model = queryset.first()
        if model is None:
            raise NotFound('Enquiry', enquiry_id)
        return enquiry_to_domain(model)

    def add(self, enquiry: Enquiry) -> None:
        self.save(enquiry)

    def save(self, enquiry: Enquiry) -> None:
        from apps.enquiries.models import Enquiry as EnquiryModel

        EnquiryModel.objects.update_or_create(
            id=enquiry.id,
            defaults={
                'applicant_id': enquiry.applicant_nric,
                'project_id': enquiry.project_name,
                'message': enquiry.message,
                'reply': enquiry.reply,
                'replied_by': enquiry.replied_by or '',
                'created_at': aware_datetime(enquiry.created_at),
                'replied_at': aware_datetime(enquiry.replied_at),
            },
        )

    def delete(self, enquiry_id) -> None:
        from apps.enquiries.models import Enquiry as EnquiryModel

        deleted, _ = EnquiryModel.objects.filter(pk=_as_uuid(enquiry_id)).delete()
        if not deleted:
            raise NotFound('Enquiry', enquiry_id)

    def list_by_applicant(self, nric: str) -> List[Enquiry]:
        from apps.enquiries.models import Enquiry as EnquiryModel

        queryset = EnquiryModel.objects.filter(applicant_id=normalize_nric(nric))
        return [enquiry_to_domain(model) for model in queryset]

    def list_by_project(self, project_name: str) -> List[Enquiry]:
        from apps.enquiries.models import Enquiry as EnquiryModel

        queryset = EnquiryModel.objects.filter(project__name__iexact=project_name.strip())
        return [enquiry_to_domain(model) for model in queryset]

"""Enquiry queries."""

from typing import List

from apps.enquiries.domain.entities import Enquiry


def enquiries_by_applicant(uow, nric: str) -> List[Enquiry]:
    return uow.enquiries.list_by_applicant(nric)


def enquiries_by_project(uow, project_name: str, unanswered_only: bool = False) -> List[Enquiry]:
    enquiries = uow.enquiries.list_by_project(project_name)
    if unanswered_only:
        enquiries = [e for e in enquiries if not e.is_answered]
    return enquiries

"""Application queries for managers reviewing a project."""

from typing import List, Optional

from apps.applications.domain.entities import Applicant, ApplicationStatus


def applications_for_project(
    uow,
    project_name: str,
    status: Optional[ApplicationStatus] = None,
) -> List[Applicant]:
    """Applicants whose application names the project, optionally in one status"""
    applicants = uow.applicants.list_by_project(project_name)
    if status is not None:
        applicants = [a for a in applicants if a.status == status]
    return applicants


def pending_withdrawals(uow, project_name: str) -> List[Applicant]:
    return applications_for_project(uow, project_name, ApplicationStatus.PENDING_WITHDRAWAL)

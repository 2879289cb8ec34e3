"""
Project Catalogue Queries

Read-only views over the catalogue. Each function takes an open unit of
work so the caller decides the consistency scope:

    with uow_factory() as uow:
        projects = available_projects_for(uow, nric, date.today())
"""

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, List

from apps.applications.domain.eligibility import EligibilityPolicy, eligible_room_types
from apps.projects.domain.entities import Project
from apps.projects.domain.filters import ProjectFilter
from apps.projects.domain.inventory import RoomType


@dataclass(frozen=True)
class AvailableProject:
    project: Project
    eligible_room_types: FrozenSet[RoomType]


def available_projects_for(
    uow,
    applicant_nric: str,
    today: date,
    policy: EligibilityPolicy | None = None,
    project_filter: ProjectFilter | None = None,
) -> List[AvailableProject]:
    """
    Projects an applicant may apply to today: visible, inside the
    application period and offering at least one room type they are
    eligible for.

    The applicant's saved filter applies unless ``project_filter`` is
    given. A room-type criterion only matches when the applicant is
    eligible for that room type. Results are in name order.
    """
    policy = policy or EligibilityPolicy.from_settings()
    applicant = uow.applicants.get(applicant_nric)
    if project_filter is None:
        project_filter = uow.project_filters.get(applicant.nric)

    result = []
    for project in project_filter.apply(uow.projects.list()):
        if not project.accepts_applications_on(today):
            continue
        allowed = eligible_room_types(applicant.age, applicant.is_married, project.room_types, policy)
        if project_filter.room_type is not None and project_filter.room_type not in allowed:
            continue
        if allowed:
            result.append(AvailableProject(project=project, eligible_room_types=allowed))
    return result


def registrable_projects_for(uow, officer_nric: str, today: date) -> List[Project]:
    """
    Projects an officer could ask to handle: not yet closed, with an
    officer slot left, not already registered for, and not overlapping a
    live registration. Empty while the officer has a live application.
    """
    officer = uow.officers.get(officer_nric)
    if officer.applicant_role.has_application:
        return []

    live_projects = [uow.projects.get(r.project_name) for r in officer.live_registrations]
    result = []
    for project in uow.projects.list():
        if project.application_period.end_date < today or project.officer_slots <= 0:
            continue
        if officer.registration_for(project.name) is not None:
            continue
        if any(other.overlaps(project) for other in live_projects):
            continue
        result.append(project)
    return result


def projects_managed_by(uow, manager_nric: str, project_filter: ProjectFilter | None = None) -> List[Project]:
    """A manager's own projects through their saved filter, in name order"""
    if project_filter is None:
        project_filter = uow.project_filters.get(manager_nric)
    return project_filter.apply(uow.projects.list_by_manager(manager_nric))

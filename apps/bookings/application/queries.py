"""
Booking Report

Rows of BOOKED applicants for managers, optionally narrowed by marital
status, room type or the manager's own projects.
"""

from dataclasses import dataclass
from typing import List, Optional

from shared.domain.value_objects import Money

from apps.applications.domain.entities import ApplicationStatus
from apps.projects.domain.inventory import RoomType


@dataclass(frozen=True)
class BookingReportRow:
    nric: str
    name: str
    age: int
    marital_status: str
    project_name: str
    neighbourhood: str
    room_type: RoomType
    price: Money


def booking_report(
    uow,
    married: Optional[bool] = None,
    room_type: Optional[RoomType] = None,
    manager_nric: Optional[str] = None,
) -> List[BookingReportRow]:
    """
    Filters left as None match everything. Rows are ordered by project,
    then NRIC.
    """
    room_type = RoomType.parse(room_type) if room_type is not None else None
    projects = {}
    rows = []

    for applicant in uow.applicants.list_by_status(ApplicationStatus.BOOKED):
        if married is not None and applicant.is_married != married:
            continue
        if room_type is not None and applicant.chosen_room_type != room_type:
            continue

        key = applicant.applied_project.casefold()
        if key not in projects:
            projects[key] = uow.projects.get(applicant.applied_project)
        project = projects[key]
        if manager_nric is not None and not project.is_managed_by(manager_nric):
            continue

        rows.append(BookingReportRow(
            nric=applicant.nric,
            name=applicant.name,
            age=applicant.age,
            marital_status=applicant.marital_status,
            project_name=project.name,
            neighbourhood=project.neighbourhood,
            room_type=applicant.chosen_room_type,
            price=project.room(applicant.chosen_room_type).price,
        ))

    return sorted(rows, key=lambda row: (row.project_name, row.nric))

"""
Booking Domain Service

Booking spans two aggregates: the officer, whose approved registration
authorizes the action, and the applicant, whose status changes. Only the
officer role of the officer is consulted.
"""

from shared.domain.exceptions import InvalidStateTransition, NotAuthorized

from apps.applications.domain.entities import Applicant
from apps.officers.domain.entities import OfficerRole


def book_flat(officer: OfficerRole, applicant: Applicant):
    """
    SUCCESSFUL -> BOOKED on behalf of an officer handling the project

    The unit was reserved when the application was approved, so no
    inventory changes here.

    Raises:
        NotAuthorized: If the officer is not APPROVED for the applicant's project
        InvalidStateTransition: If the applicant is not SUCCESSFUL
    """
    if applicant.applied_project is None:
        raise InvalidStateTransition(f"application of {applicant.nric}", applicant.status, 'book')

    if not officer.is_approved_for(applicant.applied_project):
        raise NotAuthorized(
            f"Officer {officer.nric} is not approved to handle project '{applicant.applied_project}'"
        )

    applicant.book(officer.nric)

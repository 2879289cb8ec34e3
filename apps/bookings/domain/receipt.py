"""
Booking Receipt

Immutable summary handed to an applicant once their flat is booked.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from shared.domain.base import ValueObject
from shared.domain.exceptions import ReceiptUnavailable
from shared.domain.value_objects import Money

from apps.applications.domain.entities import Applicant, ApplicationStatus
from apps.projects.domain.entities import Project

DIVIDER = '-' * 43


@dataclass(frozen=True)
class Receipt(ValueObject):
    applicant_name: str
    applicant_nric: str
    applicant_age: int
    is_married: bool
    project_name: str
    neighbourhood: str
    room_type: str
    price: Money
    generated_on: date

    @classmethod
    def for_booking(cls, applicant: Applicant, project: Optional[Project], generated_on: date) -> 'Receipt':
        """
        ``project`` may be None only for applicants without an application.

        Raises:
            ReceiptUnavailable: If the applicant has not booked a flat
        """
        if applicant.status != ApplicationStatus.BOOKED:
            state = applicant.status.value if applicant.status else 'NONE'
            raise ReceiptUnavailable(
                f"No receipt for applicant {applicant.nric}: status is {state}, not BOOKED"
            )

        room = project.room(applicant.chosen_room_type)
        return cls(
            applicant_name=applicant.name,
            applicant_nric=applicant.nric,
            applicant_age=applicant.age,
            is_married=applicant.is_married,
            project_name=project.name,
            neighbourhood=project.neighbourhood,
            room_type=room.room_type.value,
            price=room.price,
            generated_on=generated_on,
        )

    @property
    def marital_status(self) -> str:
        return 'Married' if self.is_married else 'Single'

    def render(self) -> str:
        lines = [
            DIVIDER,
            "        BTO Booking Confirmation",
            DIVIDER,
            f"Applicant Name: {self.applicant_name}",
            f"Applicant NRIC: {self.applicant_nric}",
            f"Age:            {self.applicant_age}",
            f"Marital Status: {self.marital_status}",
            "",
            "Booking Details:",
            f"  Project Name:     {self.project_name}",
            f"  Neighbourhood:    {self.neighbourhood}",
            f"  Flat Type Booked: {self.room_type}",
            f"  Price:            {self.price}",
            DIVIDER,
            f"Date Generated: {self.generated_on.isoformat()}",
            DIVIDER,
        ]
        return "\n".join(lines) + "\n"

    def __str__(self):
        return self.render()

"""
Booking Command Handlers

These are the use cases of the booking workflow: an approved officer
turns a SUCCESSFUL application into a booking and hands out receipts.

Commands:
- BookFlatCommand: Officer books the flat reserved for an applicant
- GenerateReceiptCommand: Produce the receipt of a booked applicant
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional
import logging

from shared.domain.exceptions import NotAuthorized

from apps.applications.domain.entities import Applicant
from apps.bookings.domain.receipt import Receipt
from apps.bookings.domain.services import book_flat

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class BookFlatCommand:
    """Command for an officer to book the flat of a SUCCESSFUL applicant"""
    officer_nric: str
    applicant_nric: str


@dataclass
class GenerateReceiptCommand:
    """
    Command to produce a booking receipt

    When ``officer_nric`` is given the officer must handle the project.
    """
    applicant_nric: str
    officer_nric: Optional[str] = None


# ===== Command Handlers =====

class BookFlatHandler:
    """
    Handler for BookFlat command

    1. Lock the applicant
    2. Read the officer's registrations (officer role only)
    3. Authorize and transition SUCCESSFUL -> BOOKED
    4. Save the applicant; inventory is not touched
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: BookFlatCommand) -> Applicant:
        logger.info(f"Officer {command.officer_nric} booking flat for {command.applicant_nric}")

        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric, lock=True)
            officer = uow.officers.get(command.officer_nric)

            book_flat(officer, applicant)

            uow.applicants.save(applicant)
            uow.collect_events(applicant)

        logger.info(
            f"Flat booked: {applicant.nric} -> {applicant.chosen_room_type.value} "
            f"in '{applicant.applied_project}' by officer {officer.nric}"
        )
        return applicant


class GenerateReceiptHandler:
    """Handler for GenerateReceipt command; a pure read"""

    def __init__(self, uow_factory: Callable, clock: Callable[[], date] = date.today):
        self.uow_factory = uow_factory
        self.clock = clock

    def handle(self, command: GenerateReceiptCommand) -> Receipt:
        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric)

            if command.officer_nric is not None and applicant.applied_project is not None:
                officer = uow.officers.get(command.officer_nric)
                if not officer.is_approved_for(applicant.applied_project):
                    raise NotAuthorized(
                        f"Officer {officer.nric} does not handle project '{applicant.applied_project}'"
                    )

            project = uow.projects.get(applicant.applied_project) if applicant.applied_project else None
            return Receipt.for_booking(applicant, project, self.clock())

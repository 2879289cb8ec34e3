"""
Enquiry Command Handlers

Commands:
- SubmitEnquiryCommand: Applicant asks about a project
- EditEnquiryCommand: Author rewrites an unanswered enquiry
- DeleteEnquiryCommand: Author removes an unanswered enquiry
- ReplyToEnquiryCommand: Project manager or approved officer answers
"""

from dataclasses import dataclass
from typing import Callable
from uuid import UUID
import logging

from shared.domain.exceptions import NotAuthorized
from shared.domain.value_objects import normalize_nric

from apps.enquiries.domain.entities import Enquiry

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class SubmitEnquiryCommand:
    applicant_nric: str
    project_name: str
    message: str


@dataclass
class EditEnquiryCommand:
    applicant_nric: str
    enquiry_id: UUID
    message: str


@dataclass
class DeleteEnquiryCommand:
    applicant_nric: str
    enquiry_id: UUID


@dataclass
class ReplyToEnquiryCommand:
    """``responder_nric`` is a manager or an officer"""
    responder_nric: str
    enquiry_id: UUID
    reply: str


# ===== Command Handlers =====

class SubmitEnquiryHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: SubmitEnquiryCommand) -> Enquiry:
        with self.uow_factory() as uow:
            applicant = uow.applicants.get(command.applicant_nric)
            project = uow.projects.get(command.project_name)

            enquiry = Enquiry.submit(applicant.nric, project.name, command.message)

            uow.enquiries.add(enquiry)
            uow.collect_events(enquiry)

        logger.info(f"Enquiry {enquiry.id} submitted by {enquiry.applicant_nric} on '{enquiry.project_name}'")
        return enquiry


class EditEnquiryHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: EditEnquiryCommand) -> Enquiry:
        with self.uow_factory() as uow:
            enquiry = uow.enquiries.get(command.enquiry_id, lock=True)
            enquiry.edit(command.applicant_nric, command.message)

            uow.enquiries.save(enquiry)
            uow.collect_events(enquiry)

        return enquiry


class DeleteEnquiryHandler:

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: DeleteEnquiryCommand) -> None:
        with self.uow_factory() as uow:
            enquiry = uow.enquiries.get(command.enquiry_id, lock=True)
            enquiry.ensure_editable_by(command.applicant_nric)
            uow.enquiries.delete(enquiry.id)

        logger.info(f"Enquiry {command.enquiry_id} deleted by its author")


class ReplyToEnquiryHandler:
    """
    Handler for ReplyToEnquiry command

    The responder must be the project's manager or an officer APPROVED for
    the project.
    """

    def __init__(self, uow_factory: Callable):
        self.uow_factory = uow_factory

    def handle(self, command: ReplyToEnquiryCommand) -> Enquiry:
        responder = normalize_nric(command.responder_nric)

        with self.uow_factory() as uow:
            enquiry = uow.enquiries.get(command.enquiry_id, lock=True)
            project = uow.projects.get(enquiry.project_name)

            if not project.is_managed_by(responder):
                officer = uow.officers.find(responder)
                if officer is None or not officer.is_approved_for(project.name):
                    raise NotAuthorized(
                        f"{responder} may not reply to enquiries about project '{project.name}'"
                    )

            enquiry.answer(responder, command.reply)

            uow.enquiries.save(enquiry)
            uow.collect_events(enquiry)

        logger.info(f"Enquiry {enquiry.id} answered by {responder}")
        return enquiry

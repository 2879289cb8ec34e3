"""
Enquiry Domain Entities

A question an applicant asks about a project. The author may edit or
delete it until it is answered; answering is reserved for the project's
manager or one of its approved officers (checked by the handlers, which
can see the project and the officer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidStateTransition, NotAuthorized
from shared.domain.value_objects import normalize_nric

from apps.enquiries.domain.events import EnquiryEdited, EnquiryReplied, EnquirySubmitted


@dataclass(eq=False)
class Enquiry(Aggregate):
    applicant_nric: str
    project_name: str
    message: str
    reply: str | None = None
    replied_by: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    replied_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self):
        self.applicant_nric = normalize_nric(self.applicant_nric)
        self.message = (self.message or '').strip()
        if not self.message:
            raise ValueError("Enquiry message cannot be empty")

    @classmethod
    def submit(cls, applicant_nric: str, project_name: str, message: str) -> 'Enquiry':
        enquiry = cls(applicant_nric=applicant_nric, project_name=project_name, message=message)
        enquiry.add_event(EnquirySubmitted(
            enquiry_id=str(enquiry.id),
            applicant_nric=enquiry.applicant_nric,
            project_name=enquiry.project_name,
            aggregate_id=str(enquiry.id),
        ))
        return enquiry

    @property
    def identity(self):
        return self.id

    @property
    def is_answered(self) -> bool:
        return self.reply is not None

    def is_authored_by(self, nric: str) -> bool:
        return self.applicant_nric == normalize_nric(nric)

    def ensure_editable_by(self, nric: str):
        """
        Raises:
            NotAuthorized: If ``nric`` is not the author
            InvalidStateTransition: If the enquiry was already answered
        """
        if not self.is_authored_by(nric):
            raise NotAuthorized(f"Only the author may change enquiry {self.id}")
        if self.is_answered:
            raise InvalidStateTransition(f"enquiry {self.id}", 'ANSWERED', 'change')

    def edit(self, author_nric: str, message: str):
        self.ensure_editable_by(author_nric)
        message = (message or '').strip()
        if not message:
            raise ValueError("Enquiry message cannot be empty")

        self.message = message
        self.add_event(EnquiryEdited(
            enquiry_id=str(self.id),
            applicant_nric=self.applicant_nric,
            aggregate_id=str(self.id),
        ))

    def answer(self, responder_nric: str, reply: str):
        """Record the reply; authorization is the caller's concern"""
        if self.is_answered:
            raise InvalidStateTransition(f"enquiry {self.id}", 'ANSWERED', 'reply to')
        reply = (reply or '').strip()
        if not reply:
            raise ValueError("Reply cannot be empty")

        self.reply = reply
        self.replied_by = normalize_nric(responder_nric)
        self.replied_at = datetime.now()

        self.add_event(EnquiryReplied(
            enquiry_id=str(self.id),
            project_name=self.project_name,
            replied_by=self.replied_by,
            aggregate_id=str(self.id),
        ))

    def __str__(self):
        return f"Enquiry {self.id} by {self.applicant_nric} on {self.project_name}"

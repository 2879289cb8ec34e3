"""Enquiry Domain Events"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class EnquirySubmitted(DomainEvent):
    enquiry_id: str
    applicant_nric: str
    project_name: str


@dataclass
class EnquiryEdited(DomainEvent):
    enquiry_id: str
    applicant_nric: str


@dataclass
class EnquiryReplied(DomainEvent):
    """Event: the project's manager or an approved officer answered"""
    enquiry_id: str
    project_name: str
    replied_by: str

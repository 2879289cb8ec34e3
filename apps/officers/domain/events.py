"""
Officer Domain Events

Events of the officer-registration lifecycle.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class OfficerRegistrationRequested(DomainEvent):
    """Event: NONE -> PENDING for (officer, project)"""
    officer_nric: str
    project_name: str


@dataclass
class OfficerRegistrationApproved(DomainEvent):
    """
    Event: PENDING -> APPROVED

    The officer may now book flats for SUCCESSFUL applicants of the project.
    """
    officer_nric: str
    project_name: str
    manager_nric: str


@dataclass
class OfficerRegistrationRejected(DomainEvent):
    """Event: PENDING -> REJECTED"""
    officer_nric: str
    project_name: str
    manager_nric: str

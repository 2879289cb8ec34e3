"""
Application Domain Events

Events that represent transitions of an applicant's application status.
They are published after the unit of work commits.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass
class ApplicationSubmitted(DomainEvent):
    """
    Event: NONE/UNSUCCESSFUL -> PENDING

    No unit is held yet; pending applications compete for the same
    inventory until a manager approves one.
    """
    nric: str
    project_name: str
    room_type: str


@dataclass
class ApplicationApproved(DomainEvent):
    """Event: PENDING -> SUCCESSFUL, one unit reserved"""
    nric: str
    project_name: str
    room_type: str


@dataclass
class ApplicationRejected(DomainEvent):
    """Event: PENDING -> UNSUCCESSFUL"""
    nric: str
    project_name: str


@dataclass
class WithdrawalRequested(DomainEvent):
    """Event: PENDING/SUCCESSFUL/BOOKED -> PENDING_WITHDRAWAL"""
    nric: str
    project_name: str
    previous_status: str


@dataclass
class WithdrawalApproved(DomainEvent):
    """
    Event: PENDING_WITHDRAWAL -> NONE

    ``unit_released`` tells whether a reserved unit went back to the pool.
    """
    nric: str
    project_name: str
    unit_released: bool


@dataclass
class WithdrawalRejected(DomainEvent):
    """Event: PENDING_WITHDRAWAL -> the status held before the request"""
    nric: str
    project_name: str
    restored_status: str


@dataclass
class FlatBooked(DomainEvent):
    """Event: SUCCESSFUL -> BOOKED by an approved officer"""
    nric: str
    project_name: str
    room_type: str
    officer_nric: str

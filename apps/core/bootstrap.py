"""
Bootstrap

Wires every command of the housing core to its handler on a message bus,
so the boundary layer only builds command dataclasses:

    bus = bootstrap()
    bus.handle_command(ApproveApplicationCommand(manager_nric, applicant_nric))

Tests and scripts pass their own unit-of-work factory, typically one bound
to an InMemoryStore.
"""

from datetime import date
from typing import Callable, Optional
import logging

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent

from apps.applications.application.command_handlers import (
    ApproveApplicationCommand,
    ApproveApplicationHandler,
    ApproveWithdrawalCommand,
    ApproveWithdrawalHandler,
    RejectApplicationCommand,
    RejectApplicationHandler,
    RejectWithdrawalCommand,
    RejectWithdrawalHandler,
    RequestWithdrawalCommand,
    RequestWithdrawalHandler,
    SubmitApplicationCommand,
    SubmitApplicationHandler,
)
from apps.applications.domain.eligibility import EligibilityPolicy
from apps.bookings.application.command_handlers import (
    BookFlatCommand,
    BookFlatHandler,
    GenerateReceiptCommand,
    GenerateReceiptHandler,
)
from apps.core.uow import DjangoHousingUnitOfWork
from apps.enquiries.application.command_handlers import (
    DeleteEnquiryCommand,
    DeleteEnquiryHandler,
    EditEnquiryCommand,
    EditEnquiryHandler,
    ReplyToEnquiryCommand,
    ReplyToEnquiryHandler,
    SubmitEnquiryCommand,
    SubmitEnquiryHandler,
)
from apps.officers.application.command_handlers import (
    ApproveRegistrationCommand,
    ApproveRegistrationHandler,
    RejectRegistrationCommand,
    RejectRegistrationHandler,
    RequestRegistrationCommand,
    RequestRegistrationHandler,
)
from apps.projects.application.command_handlers import (
    AddRoomSupplyCommand,
    AddRoomSupplyHandler,
    CreateProjectCommand,
    CreateProjectHandler,
    DeleteProjectCommand,
    DeleteProjectHandler,
    EditProjectCommand,
    EditProjectHandler,
    SetProjectFilterCommand,
    SetProjectFilterHandler,
    ToggleVisibilityCommand,
    ToggleVisibilityHandler,
)

logger = logging.getLogger(__name__)


def log_domain_event(event: DomainEvent):
    logger.info(f"{event.__class__.__name__} on {event.aggregate_id} ({event.event_id})")


def bootstrap(
    uow_factory: Optional[Callable] = None,
    bus: Optional[MessageBus] = None,
    clock: Callable[[], date] = date.today,
    policy: Optional[EligibilityPolicy] = None,
) -> MessageBus:
    """
    Build a message bus with every command handler registered.

    Without ``uow_factory`` each command runs in a DjangoHousingUnitOfWork
    publishing its events on the returned bus.
    """
    bus = bus or MessageBus()
    if uow_factory is None:
        def uow_factory():
            return DjangoHousingUnitOfWork(bus)

    handlers = {
        # Applications
        SubmitApplicationCommand: SubmitApplicationHandler(uow_factory, clock, policy),
        ApproveApplicationCommand: ApproveApplicationHandler(uow_factory),
        RejectApplicationCommand: RejectApplicationHandler(uow_factory),
        RequestWithdrawalCommand: RequestWithdrawalHandler(uow_factory),
        ApproveWithdrawalCommand: ApproveWithdrawalHandler(uow_factory),
        RejectWithdrawalCommand: RejectWithdrawalHandler(uow_factory),
        # Officer registrations
        RequestRegistrationCommand: RequestRegistrationHandler(uow_factory),
        ApproveRegistrationCommand: ApproveRegistrationHandler(uow_factory),
        RejectRegistrationCommand: RejectRegistrationHandler(uow_factory),
        # Bookings
        BookFlatCommand: BookFlatHandler(uow_factory),
        GenerateReceiptCommand: GenerateReceiptHandler(uow_factory, clock),
        # Project catalogue
        CreateProjectCommand: CreateProjectHandler(uow_factory),
        EditProjectCommand: EditProjectHandler(uow_factory),
        AddRoomSupplyCommand: AddRoomSupplyHandler(uow_factory),
        ToggleVisibilityCommand: ToggleVisibilityHandler(uow_factory),
        DeleteProjectCommand: DeleteProjectHandler(uow_factory),
        SetProjectFilterCommand: SetProjectFilterHandler(uow_factory),
        # Enquiries
        SubmitEnquiryCommand: SubmitEnquiryHandler(uow_factory),
        EditEnquiryCommand: EditEnquiryHandler(uow_factory),
        DeleteEnquiryCommand: DeleteEnquiryHandler(uow_factory),
        ReplyToEnquiryCommand: ReplyToEnquiryHandler(uow_factory),
    }
    for command_type, handler in handlers.items():
        bus.register_command_handler(command_type, handler.handle)

    bus.register_event_handler(DomainEvent, log_domain_event)

    logger.debug(f"Bootstrapped message bus with {len(handlers)} command handlers")
    return bus

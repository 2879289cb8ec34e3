"""Enquiries: authoring rules and replies by project staff."""

import uuid

import pytest

from shared.domain.exceptions import InvalidStateTransition, NotAuthorized, NotFound

from apps.enquiries.application.command_handlers import (
    DeleteEnquiryCommand,
    EditEnquiryCommand,
    ReplyToEnquiryCommand,
    SubmitEnquiryCommand,
)
from apps.enquiries.application.queries import enquiries_by_applicant, enquiries_by_project
from apps.enquiries.domain.entities import Enquiry
from apps.officers.application.command_handlers import (
    ApproveRegistrationCommand,
    RequestRegistrationCommand,
)


def test_empty_message_is_refused():
    with pytest.raises(ValueError):
        Enquiry.submit('S1234567A', 'Acacia Breeze', '   ')


def test_only_author_edits_until_answered():
    enquiry = Enquiry.submit('S1234567A', 'Acacia Breeze', 'Is there parking?')

    with pytest.raises(NotAuthorized):
        enquiry.edit('T7654321B', 'Changed')

    enquiry.edit('s1234567a', 'Is there covered parking?')
    assert enquiry.message == 'Is there covered parking?'

    enquiry.answer('S5678901G', 'Yes, multi-storey.')
    with pytest.raises(InvalidStateTransition):
        enquiry.edit('S1234567A', 'Another question')
    with pytest.raises(InvalidStateTransition):
        enquiry.answer('S5678901G', 'Second reply')
    assert enquiry.reply == 'Yes, multi-storey.'


def test_enquiry_lifecycle_through_bus(bus, seed, uow_factory):
    enquiry = bus.handle_command(SubmitEnquiryCommand(seed.single, seed.project, 'When is completion?'))

    bus.handle_command(EditEnquiryCommand(seed.single, enquiry.id, 'When is the expected completion?'))
    bus.handle_command(ReplyToEnquiryCommand(seed.manager, enquiry.id, 'Q4 2028.'))

    with uow_factory() as uow:
        [stored] = enquiries_by_applicant(uow, seed.single)
        assert stored.message == 'When is the expected completion?'
        assert stored.reply == 'Q4 2028.'
        assert stored.replied_by == seed.manager
        assert enquiries_by_project(uow, seed.project, unanswered_only=True) == []

    with pytest.raises(InvalidStateTransition):
        bus.handle_command(DeleteEnquiryCommand(seed.single, enquiry.id))


def test_unanswered_enquiry_can_be_deleted_by_author(bus, seed, uow_factory):
    enquiry = bus.handle_command(SubmitEnquiryCommand(seed.single, seed.project, 'Pets allowed?'))

    with pytest.raises(NotAuthorized):
        bus.handle_command(DeleteEnquiryCommand(seed.married, enquiry.id))

    bus.handle_command(DeleteEnquiryCommand(seed.single, str(enquiry.id)))

    with uow_factory() as uow:
        assert enquiries_by_applicant(uow, seed.single) == []
    with pytest.raises(NotFound):
        bus.handle_command(DeleteEnquiryCommand(seed.single, enquiry.id))


def test_reply_by_approved_officer_only(bus, seed):
    enquiry = bus.handle_command(SubmitEnquiryCommand(seed.married, seed.project, 'Any 3-room left?'))

    with pytest.raises(NotAuthorized):
        bus.handle_command(ReplyToEnquiryCommand(seed.other_manager, enquiry.id, 'Yes'))
    with pytest.raises(NotAuthorized):
        bus.handle_command(ReplyToEnquiryCommand(seed.officer, enquiry.id, 'Yes'))

    bus.handle_command(RequestRegistrationCommand(seed.officer, seed.project))
    bus.handle_command(ApproveRegistrationCommand(seed.manager, seed.officer))

    answered = bus.handle_command(ReplyToEnquiryCommand(seed.officer, enquiry.id, 'Two are left.'))
    assert answered.replied_by == seed.officer


def test_enquiries_by_project_lists_unanswered(bus, seed, uow_factory):
    first = bus.handle_command(SubmitEnquiryCommand(seed.single, seed.project, 'First'))
    bus.handle_command(SubmitEnquiryCommand(seed.married, seed.project, 'Second'))
    bus.handle_command(ReplyToEnquiryCommand(seed.manager, first.id, 'Answered'))

    with uow_factory() as uow:
        unanswered = enquiries_by_project(uow, 'ACACIA BREEZE', unanswered_only=True)
        everything = enquiries_by_project(uow, seed.project)

    assert [e.message for e in unanswered] == ['Second']
    assert len(everything) == 2


def test_unknown_enquiry_or_project(bus, seed):
    with pytest.raises(NotFound):
        bus.handle_command(EditEnquiryCommand(seed.single, uuid.uuid4(), 'x'))
    with pytest.raises(NotFound):
        bus.handle_command(EditEnquiryCommand(seed.single, 'not-a-uuid', 'x'))
    with pytest.raises(NotFound):
        bus.handle_command(SubmitEnquiryCommand(seed.single, 'Nowhere', 'Hello'))

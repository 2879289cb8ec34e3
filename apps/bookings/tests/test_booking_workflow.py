"""Flat booking, receipts and the booking report."""

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.exceptions import InvalidStateTransition, NotAuthorized, ReceiptUnavailable
from shared.domain.value_objects import Money

from apps.applications.application.command_handlers import (
    ApproveApplicationCommand,
    SubmitApplicationCommand,
)
from apps.applications.domain.entities import Applicant, ApplicationStatus
from apps.bookings.application.command_handlers import BookFlatCommand, GenerateReceiptCommand
from apps.bookings.application.queries import booking_report
from apps.bookings.domain.receipt import Receipt
from apps.officers.application.command_handlers import (
    ApproveRegistrationCommand,
    RequestRegistrationCommand,
)
from apps.officers.domain.entities import Officer
from apps.projects.domain.inventory import RoomType


@pytest.fixture
def approved_officer(bus, seed):
    bus.handle_command(RequestRegistrationCommand(seed.officer, seed.project))
    bus.handle_command(ApproveRegistrationCommand(seed.manager, seed.officer))
    return seed.officer


def successful(bus, seed, nric, room_type):
    bus.handle_command(SubmitApplicationCommand(nric, seed.project, room_type))
    bus.handle_command(ApproveApplicationCommand(seed.manager, nric))


def test_officer_books_successful_application(bus, seed, uow_factory, approved_officer):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)

    booked = bus.handle_command(BookFlatCommand(approved_officer, seed.married))

    assert booked.status == ApplicationStatus.BOOKED
    with uow_factory() as uow:
        assert uow.applicants.get(seed.married).status == ApplicationStatus.BOOKED
        assert uow.rooms.get(seed.project, RoomType.THREE_ROOM).available_units == 2


def test_unapproved_officer_cannot_book(bus, seed, uow_factory):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)
    bus.handle_command(RequestRegistrationCommand(seed.officer, seed.project))

    with pytest.raises(NotAuthorized):
        bus.handle_command(BookFlatCommand(seed.officer, seed.married))

    with uow_factory() as uow:
        assert uow.applicants.get(seed.married).status == ApplicationStatus.SUCCESSFUL


def test_booking_requires_successful_status(bus, seed, approved_officer):
    bus.handle_command(SubmitApplicationCommand(seed.married, seed.project, RoomType.TWO_ROOM))

    with pytest.raises(InvalidStateTransition):
        bus.handle_command(BookFlatCommand(approved_officer, seed.married))
    with pytest.raises(InvalidStateTransition):
        bus.handle_command(BookFlatCommand(approved_officer, seed.single))


def test_receipt_for_booked_applicant(bus, seed, approved_officer):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)
    bus.handle_command(BookFlatCommand(approved_officer, seed.married))

    receipt = bus.handle_command(GenerateReceiptCommand(seed.married, approved_officer))

    assert receipt.applicant_name == 'Sarah'
    assert receipt.room_type == 'ThreeRoom'
    assert receipt.price == Money(Decimal('450000'))
    assert receipt.generated_on == seed.today
    assert receipt.render() == (
        "-------------------------------------------\n"
        "        BTO Booking Confirmation\n"
        "-------------------------------------------\n"
        "Applicant Name: Sarah\n"
        "Applicant NRIC: T7654321B\n"
        "Age:            24\n"
        "Marital Status: Married\n"
        "\n"
        "Booking Details:\n"
        "  Project Name:     Acacia Breeze\n"
        "  Neighbourhood:    Yishun\n"
        "  Flat Type Booked: ThreeRoom\n"
        "  Price:            SGD 450,000.00\n"
        "-------------------------------------------\n"
        "Date Generated: 2025-02-15\n"
        "-------------------------------------------\n"
    )


def test_receipt_before_booking_is_unavailable(bus, seed):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)

    with pytest.raises(ReceiptUnavailable):
        bus.handle_command(GenerateReceiptCommand(seed.married))
    with pytest.raises(ReceiptUnavailable):
        bus.handle_command(GenerateReceiptCommand(seed.single))


def test_receipt_refused_to_officer_of_another_project(bus, seed, approved_officer, uow_factory):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)
    bus.handle_command(BookFlatCommand(approved_officer, seed.married))
    with uow_factory() as uow:
        uow.officers.add(Officer(
            applicant=Applicant('S4444444D', 'Wei Ming', 40, True),
        ))

    with pytest.raises(NotAuthorized):
        bus.handle_command(GenerateReceiptCommand(seed.married, 'S4444444D'))


def test_receipt_value_object_is_immutable():
    receipt = Receipt(
        applicant_name='John',
        applicant_nric='S1234567A',
        applicant_age=35,
        is_married=False,
        project_name='Acacia Breeze',
        neighbourhood='Yishun',
        room_type='TwoRoom',
        price=Money(Decimal('350000')),
        generated_on=date(2025, 2, 15),
    )

    with pytest.raises(AttributeError):
        receipt.applicant_name = 'Someone else'
    assert 'Marital Status: Single' in str(receipt)


def test_booking_report_filters(bus, seed, uow_factory, approved_officer):
    successful(bus, seed, seed.married, RoomType.THREE_ROOM)
    successful(bus, seed, seed.single, RoomType.TWO_ROOM)
    bus.handle_command(BookFlatCommand(approved_officer, seed.married))
    bus.handle_command(BookFlatCommand(approved_officer, seed.single))

    with uow_factory() as uow:
        everyone = booking_report(uow)
        married = booking_report(uow, married=True)
        two_room = booking_report(uow, room_type='TwoRoom')
        others = booking_report(uow, manager_nric=seed.other_manager)

    assert [row.nric for row in everyone] == [seed.single, seed.married]
    assert [row.nric for row in married] == [seed.married]
    assert [(row.nric, row.price) for row in two_room] == [(seed.single, Money(Decimal('350000')))]
    assert others == []
    assert everyone[1].marital_status == 'Married'
    assert everyone[1].neighbourhood == 'Yishun'

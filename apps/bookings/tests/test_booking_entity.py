"""Unit tests for the booking aggregate's transitions."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking, BookingStatus, PaymentStatus, stay_dates
from apps.bookings.domain.events import BookingCancelled, BookingConfirmed, BookingCreated
from apps.bookings.exceptions import InvalidBookingState, InvalidDateRange


def _open() -> Booking:
    return Booking.open(
        property_id=uuid4(),
        dates=DateRange(date(2024, 6, 1), date(2024, 6, 4)),
        guests=2,
        total_price=3360,
    )


def test_open_starts_pending_and_records_event() -> None:
    booking = _open()

    assert (booking.status, booking.payment_status) == (BookingStatus.PENDING, PaymentStatus.PENDING)
    assert [type(event) for event in booking.events] == [BookingCreated]
    assert booking.nights == 3
    assert booking.blocks_dates()


def test_stay_dates_rejects_empty_range() -> None:
    with pytest.raises(InvalidDateRange):
        stay_dates(date(2024, 6, 1), date(2024, 6, 1))
    with pytest.raises(InvalidDateRange):
        stay_dates(None, date(2024, 6, 1))


def test_invalid_guest_count() -> None:
    with pytest.raises(ValueError):
        Booking(property_id=uuid4(), dates=DateRange(date(2024, 6, 1), date(2024, 6, 2)), guests=0, total_price=1)


def test_confirm_then_confirm_again() -> None:
    booking = _open()
    booking.clear_events()

    assert booking.confirm("inv_1")
    assert not booking.confirm("inv_1")
    assert [type(event) for event in booking.events] == [BookingConfirmed]
    assert booking.blocks_dates()


def test_confirm_with_new_reference_updates_reference_without_new_event() -> None:
    booking = _open()
    booking.clear_events()
    booking.confirm("inv_1")

    assert booking.confirm("inv_2")
    assert booking.payment_reference == "inv_2"
    assert len(booking.events) == 1


def test_confirm_never_overrides_cancellation() -> None:
    booking = _open()
    booking.cancel_for_payment_failure()

    assert not booking.confirm("inv_1")
    assert booking.status == BookingStatus.CANCELLED


def test_cancel_records_reason() -> None:
    booking = _open()
    booking.clear_events()

    assert booking.cancel_for_payment_failure()
    assert not booking.cancel_for_payment_failure()
    (event,) = booking.events
    assert isinstance(event, BookingCancelled)
    assert event.reason == "payment_failed"
    assert event.old_status == "pending"
    assert not booking.blocks_dates()


def test_attach_reference_only_while_pending() -> None:
    booking = _open()

    assert booking.attach_payment_reference("inv_1")
    assert not booking.attach_payment_reference("inv_1")
    booking.cancel_for_payment_failure()
    with pytest.raises(InvalidBookingState):
        booking.attach_payment_reference("inv_2")

"""Unit tests for the booking ledger against the in-memory store."""

from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest

from apps.bookings.application.ledger import BookingLedger, CreateBookingCommand
from apps.bookings.domain.entities import BookingStatus, PaymentStatus
from apps.bookings.domain.events import BookingCancelled, BookingConfirmed, BookingCreated
from apps.bookings.exceptions import (
    BookingConflictError,
    BookingNotFound,
    CapacityExceeded,
    ConcurrentBookingUpdate,
    InvalidBookingState,
    InvalidDateRange,
    PropertyNotFound,
)
from apps.bookings.tests.fakes import InMemoryBookingRepository, RacingRepository


@pytest.fixture
def repo() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def prop(repo):
    return repo.add_property(base_price=1000, max_guests=4)


@pytest.fixture
def ledger(repo) -> BookingLedger:
    return BookingLedger(repo)


def _command(prop, check_in=date(2024, 6, 1), check_out=date(2024, 6, 4), guests=2, **extra) -> CreateBookingCommand:
    return CreateBookingCommand(
        property_id=prop.id,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        guest_name=extra.pop("guest_name", "Juan Dela Cruz"),
        guest_email=extra.pop("guest_email", "juan@example.com"),
        **extra,
    )


class TestCreate:
    def test_creates_pending_booking_with_server_price(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        assert booking.status == BookingStatus.PENDING
        assert booking.payment_status == PaymentStatus.PENDING
        assert booking.total_price == 3360
        assert booking.nights == 3
        assert repo.get(booking.id) == booking
        assert len(repo.events_of(BookingCreated)) == 1

    def test_ignores_client_supplied_total(self, ledger, prop, caplog) -> None:
        booking = ledger.create(_command(prop, quoted_total=1))

        assert booking.total_price == 3360
        assert "Client quoted 1" in caplog.text

    def test_same_day_rejected(self, ledger, repo, prop) -> None:
        with pytest.raises(InvalidDateRange):
            ledger.create(_command(prop, check_in=date(2024, 6, 1), check_out=date(2024, 6, 1)))
        assert repo.bookings == {}

    def test_inverted_dates_rejected(self, ledger, prop) -> None:
        with pytest.raises(InvalidDateRange):
            ledger.create(_command(prop, check_in=date(2024, 6, 5), check_out=date(2024, 6, 1)))

    def test_unknown_property(self, ledger, prop) -> None:
        command = _command(prop)
        command.property_id = uuid4()

        with pytest.raises(PropertyNotFound):
            ledger.create(command)

    def test_unlisted_property(self, ledger, repo) -> None:
        hidden = repo.add_property(listed=False)

        with pytest.raises(PropertyNotFound):
            ledger.create(_command(hidden))

    def test_capacity_exceeded_persists_nothing(self, ledger, repo, prop) -> None:
        with pytest.raises(CapacityExceeded) as excinfo:
            ledger.create(_command(prop, guests=5))

        assert str(excinfo.value) == "Maximum 4 guests allowed"
        assert repo.bookings == {}
        assert repo.published == []

    def test_overlap_conflicts(self, ledger, repo, prop) -> None:
        ledger.create(_command(prop, check_in=date(2024, 6, 1), check_out=date(2024, 6, 5)))

        with pytest.raises(BookingConflictError) as excinfo:
            ledger.create(_command(prop, check_in=date(2024, 6, 4), check_out=date(2024, 6, 8)))

        assert str(excinfo.value) == "Property is not available for these dates"
        assert len(repo.bookings) == 1

    def test_back_to_back_allowed(self, ledger, repo, prop) -> None:
        ledger.create(_command(prop, check_in=date(2024, 6, 1), check_out=date(2024, 6, 5)))
        ledger.create(_command(prop, check_in=date(2024, 6, 5), check_out=date(2024, 6, 10)))

        assert len(repo.bookings) == 2

    def test_cancelled_booking_frees_dates(self, ledger, prop) -> None:
        first = ledger.create(_command(prop))
        ledger.cancel_for_payment_failure(first.id)

        second = ledger.create(_command(prop))

        assert second.id != first.id

    def test_date_validation_runs_before_property_lookup(self, ledger, prop) -> None:
        command = _command(prop, check_in=date(2024, 6, 2), check_out=date(2024, 6, 1))
        command.property_id = uuid4()

        with pytest.raises(InvalidDateRange):
            ledger.create(command)


class TestAttachPaymentReference:
    def test_stores_reference_and_keeps_status(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        updated = ledger.attach_payment_reference(booking.id, "inv_123")

        assert updated.payment_reference == "inv_123"
        assert repo.get(booking.id).status == BookingStatus.PENDING
        assert repo.get(booking.id).version == 1

    def test_unknown_booking(self, ledger, prop) -> None:
        with pytest.raises(BookingNotFound):
            ledger.attach_payment_reference(uuid4(), "inv_123")

    def test_non_pending_rejected(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))
        ledger.confirm(booking.id, "inv_1")

        with pytest.raises(InvalidBookingState):
            ledger.attach_payment_reference(booking.id, "inv_2")
        assert repo.get(booking.id).payment_reference == "inv_1"


class TestConfirm:
    def test_confirms_pending_booking(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        result = ledger.confirm(booking.id, "inv_123")

        assert result.changed
        stored = repo.get(booking.id)
        assert stored.status == BookingStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.PAID
        assert stored.payment_reference == "inv_123"
        assert len(repo.events_of(BookingConfirmed)) == 1

    def test_confirm_twice_is_idempotent(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        ledger.confirm(booking.id, "inv_123")
        once = repo.get(booking.id)
        second = ledger.confirm(booking.id, "inv_123")
        twice = repo.get(booking.id)

        assert not second.changed
        assert (twice.status, twice.payment_status, twice.payment_reference, twice.version) == (
            once.status,
            once.payment_status,
            once.payment_reference,
            once.version,
        )
        assert len(repo.events_of(BookingConfirmed)) == 1

    def test_confirm_does_not_revive_cancelled_booking(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))
        ledger.cancel_for_payment_failure(booking.id)

        result = ledger.confirm(booking.id, "inv_late")

        assert not result.changed
        stored = repo.get(booking.id)
        assert stored.status == BookingStatus.CANCELLED
        assert stored.payment_status == PaymentStatus.PENDING
        assert repo.events_of(BookingConfirmed) == []

    def test_confirm_unknown_booking_returns_not_found(self, ledger) -> None:
        result = ledger.confirm(uuid4(), "inv_123")

        assert not result.found
        assert not result.changed

    def test_retries_after_concurrent_write(self, prop) -> None:
        repo = RacingRepository(conflicts=2)
        repo.properties[prop.id] = prop
        ledger = BookingLedger(repo)
        booking = ledger.create(_command(prop))

        result = ledger.confirm(booking.id, "inv_123")

        assert result.changed
        assert repo.get(booking.id).status == BookingStatus.CONFIRMED
        assert len(repo.events_of(BookingConfirmed)) == 1

    def test_gives_up_after_max_attempts(self, prop) -> None:
        repo = RacingRepository(conflicts=10)
        repo.properties[prop.id] = prop
        ledger = BookingLedger(repo, max_attempts=3)
        booking = ledger.create(_command(prop))

        with pytest.raises(ConcurrentBookingUpdate):
            ledger.confirm(booking.id, "inv_123")
        assert repo.get(booking.id).status == BookingStatus.PENDING


class TestCancelForPaymentFailure:
    def test_cancels_and_keeps_record(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        result = ledger.cancel_for_payment_failure(booking.id)

        assert result.changed
        stored = repo.get(booking.id)
        assert stored.status == BookingStatus.CANCELLED
        assert stored.payment_status == PaymentStatus.PENDING
        events = repo.events_of(BookingCancelled)
        assert len(events) == 1
        assert events[0].reason == "payment_failed"

    def test_twice_is_noop(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))

        ledger.cancel_for_payment_failure(booking.id)
        second = ledger.cancel_for_payment_failure(booking.id)

        assert not second.changed
        assert repo.get(booking.id).status == BookingStatus.CANCELLED
        assert len(repo.events_of(BookingCancelled)) == 1

    def test_late_failure_does_not_cancel_paid_booking(self, ledger, repo, prop) -> None:
        booking = ledger.create(_command(prop))
        ledger.confirm(booking.id, "inv_123")

        result = ledger.cancel_for_payment_failure(booking.id)

        assert not result.changed
        stored = repo.get(booking.id)
        assert stored.status == BookingStatus.CONFIRMED
        assert stored.payment_status == PaymentStatus.PAID

    def test_unknown_booking(self, ledger) -> None:
        assert not ledger.cancel_for_payment_failure(uuid4()).found


def test_max_attempts_must_be_positive(repo) -> None:
    with pytest.raises(ValueError):
        BookingLedger(repo, max_attempts=0)

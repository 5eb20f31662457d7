"""
Booking Ledger

Use cases for the booking lifecycle. The ledger is the only writer of
booking records:

- create: validate, check availability and insert a (pending, pending) booking
- attach_payment_reference: remember the invoice created for a pending booking
- confirm: payment received -> (confirmed, paid)
- cancel_for_payment_failure: invoice expired or failed -> (cancelled, pending)

Transitions are read-modify-write cycles guarded by the booking version:
a write only lands if nobody else wrote since the read, otherwise the
ledger reloads and re-applies the transition.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable
from uuid import UUID
import logging

from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.entities import Booking, stay_dates
from apps.bookings.domain.pricing import calculate_total_price
from apps.bookings.exceptions import (
    BookingConflictError,
    BookingNotFound,
    CapacityExceeded,
    ConcurrentBookingUpdate,
    PropertyNotFound,
)
from apps.bookings.repositories import AbstractBookingRepository, PropertySnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``quoted_total`` is the price the client displayed, if any. It is only
    compared against the server-side price, never stored.
    """
    property_id: UUID
    check_in: date
    check_out: date
    guests: int
    guest_name: str = ''
    guest_email: str = ''
    quoted_total: int | None = None


@dataclass
class TransitionResult:
    """Outcome of a transition: the booking as stored and whether this call changed it"""
    booking: Booking | None
    changed: bool = False

    @property
    def found(self) -> bool:
        return self.booking is not None


class BookingLedger:
    """
    Booking lifecycle operations

    Usage:
        ledger = BookingLedger(DjangoBookingRepository())
        booking = ledger.create(CreateBookingCommand(...))
    """

    def __init__(self, repository: AbstractBookingRepository, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.repository = repository
        self.availability = AvailabilityChecker(repository)
        self.max_attempts = max_attempts

    # ===== Queries =====

    def get(self, booking_id: UUID) -> Booking:
        booking = self.repository.get(booking_id)
        if booking is None:
            raise BookingNotFound()
        return booking

    def get_property(self, property_id: UUID) -> PropertySnapshot:
        prop = self.repository.get_property(property_id)
        if prop is None or not prop.listed:
            raise PropertyNotFound()
        return prop

    # ===== Creation =====

    def create(self, command: CreateBookingCommand) -> Booking:
        """
        Create a pending booking

        Raises:
            InvalidDateRange: check_out is not after check_in
            PropertyNotFound: unknown or unlisted property
            CapacityExceeded: more guests than the property sleeps
            BookingConflictError: dates overlap an active booking
        """
        dates = stay_dates(command.check_in, command.check_out)
        prop = self.get_property(command.property_id)

        if command.guests > prop.max_guests:
            raise CapacityExceeded(f"Maximum {prop.max_guests} guests allowed")

        total_price = calculate_total_price(prop.base_price, dates.start_date, dates.end_date)
        if command.quoted_total is not None and command.quoted_total != total_price:
            logger.warning(
                "Client quoted %s for property %s (%s), charging %s",
                command.quoted_total,
                prop.id,
                dates,
                total_price,
            )

        with self.repository.property_lock(prop.id):
            if not self.availability.is_available(prop.id, dates.start_date, dates.end_date):
                logger.info("Property %s is not available for %s", prop.id, dates)
                raise BookingConflictError()

            booking = Booking.open(
                property_id=prop.id,
                dates=dates,
                guests=command.guests,
                total_price=total_price,
                guest_name=command.guest_name,
                guest_email=command.guest_email,
            )
            self.repository.add(booking)

        logger.info(
            "Booking %s created for property %s (%s), total %s",
            booking.id,
            prop.id,
            dates,
            total_price,
        )
        return booking

    # ===== Transitions =====

    def attach_payment_reference(self, booking_id: UUID, reference: str) -> Booking:
        """
        Store the invoice reference on a pending booking

        Raises:
            BookingNotFound: unknown booking
            InvalidBookingState: booking is no longer pending
        """
        result = self._transition(
            booking_id,
            lambda booking: booking.attach_payment_reference(reference),
        )
        if not result.found:
            raise BookingNotFound()
        return result.booking

    def confirm(self, booking_id: UUID, payment_reference: str) -> TransitionResult:
        """
        Mark the booking paid

        Safe to repeat. A cancelled or completed booking is left alone.
        """
        result = self._transition(booking_id, lambda booking: booking.confirm(payment_reference))
        if not result.found:
            logger.warning("Cannot confirm booking %s: not found", booking_id)
        elif result.changed:
            logger.info("Booking %s confirmed with payment %s", booking_id, payment_reference)
        elif not result.booking.blocks_dates():
            logger.warning(
                "Ignoring payment %s for booking %s in status %s",
                payment_reference,
                booking_id,
                result.booking.status.value,
            )
        return result

    def cancel_for_payment_failure(self, booking_id: UUID) -> TransitionResult:
        """
        Cancel a pending booking whose payment expired or failed

        Safe to repeat. Confirmed and completed bookings are left alone.
        """
        result = self._transition(booking_id, lambda booking: booking.cancel_for_payment_failure())
        if not result.found:
            logger.warning("Cannot cancel booking %s: not found", booking_id)
        elif result.changed:
            logger.info("Booking %s cancelled after payment failure", booking_id)
        elif result.booking.blocks_dates():
            logger.warning(
                "Ignoring payment failure for booking %s in status %s",
                booking_id,
                result.booking.status.value,
            )
        return result

    def _transition(self, booking_id: UUID, apply: Callable[[Booking], bool]) -> TransitionResult:
        for attempt in range(1, self.max_attempts + 1):
            booking = self.repository.get(booking_id)
            if booking is None:
                return TransitionResult(booking=None)

            expected_version = booking.version
            if not apply(booking):
                return TransitionResult(booking=booking, changed=False)

            if self.repository.update(booking, expected_version):
                return TransitionResult(booking=booking, changed=True)

            logger.info(
                "Booking %s changed concurrently (attempt %d/%d), retrying",
                booking_id,
                attempt,
                self.max_attempts,
            )

        raise ConcurrentBookingUpdate()

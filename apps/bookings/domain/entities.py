"""
Booking Domain Entities

- Booking: aggregate root for a reservation
- BookingStatus / PaymentStatus: the two axes of the lifecycle
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import DateRange

from apps.bookings.exceptions import InvalidBookingState, InvalidDateRange


class BookingStatus(Enum):
    """
    Booking lifecycle

    Reachable transitions:
    - PENDING -> CONFIRMED (payment received)
    - PENDING -> CANCELLED (invoice expired or payment failed)
    CONFIRMED, CANCELLED and COMPLETED never go back to PENDING.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


class PaymentStatus(Enum):
    PENDING = 'pending'
    PAID = 'paid'
    REFUNDED = 'refunded'


# Bookings in these states hold their dates
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def stay_dates(check_in: date, check_out: date) -> DateRange:
    """Build the stay range, rejecting empty or inverted ranges."""
    if check_in is None or check_out is None:
        raise InvalidDateRange("Check-in and check-out dates are required")
    try:
        return DateRange(check_in, check_out)
    except ValueError as exc:
        raise InvalidDateRange() from exc


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - check_in < check_out
    - status/payment_status only move forward; the transition methods
      refuse anything that would regress a settled booking
    - total_price is fixed at creation and is what the guest is charged
    """

    property_id: UUID
    dates: DateRange
    guests: int
    total_price: int

    guest_name: str = ''
    guest_email: str = ''

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: str = ''

    def __post_init__(self):
        if self.guests < 1:
            raise ValueError("Guests count must be at least 1")
        if self.total_price < 0:
            raise ValueError("Total price cannot be negative")

    @classmethod
    def open(
        cls,
        *,
        property_id: UUID,
        dates: DateRange,
        guests: int,
        total_price: int,
        guest_name: str = '',
        guest_email: str = '',
    ) -> 'Booking':
        """Create a new (pending, pending) booking"""
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            property_id=property_id,
            dates=dates,
            guests=guests,
            total_price=total_price,
            guest_name=guest_name or '',
            guest_email=guest_email or '',
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            property_id=property_id,
            dates=dates,
            total_price=total_price,
        ))
        return booking

    @property
    def check_in(self) -> date:
        return self.dates.start_date

    @property
    def check_out(self) -> date:
        return self.dates.end_date

    @property
    def nights(self) -> int:
        return len(self.dates)

    def blocks_dates(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def attach_payment_reference(self, reference: str) -> bool:
        """
        Remember the invoice created for this booking

        Only a pending booking can start a payment. Returns False when the
        same reference is already stored.
        """
        if self.status != BookingStatus.PENDING:
            raise InvalidBookingState(
                f"Cannot attach a payment to a booking with status {self.status.value}"
            )
        if self.payment_reference == reference:
            return False
        self.payment_reference = reference
        self.touch()
        return True

    def confirm(self, payment_reference: str) -> bool:
        """
        Mark the booking paid (-> confirmed, paid)

        Returns False without touching anything when the booking is already
        cancelled or completed, or already confirmed with this reference.
        """
        if self.status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED):
            return False

        already_confirmed = (
            self.status == BookingStatus.CONFIRMED
            and self.payment_status == PaymentStatus.PAID
        )
        if already_confirmed and self.payment_reference == payment_reference:
            return False

        self.status = BookingStatus.CONFIRMED
        self.payment_status = PaymentStatus.PAID
        self.payment_reference = payment_reference or self.payment_reference
        self.touch()

        if not already_confirmed:
            from apps.bookings.domain.events import BookingConfirmed

            self.add_event(BookingConfirmed(
                aggregate_id=self.id,
                booking_id=self.id,
                property_id=self.property_id,
                payment_reference=self.payment_reference,
                dates=self.dates,
            ))
        return True

    def cancel_for_payment_failure(self) -> bool:
        """
        Release the dates after an expired or failed payment (-> cancelled, pending)

        The record is kept. Returns False when already cancelled, and also
        for confirmed or completed bookings: a late failure notice never
        undoes a payment that went through.
        """
        if self.status != BookingStatus.PENDING:
            return False

        from apps.bookings.domain.events import BookingCancelled

        old_status = self.status
        self.status = BookingStatus.CANCELLED
        self.payment_status = PaymentStatus.PENDING
        self.touch()

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            reason='payment_failed',
            old_status=old_status.value,
        ))
        return True

    def __str__(self):
        return f"Booking {self.id} ({self.status.value}/{self.payment_status.value})"

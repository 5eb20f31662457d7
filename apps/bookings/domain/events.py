"""
Booking Domain Events

Published after the transaction that produced them commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """A pending booking now holds the dates"""
    booking_id: UUID
    property_id: UUID
    dates: DateRange
    total_price: int


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """
    Payment for the booking was received (pending -> confirmed)

    Triggers:
    - confirmation e-mail to the guest
    """
    booking_id: UUID
    property_id: UUID
    payment_reference: str
    dates: DateRange


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Booking was cancelled, dates are free again

    Triggers:
    - payment failure e-mail to the guest (reason ``payment_failed``)
    """
    booking_id: UUID
    property_id: UUID
    reason: str
    old_status: str

"""
Availability

A property is available for a stay when none of its active (pending or
confirmed) bookings share a night with it. Ranges are half-open, so a
check-out on day D never conflicts with a check-in on day D.
"""

from datetime import date
from typing import TYPE_CHECKING, Iterable, List
from uuid import UUID

from shared.domain.value_objects import DateRange

from apps.bookings.domain.entities import Booking, stay_dates

if TYPE_CHECKING:
    from apps.bookings.repositories import AbstractBookingRepository


def find_conflicts(bookings: Iterable[Booking], dates: DateRange) -> List[Booking]:
    """Active bookings from ``bookings`` that overlap ``dates``"""
    return [
        booking for booking in bookings
        if booking.blocks_dates() and booking.dates.overlaps_with(dates)
    ]


class AvailabilityChecker:
    """
    Point-in-time availability check against the booking store

    The answer is only trustworthy inside the store's per-property
    critical section; the ledger calls it there when creating bookings.
    """

    def __init__(self, repository: 'AbstractBookingRepository'):
        self.repository = repository

    def conflicts(self, property_id: UUID, dates: DateRange) -> List[Booking]:
        existing = self.repository.active_bookings_for_property(property_id, dates)
        return find_conflicts(existing, dates)

    def is_available(self, property_id: UUID, check_in: date, check_out: date) -> bool:
        dates = stay_dates(check_in, check_out)
        return not self.conflicts(property_id, dates)

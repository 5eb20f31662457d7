"""Wiring for the booking ledger."""

from __future__ import annotations

from django.conf import settings  # type: ignore

from .application.ledger import DEFAULT_MAX_ATTEMPTS, BookingLedger
from .repositories import DjangoBookingRepository


def build_ledger() -> BookingLedger:
    """Ledger backed by the ORM store, configured from settings."""

    return BookingLedger(
        DjangoBookingRepository(),
        max_attempts=getattr(settings, "BOOKING_TRANSITION_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
    )

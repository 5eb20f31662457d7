"""Domain event handlers for bookings.

Each handler only queues a Celery task; the work happens outside the
request that committed the change.
"""

from __future__ import annotations

import logging

from shared.application.message_bus import MessageBus

from .domain.events import BookingCancelled, BookingConfirmed

logger = logging.getLogger(__name__)


def on_booking_confirmed(event: BookingConfirmed) -> None:
    from .tasks import notify_booking_confirmed

    notify_booking_confirmed.delay(str(event.booking_id))


def on_booking_cancelled(event: BookingCancelled) -> None:
    if event.reason != "payment_failed":
        return

    from .tasks import notify_payment_failed

    notify_payment_failed.delay(str(event.booking_id))


def register_handlers(bus: MessageBus) -> None:
    bus.register_event_handler(BookingConfirmed, on_booking_confirmed)
    bus.register_event_handler(BookingCancelled, on_booking_cancelled)
    logger.debug("Booking event handlers registered")

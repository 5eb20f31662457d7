"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


def _load(booking_id: str) -> Booking | None:
    try:
        return Booking.objects.select_related("property").get(pk=booking_id)
    except Booking.DoesNotExist:
        return None


@shared_task(name="bookings.notify_booking_confirmed")
def notify_booking_confirmed(booking_id: str) -> bool:
    """Confirmation e-mail to the guest once payment is in."""
    booking = _load(booking_id)
    if booking is None:
        logger.error("Booking %s not found for confirmation notification", booking_id)
        return False
    if not booking.guest_email:
        logger.info("Booking %s has no guest email, skipping confirmation", booking_id)
        return False

    from .notifications import send_booking_confirmation_email

    return send_booking_confirmation_email(booking)


@shared_task(name="bookings.notify_payment_failed")
def notify_payment_failed(booking_id: str) -> bool:
    """Tell the guest the invoice expired or failed and the dates were released."""
    booking = _load(booking_id)
    if booking is None:
        logger.error("Booking %s not found for payment failure notification", booking_id)
        return False
    if not booking.guest_email:
        logger.info("Booking %s has no guest email, skipping payment failure notice", booking_id)
        return False

    from .notifications import send_payment_failed_email

    return send_payment_failed_email(booking)

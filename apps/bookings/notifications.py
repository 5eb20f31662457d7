"""Guest e-mails about booking state changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from .models import Booking

logger = logging.getLogger(__name__)


def send_email_notification(recipient_email: str, subject: str, message: str) -> bool:
    """
    Send a plain-text e-mail.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
    except Exception:
        logger.exception("Failed to send email to %s: %s", recipient_email, subject)
        return False

    logger.info("Email sent to %s: %s", recipient_email, subject)
    return True


def _stay(booking: "Booking") -> str:
    return f"{booking.check_in:%d %b %Y} to {booking.check_out:%d %b %Y}"


def send_booking_confirmation_email(booking: "Booking") -> bool:
    subject = f"Your stay at {booking.property.name} is confirmed"
    message = (
        f"Hi {booking.guest_name or 'Guest'},\n\n"
        f"We received your payment of {settings.BOOKING_CURRENCY} {booking.total_price:,} "
        f"for {booking.property.name}, {_stay(booking)}.\n"
        f"Booking reference: {booking.pk}\n\n"
        f"See you in Siargao!"
    )
    return send_email_notification(booking.guest_email, subject, message)


def send_payment_failed_email(booking: "Booking") -> bool:
    subject = f"Payment for {booking.property.name} did not go through"
    message = (
        f"Hi {booking.guest_name or 'Guest'},\n\n"
        f"Your invoice for {booking.property.name}, {_stay(booking)}, expired or the payment failed, "
        f"so the dates were released.\n"
        f"You can book again at {settings.SITE_URL}/properties/{booking.property_id}\n"
    )
    return send_email_notification(booking.guest_email, subject, message)

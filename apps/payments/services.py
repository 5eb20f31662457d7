"""Payment services.

``PaymentGatewayAdapter`` turns a pending booking into a Xendit invoice and
records the invoice on the booking. ``WebhookReconciler`` maps Xendit's
invoice callbacks onto ledger transitions. Xendit delivers callbacks at
least once, so every path here must be safe to repeat.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import DatabaseError, IntegrityError, transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.application.ledger import BookingLedger
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.exceptions import InvalidBookingState, MalformedNotification, StoreUnavailable

from .xendit_service import XenditClient

logger = logging.getLogger(__name__)

EXTERNAL_ID_PREFIX = "booking-"

PAYMENT_METHODS = ["GCASH", "GRABPAY", "PAYMAYA", "CARD", "BANK_TRANSFER"]

PAID_STATUSES = frozenset({"PAID", "SETTLED"})
FAILED_STATUSES = frozenset({"EXPIRED", "FAILED"})

IDEMPOTENCY_KEY_MAX_LENGTH = 255


@dataclass(frozen=True)
class Invoice:
    invoice_url: str
    invoice_id: str


class ReconcileOutcome(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    UNCHANGED = "unchanged"
    IGNORED = "ignored"
    UNKNOWN_BOOKING = "unknown_booking"


def external_id_for(booking_id: UUID) -> str:
    return f"{EXTERNAL_ID_PREFIX}{booking_id}"


def parse_external_id(external_id: str | None) -> UUID:
    """Booking id carried by an invoice ``external_id``."""
    if not external_id or not external_id.startswith(EXTERNAL_ID_PREFIX):
        raise MalformedNotification()
    try:
        return UUID(external_id[len(EXTERNAL_ID_PREFIX):])
    except ValueError as exc:
        raise MalformedNotification() from exc


class PaymentGatewayAdapter:
    """Creates the payment invoice for a pending booking."""

    def __init__(
        self,
        ledger: BookingLedger,
        client: XenditClient | None = None,
        *,
        currency: str | None = None,
        site_url: str | None = None,
        invoice_duration: int | None = None,
    ) -> None:
        self.ledger = ledger
        self.client = client or XenditClient.from_settings()
        self.currency = currency or getattr(settings, "BOOKING_CURRENCY", "PHP")
        self.site_url = (site_url or getattr(settings, "SITE_URL", "")).rstrip("/")
        self.invoice_duration = invoice_duration or getattr(settings, "XENDIT_INVOICE_DURATION", 3600)

    def build_invoice_request(self, booking: Booking, property_name: str = "") -> dict:
        booking_url = f"{self.site_url}/bookings/{booking.id}"
        payload = {
            "external_id": external_id_for(booking.id),
            "amount": booking.total_price,
            "currency": self.currency,
            "description": (
                f"SurfStay Siargao - {property_name or 'Property'} "
                f"({booking.check_in.isoformat()} to {booking.check_out.isoformat()})"
            ),
            "customer": {"given_names": booking.guest_name or "Guest"},
            "success_redirect_url": f"{booking_url}?status=success",
            "failure_redirect_url": f"{booking_url}?status=failed",
            "invoice_duration": self.invoice_duration,
            "payment_methods": list(PAYMENT_METHODS),
        }
        if booking.guest_email:
            payload["customer"]["email"] = booking.guest_email
            payload["payer_email"] = booking.guest_email
        return payload

    def create_invoice(self, booking: Booking, property_name: str = "") -> Invoice:
        """
        Create the invoice and remember it on the booking

        Raises:
            InvalidBookingState: booking is not pending
            PaymentGatewayError: Xendit failed; the booking is left untouched
        """
        if booking.status != BookingStatus.PENDING:
            raise InvalidBookingState()

        response = self.client.create_invoice(self.build_invoice_request(booking, property_name))
        invoice = Invoice(invoice_url=response["invoice_url"], invoice_id=str(response["id"]))

        self.ledger.attach_payment_reference(booking.id, invoice.invoice_id)
        logger.info("Invoice %s attached to booking %s", invoice.invoice_id, booking.id)
        return invoice

    def create_invoice_for(self, booking_id: UUID) -> Invoice:
        """Load the booking and create its invoice."""
        booking = self.ledger.get(booking_id)
        if booking.status != BookingStatus.PENDING:
            raise InvalidBookingState()
        prop = self.ledger.repository.get_property(booking.property_id)
        return self.create_invoice(booking, prop.name if prop else "")


class WebhookReconciler:
    """Applies Xendit invoice callbacks to bookings."""

    def __init__(self, ledger: BookingLedger) -> None:
        self.ledger = ledger

    def handle_notification(self, external_id: str, status: str, invoice_id: str) -> ReconcileOutcome:
        """
        Apply one notification

        Raises:
            MalformedNotification: ``external_id`` does not name a booking
        """
        booking_id = parse_external_id(external_id)
        normalized = (status or "").upper()

        if normalized in PAID_STATUSES:
            result = self.ledger.confirm(booking_id, invoice_id)
            changed_outcome = ReconcileOutcome.CONFIRMED
        elif normalized in FAILED_STATUSES:
            result = self.ledger.cancel_for_payment_failure(booking_id)
            changed_outcome = ReconcileOutcome.CANCELLED
        else:
            logger.info("Ignoring Xendit status %r for booking %s", status, booking_id)
            return ReconcileOutcome.IGNORED

        if not result.found:
            return ReconcileOutcome.UNKNOWN_BOOKING
        return changed_outcome if result.changed else ReconcileOutcome.UNCHANGED

    def receive(self, payload: dict) -> str:
        """
        Handle one webhook delivery, deduplicated by idempotency key

        The notification is recorded only after it has been applied, so a
        delivery that failed on a transient store error is retried in full.

        Returns:
            str: a ``PaymentNotification.Outcome`` value
        """
        from .models import PaymentNotification

        key = idempotency_key_for(payload)
        external_id = str(payload.get("external_id") or "")
        status = str(payload.get("status") or "")
        invoice_id = str(payload.get("id") or "")

        try:
            if PaymentNotification.objects.filter(idempotency_key=key).exists():
                self._count_delivery(key)
                logger.info("Duplicate Xendit notification %s for %s", key, external_id)
                return PaymentNotification.Outcome.DUPLICATE
        except DatabaseError as exc:
            raise StoreUnavailable() from exc

        try:
            outcome = self.handle_notification(external_id, status, invoice_id).value
        except MalformedNotification:
            logger.warning("Malformed Xendit notification: external_id=%r", external_id)
            outcome = PaymentNotification.Outcome.MALFORMED

        if outcome == PaymentNotification.Outcome.UNKNOWN_BOOKING:
            logger.warning("Xendit notification %s for unknown booking %s", key, external_id)

        try:
            with transaction.atomic():
                PaymentNotification.objects.create(
                    idempotency_key=key,
                    external_id=external_id[:255],
                    invoice_id=invoice_id[:255],
                    status=status[:50],
                    outcome=outcome,
                    payload=payload,
                )
        except IntegrityError:
            # A concurrent delivery of the same notification was recorded first
            self._count_delivery(key)
        except DatabaseError as exc:
            raise StoreUnavailable() from exc

        logger.info("Xendit notification %s for %s: %s", status, external_id, outcome)
        return outcome

    def _count_delivery(self, key: str) -> None:
        from .models import PaymentNotification

        try:
            PaymentNotification.objects.filter(idempotency_key=key).update(
                deliveries=F("deliveries") + 1,
                last_received_at=timezone.now(),
            )
        except DatabaseError as exc:
            raise StoreUnavailable() from exc


def idempotency_key_for(payload: dict) -> str:
    """``<invoice id>:<status>``, or a digest of the payload when there is no invoice id."""
    invoice_id = str(payload.get("id") or "")
    status = str(payload.get("status") or "").upper()
    if invoice_id:
        key = f"{invoice_id}:{status}"
        if len(key) <= IDEMPOTENCY_KEY_MAX_LENGTH:
            return key
        # Oversized ids are hashed so the status suffix always survives
        return f"sha256:{hashlib.sha256(invoice_id.encode()).hexdigest()}:{status}"[:IDEMPOTENCY_KEY_MAX_LENGTH]
    raw = json.dumps(payload, sort_keys=True, default=str)
    return f"sha256:{hashlib.sha256(raw.encode()).hexdigest()}"

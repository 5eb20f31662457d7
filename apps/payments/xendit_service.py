"""
Xendit Invoice API client

Creates hosted invoices (GCash, GrabPay, Maya, cards, bank transfer) and
checks the callback token Xendit sends with every webhook.
"""

from __future__ import annotations

import hmac
import logging
import uuid
from datetime import datetime, timedelta, timezone

import requests  # type: ignore
from django.conf import settings  # type: ignore

from apps.bookings.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.xendit.co"
DEFAULT_TIMEOUT = 30


class XenditPaymentError(PaymentGatewayError):
    """Xendit could not create the invoice."""


class XenditClient:
    """Thin wrapper over ``POST /v2/invoices``."""

    def __init__(
        self,
        secret_key: str = "",
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        callback_token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        emulate: bool = False,
    ) -> None:
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.callback_token = callback_token
        self.timeout = timeout
        self.emulate = emulate

    @classmethod
    def from_settings(cls) -> "XenditClient":
        secret_key = getattr(settings, "XENDIT_SECRET_KEY", "")
        return cls(
            secret_key,
            base_url=getattr(settings, "XENDIT_API_BASE_URL", DEFAULT_API_BASE_URL),
            callback_token=getattr(settings, "XENDIT_CALLBACK_TOKEN", ""),
            timeout=getattr(settings, "XENDIT_TIMEOUT", DEFAULT_TIMEOUT),
            # Local development without credentials gets fake invoices
            emulate=bool(settings.DEBUG and not secret_key),
        )

    def create_invoice(self, payload: dict) -> dict:
        """
        Create an invoice

        Args:
            payload: Xendit invoice request (external_id, amount, currency, ...)

        Returns:
            dict: Xendit invoice, at least ``id`` and ``invoice_url``

        Raises:
            XenditPaymentError: transport failure, non-2xx answer or unusable body
        """
        external_id = payload.get("external_id")
        logger.info("Creating Xendit invoice %s for %s %s", external_id, payload.get("amount"), payload.get("currency"))

        if self.emulate:
            return self._emulated_invoice(payload)

        if not self.secret_key:
            logger.error("Xendit secret key is not configured")
            raise XenditPaymentError()

        try:
            response = requests.post(
                f"{self.base_url}/v2/invoices",
                json=payload,
                auth=(self.secret_key, ""),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Network error talking to Xendit for %s: %s", external_id, exc)
            raise XenditPaymentError() from exc

        if not response.ok:
            logger.error(
                "Xendit rejected invoice %s: HTTP %s %s",
                external_id,
                response.status_code,
                response.text[:500],
            )
            raise XenditPaymentError()

        try:
            invoice = response.json()
        except ValueError as exc:
            logger.error("Xendit returned a non-JSON body for %s", external_id)
            raise XenditPaymentError() from exc

        if not isinstance(invoice, dict) or not invoice.get("id") or not invoice.get("invoice_url"):
            logger.error("Xendit invoice for %s is missing id or invoice_url", external_id)
            raise XenditPaymentError()

        logger.info("Xendit invoice %s created for %s", invoice["id"], external_id)
        return invoice

    def _emulated_invoice(self, payload: dict) -> dict:
        logger.warning("Using emulated Xendit invoice (DEBUG mode without a secret key)")
        invoice_id = f"emulated_{uuid.uuid4().hex[:16]}"
        duration = int(payload.get("invoice_duration") or 0)
        return {
            "id": invoice_id,
            "external_id": payload.get("external_id"),
            "status": "PENDING",
            "amount": payload.get("amount"),
            "currency": payload.get("currency"),
            "invoice_url": payload.get("success_redirect_url") or f"{settings.SITE_URL}/",
            "expiry_date": (datetime.now(timezone.utc) + timedelta(seconds=duration)).isoformat(),
        }

    def verify_callback_token(self, token: str | None) -> bool:
        """True when no token is configured or ``token`` matches it."""
        if not self.callback_token:
            return True
        if not token:
            return False
        return hmac.compare_digest(self.callback_token.encode(), token.encode())

"""Payment provider notification log."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PaymentNotification(models.Model):
    """One distinct webhook notification from Xendit and what it did."""

    class Outcome(models.TextChoices):
        CONFIRMED = "confirmed", _("Booking confirmed")
        CANCELLED = "cancelled", _("Booking cancelled")
        UNCHANGED = "unchanged", _("No change")
        IGNORED = "ignored", _("Status ignored")
        DUPLICATE = "duplicate", _("Duplicate delivery")
        MALFORMED = "malformed", _("Malformed notification")
        UNKNOWN_BOOKING = "unknown_booking", _("Unknown booking")

    idempotency_key = models.CharField(max_length=255, unique=True)
    external_id = models.CharField(max_length=255, blank=True)
    invoice_id = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=50, blank=True)
    outcome = models.CharField(max_length=20, choices=Outcome.choices)
    payload = models.JSONField(default=dict, blank=True)
    deliveries = models.PositiveIntegerField(default=1)
    received_at = models.DateTimeField(auto_now_add=True)
    last_received_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _("Payment notification")
        verbose_name_plural = _("Payment notifications")
        ordering = ["-received_at"]
        indexes = [
            models.Index(fields=["external_id"]),
            models.Index(fields=["outcome"]),
        ]

    def __str__(self) -> str:
        return f"{self.external_id or '?'} {self.status or '?'} -> {self.outcome}"

"""Admin registration for payment notifications."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentNotification


@admin.register(PaymentNotification)
class PaymentNotificationAdmin(admin.ModelAdmin):
    list_display = ("external_id", "invoice_id", "status", "outcome", "deliveries", "received_at")
    list_filter = ("outcome", "status")
    search_fields = ("external_id", "invoice_id", "idempotency_key")
    readonly_fields = (
        "idempotency_key",
        "external_id",
        "invoice_id",
        "status",
        "outcome",
        "payload",
        "deliveries",
        "received_at",
        "last_received_at",
    )

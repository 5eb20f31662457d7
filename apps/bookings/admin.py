"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "guest_name",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in", "check_out")
    search_fields = ("id", "property__name", "guest_email", "payment_reference")
    readonly_fields = (
        "id",
        "status",
        "payment_status",
        "payment_reference",
        "total_price",
        "version",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request) -> bool:  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None) -> bool:  # type: ignore
        return False

"""Serializers for the booking domain.

Request serializers validate shape and types only; booking rules (date
order, capacity, availability) are enforced by the ledger so every entry
point gets the same errors.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a guest."""

    property_id = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1)
    total_price = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    guest_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    guest_email = serializers.EmailField(required=False, allow_blank=True, default="")


class BookingSerializer(serializers.Serializer):
    """Read representation of a booking aggregate."""

    id = serializers.UUIDField(read_only=True)
    property_id = serializers.UUIDField(read_only=True)
    check_in = serializers.DateField(read_only=True)
    check_out = serializers.DateField(read_only=True)
    nights = serializers.IntegerField(read_only=True)
    guests = serializers.IntegerField(read_only=True)
    total_price = serializers.IntegerField(read_only=True)
    guest_name = serializers.CharField(read_only=True)
    guest_email = serializers.CharField(read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    payment_status = serializers.CharField(source="payment_status.value", read_only=True)
    payment_reference = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


def first_error(errors) -> str:
    """Flatten DRF validation errors into a single human-readable line."""

    if isinstance(errors, dict) and errors:
        field, value = next(iter(errors.items()))
        message = first_error(value)
        if field == "non_field_errors":
            return message
        return f"{field}: {message}"
    if isinstance(errors, list) and errors:
        return first_error(errors[0])
    return str(errors)

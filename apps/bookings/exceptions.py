"""Error taxonomy for the booking and payment flows.

Every public booking/payment operation raises one of these instead of a raw
database or transport error. Each class carries the HTTP status the API
layer answers with.
"""

from __future__ import annotations


class BookingError(Exception):
    """Base class for booking and payment failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class BookingValidationError(BookingError):
    status_code = 400
    default_message = "Invalid booking request"


class InvalidDateRange(BookingValidationError):
    default_message = "Check-out must be after check-in"


class CapacityExceeded(BookingError):
    status_code = 400
    default_message = "Too many guests for this property"


class NotFoundError(BookingError):
    status_code = 404
    default_message = "Not found"


class PropertyNotFound(NotFoundError):
    default_message = "Property not found"


class BookingNotFound(NotFoundError):
    default_message = "Booking not found"


class BookingConflictError(BookingError):
    """Raised when a property is busy for requested dates."""

    status_code = 409
    default_message = "Property is not available for these dates"


class InvalidBookingState(BookingError):
    status_code = 400
    default_message = "Booking is not in pending status"


class ConcurrentBookingUpdate(BookingError):
    """The booking kept changing underneath a transition."""

    status_code = 409
    default_message = "Booking was modified concurrently, try again"


class StoreUnavailable(BookingError):
    default_message = "Booking store is unavailable"


class PaymentGatewayError(BookingError):
    status_code = 502
    default_message = "Failed to create payment"


class MalformedNotification(BookingError):
    status_code = 400
    default_message = "Invalid external_id"

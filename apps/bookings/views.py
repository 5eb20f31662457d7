"""API views for the booking domain."""

from __future__ import annotations

import logging

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .application.ledger import BookingLedger, CreateBookingCommand
from .exceptions import BookingError
from .serializers import BookingCreateSerializer, BookingSerializer, first_error
from .services import build_ledger

logger = logging.getLogger(__name__)


def error_response(exc: BookingError) -> Response:
    return Response({"error": str(exc)}, status=exc.status_code)


def invalid_request_response(serializer) -> Response:
    return Response(
        {"error": first_error(serializer.errors), "fields": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


class LedgerAPIView(APIView):
    """Base view giving access to a booking ledger."""

    permission_classes = [permissions.AllowAny]

    def get_ledger(self) -> BookingLedger:
        return build_ledger()


class BookingCreateView(LedgerAPIView):
    """Create a pending booking; the price is computed server-side."""

    def post(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_request_response(serializer)
        data = serializer.validated_data

        ledger = self.get_ledger()
        try:
            booking = ledger.create(
                CreateBookingCommand(
                    property_id=data["property_id"],
                    check_in=data["check_in"],
                    check_out=data["check_out"],
                    guests=data["guests"],
                    guest_name=data.get("guest_name", ""),
                    guest_email=data.get("guest_email", ""),
                    quoted_total=data.get("total_price"),
                )
            )
            prop = ledger.get_property(booking.property_id)
        except BookingError as exc:
            logger.info("Booking rejected: %s", exc)
            return error_response(exc)

        return Response(
            {"booking": BookingSerializer(booking).data, "property_name": prop.name},
            status=status.HTTP_201_CREATED,
        )


class BookingDetailView(LedgerAPIView):
    """Current state of a booking, polled by the confirmation page."""

    def get(self, request, booking_id, *args, **kwargs):  # type: ignore
        try:
            ledger = self.get_ledger()
            booking = ledger.get(booking_id)
            prop = ledger.repository.get_property(booking.property_id)
        except BookingError as exc:
            return error_response(exc)

        data = dict(BookingSerializer(booking).data)
        data["property_name"] = prop.name if prop else ""
        return Response(data)

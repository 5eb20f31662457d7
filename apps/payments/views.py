"""Payment API views."""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse  # type: ignore
from django.views.decorators.csrf import csrf_exempt  # type: ignore
from django.views.decorators.http import require_POST  # type: ignore
from rest_framework import serializers, status  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.exceptions import BookingError
from apps.bookings.services import build_ledger
from apps.bookings.views import LedgerAPIView, error_response, invalid_request_response

from .services import PaymentGatewayAdapter, WebhookReconciler
from .xendit_service import XenditClient

logger = logging.getLogger(__name__)


class PaymentCreateSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField(
        error_messages={"required": "Missing booking_id", "null": "Missing booking_id"},
    )


class PaymentCreateView(LedgerAPIView):
    """Start payment for a pending booking and hand back the invoice URL."""

    def get_adapter(self) -> PaymentGatewayAdapter:
        return PaymentGatewayAdapter(self.get_ledger(), XenditClient.from_settings())

    def post(self, request, *args, **kwargs):  # type: ignore
        serializer = PaymentCreateSerializer(data=request.data)
        if not serializer.is_valid():
            errors = serializer.errors
            if "booking_id" in errors:
                return Response({"error": str(errors["booking_id"][0])}, status=status.HTTP_400_BAD_REQUEST)
            return invalid_request_response(serializer)

        booking_id = serializer.validated_data["booking_id"]
        try:
            invoice = self.get_adapter().create_invoice_for(booking_id)
        except BookingError as exc:
            logger.warning("Payment for booking %s not created: %s", booking_id, exc)
            return error_response(exc)

        return Response({"invoice_url": invoice.invoice_url, "invoice_id": invoice.invoice_id})


@csrf_exempt
@require_POST
def xendit_webhook(request):
    """
    Xendit invoice callback

    Always answers 200 once the caller is authenticated: malformed payloads
    and unknown bookings are logged and recorded, not bounced back. Only
    transient store failures answer 500 so Xendit retries.
    """
    client = XenditClient.from_settings()
    if not client.verify_callback_token(request.headers.get("X-CALLBACK-TOKEN")):
        logger.error("Xendit webhook with invalid callback token")
        return JsonResponse({"error": "Invalid callback token"}, status=403)

    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        logger.warning("Xendit webhook: invalid JSON body")
        payload = {"raw": request.body.decode("utf-8", errors="replace")[:2000]}
    if not isinstance(payload, dict):
        payload = {"raw": payload}

    reconciler = WebhookReconciler(build_ledger())
    try:
        reconciler.receive(payload)
    except BookingError as exc:
        logger.exception("Xendit webhook processing failed: %s", exc)
        return JsonResponse({"error": str(exc)}, status=500)

    return JsonResponse({"received": True})

"""Property API views."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.pricing import COMMISSION_RATE, quote
from apps.bookings.exceptions import BookingError
from apps.bookings.repositories import DjangoBookingRepository
from apps.bookings.serializers import first_error
from apps.bookings.views import error_response

from .filters import PropertyFilterSet
from .models import Property
from .serializers import PropertyDetailSerializer, PropertyListSerializer, QuoteQuerySerializer


class PropertyViewSet(viewsets.ReadOnlyModelViewSet):
    """Approved listings: list with filters, detail, price quote."""

    queryset = Property.objects.filter(status=Property.Status.APPROVED).prefetch_related("photos", "reviews")
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PropertyFilterSet
    ordering_fields = ["base_price", "created_at", "max_guests"]

    def filter_queryset(self, queryset):  # type: ignore
        # Search filters apply to the list only; ``guests`` doubles as a quote parameter
        if self.action != "list":
            return queryset
        return super().filter_queryset(queryset)

    def get_serializer_class(self):  # type: ignore
        if self.action == "list":
            return PropertyListSerializer
        return PropertyDetailSerializer

    @action(detail=True, methods=["get"])
    def quote(self, request, pk=None):  # type: ignore
        """Price breakdown and availability for ``check_in``/``check_out``."""
        prop: Property = self.get_object()  # type: ignore
        query = QuoteQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response({"error": first_error(query.errors), "fields": query.errors}, status=400)

        check_in = query.validated_data["check_in"]
        check_out = query.validated_data["check_out"]
        guests = query.validated_data.get("guests")
        try:
            available = AvailabilityChecker(DjangoBookingRepository()).is_available(prop.id, check_in, check_out)
        except BookingError as exc:
            return error_response(exc)

        breakdown = quote(prop.base_price, check_in, check_out)
        return Response(
            {
                "property_id": str(prop.id),
                "check_in": check_in.isoformat(),
                "check_out": check_out.isoformat(),
                "nights": breakdown.nights,
                "nightly_rate": breakdown.nightly_rate,
                "subtotal": breakdown.subtotal,
                "commission_rate": str(COMMISSION_RATE),
                "commission": breakdown.commission,
                "total": breakdown.total,
                "currency": settings.BOOKING_CURRENCY,
                "available": available,
                "fits_guests": guests is None or guests <= prop.max_guests,
            }
        )

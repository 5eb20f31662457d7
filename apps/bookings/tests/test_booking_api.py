"""Integration tests for booking API endpoints."""

from __future__ import annotations

import uuid
from datetime import date, timedelta

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.models import Property


class BookingAPITests(APITestCase):
    """Covers creation, validation failures, conflicts and status polling."""

    def setUp(self) -> None:
        self.property = Property.objects.create(
            name="Cloud 9 Surf Villa",
            property_type=Property.PropertyType.VILLA,
            municipality="General Luna",
            barangay="Catangnan",
            base_price=1000,
            max_guests=4,
            status=Property.Status.APPROVED,
        )
        self.url = reverse("booking-create")
        self.check_in = date.today() + timedelta(days=10)

    def _payload(self, check_in: date, check_out: date, **extra) -> dict:
        payload = {
            "property_id": str(self.property.id),
            "check_in": str(check_in),
            "check_out": str(check_out),
            "guests": 2,
            "guest_name": "Maria Santos",
            "guest_email": "maria@example.com",
        }
        payload.update(extra)
        return payload

    def test_guest_can_create_booking(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(self.check_in, self.check_in + timedelta(days=3)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["property_name"], "Cloud 9 Surf Villa")
        self.assertEqual(response.data["booking"]["total_price"], 3360)
        self.assertEqual(response.data["booking"]["status"], "pending")
        self.assertEqual(response.data["booking"]["payment_status"], "pending")
        booking = Booking.objects.get()
        self.assertEqual(str(booking.pk), response.data["booking"]["id"])
        self.assertEqual(booking.total_price, 3360)
        self.assertEqual(booking.guest_email, "maria@example.com")

    def test_client_total_price_is_not_trusted(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(self.check_in, self.check_in + timedelta(days=3), total_price=1),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Booking.objects.get().total_price, 3360)

    def test_missing_fields_rejected(self) -> None:
        response = self.client.post(self.url, {"property_id": str(self.property.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("error", response.data)
        self.assertIn("check_in", response.data["fields"])
        self.assertFalse(Booking.objects.exists())

    def test_same_day_rejected(self) -> None:
        response = self.client.post(self.url, self._payload(self.check_in, self.check_in), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "Check-out must be after check-in"})

    def test_unknown_property(self) -> None:
        payload = self._payload(self.check_in, self.check_in + timedelta(days=2), property_id=str(uuid.uuid4()))

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Property not found"})

    def test_unapproved_property_cannot_be_booked(self) -> None:
        self.property.status = Property.Status.PENDING
        self.property.save(update_fields=["status"])

        response = self.client.post(
            self.url,
            self._payload(self.check_in, self.check_in + timedelta(days=2)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_capacity_exceeded_persists_nothing(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(self.check_in, self.check_in + timedelta(days=2), guests=5),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"error": "Maximum 4 guests allowed"})
        self.assertFalse(Booking.objects.exists())

    def test_prevent_double_booking_on_overlap(self) -> None:
        first = self._payload(self.check_in, self.check_in + timedelta(days=4))
        second = self._payload(self.check_in + timedelta(days=3), self.check_in + timedelta(days=6))

        first_response = self.client.post(self.url, first, format="json")
        self.assertEqual(first_response.status_code, status.HTTP_201_CREATED, first_response.data)

        conflict_response = self.client.post(self.url, second, format="json")
        self.assertEqual(conflict_response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(conflict_response.data, {"error": "Property is not available for these dates"})
        self.assertEqual(Booking.objects.count(), 1)

    def test_back_to_back_bookings_are_allowed(self) -> None:
        first = self._payload(self.check_in, self.check_in + timedelta(days=4))
        following = self._payload(self.check_in + timedelta(days=4), self.check_in + timedelta(days=9))

        self.assertEqual(self.client.post(self.url, first, format="json").status_code, status.HTTP_201_CREATED)
        response = self.client.post(self.url, following, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Booking.objects.count(), 2)

    def test_cancelled_booking_does_not_block(self) -> None:
        payload = self._payload(self.check_in, self.check_in + timedelta(days=2))
        self.client.post(self.url, payload, format="json")
        Booking.objects.update(status=Booking.Status.CANCELLED)

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_booking_detail(self) -> None:
        created = self.client.post(
            self.url,
            self._payload(self.check_in, self.check_in + timedelta(days=2)),
            format="json",
        )
        booking_id = created.data["booking"]["id"]

        response = self.client.get(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["id"], booking_id)
        self.assertEqual(response.data["nights"], 2)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["property_name"], "Cloud 9 Surf Villa")

    def test_unknown_booking_detail(self) -> None:
        response = self.client.get(reverse("booking-detail", args=[uuid.uuid4()]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"error": "Booking not found"})

"""Property store models for SurfStay.

Listings on the island with their nightly rate, capacity, photos and guest
reviews. The booking core only reads from here: id, name, base price and
guest capacity.
"""

from __future__ import annotations

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import Avg  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """Rental listed for nightly stays."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Awaiting review")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    class PropertyType(models.TextChoices):
        VILLA = "Villa", _("Villa")
        HOMESTAY = "Homestay", _("Homestay")
        HOTEL = "Hotel", _("Hotel")
        HOSTEL = "Hostel", _("Hostel")
        APARTMENT = "Apartment", _("Apartment")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.VILLA,
    )
    description = models.TextField(blank=True)
    municipality = models.CharField(max_length=100, blank=True)
    barangay = models.CharField(max_length=100, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    base_price = models.PositiveIntegerField(
        help_text=_("Nightly rate in whole currency units, before commission."),
    )
    max_guests = models.PositiveSmallIntegerField(
        default=2,
        validators=[MinValueValidator(1)],
    )
    bedrooms = models.PositiveSmallIntegerField(default=1)
    bathrooms = models.PositiveSmallIntegerField(default=1)
    amenities = models.JSONField(default=list, blank=True)
    host_name = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_guests__gte=1),
                name="property_max_guests_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["municipality", "barangay"]),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_listed(self) -> bool:
        return self.status == self.Status.APPROVED

    @property
    def cover_photo(self) -> "PropertyPhoto | None":
        photos = list(self.photos.all())
        for photo in photos:
            if photo.is_cover:
                return photo
        return photos[0] if photos else None

    def average_rating(self) -> float | None:
        value = self.reviews.aggregate(avg=Avg("overall_rating"))["avg"]
        return round(float(value), 1) if value is not None else None


class PropertyPhoto(models.Model):
    """Photo attached to a property, hosted externally."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="photos")
    photo_url = models.URLField(max_length=500)
    caption = models.CharField(max_length=255, blank=True)
    order = models.PositiveIntegerField(default=0)
    is_cover = models.BooleanField(default=False)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Property photo")
        verbose_name_plural = _("Property photos")
        ordering = ["-is_cover", "order", "id"]

    def __str__(self) -> str:
        return f"{self.property.name} [{self.order}]"


class Review(models.Model):
    """Guest review left after a stay."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="reviews")
    author_name = models.CharField(max_length=255, blank=True)
    overall_rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(overall_rating__gte=1) & models.Q(overall_rating__lte=5),
                name="review_rating_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.property.name}: {self.overall_rating}/5"

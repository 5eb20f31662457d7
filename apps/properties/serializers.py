"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Property, PropertyPhoto, Review


class PropertyPhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = PropertyPhoto
        fields = ["id", "photo_url", "caption", "order", "is_cover"]


class ReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = ["id", "author_name", "overall_rating", "comment", "created_at"]


class PropertyListSerializer(serializers.ModelSerializer):
    """Compact card used in the list and on the map."""

    cover_photo = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            "id",
            "name",
            "property_type",
            "municipality",
            "barangay",
            "latitude",
            "longitude",
            "base_price",
            "max_guests",
            "bedrooms",
            "bathrooms",
            "cover_photo",
        ]

    def get_cover_photo(self, obj: Property) -> str | None:
        photo = obj.cover_photo
        return photo.photo_url if photo else None


class PropertyDetailSerializer(PropertyListSerializer):
    photos = PropertyPhotoSerializer(many=True, read_only=True)
    reviews = ReviewSerializer(many=True, read_only=True)
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta(PropertyListSerializer.Meta):
        fields = PropertyListSerializer.Meta.fields + [
            "description",
            "amenities",
            "host_name",
            "photos",
            "reviews",
            "average_rating",
            "review_count",
        ]

    def get_average_rating(self, obj: Property) -> float | None:
        return obj.average_rating()

    def get_review_count(self, obj: Property) -> int:
        return len(obj.reviews.all())


class QuoteQuerySerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, required=False)

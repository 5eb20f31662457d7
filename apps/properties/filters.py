"""FilterSet definitions for property listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """Plain predicate filters for the listing page."""

    property_type = django_filters.ChoiceFilter(choices=Property.PropertyType.choices)
    municipality = django_filters.CharFilter(field_name="municipality", lookup_expr="iexact")
    barangay = django_filters.CharFilter(field_name="barangay", lookup_expr="iexact")
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")
    bedrooms = django_filters.NumberFilter(field_name="bedrooms", lookup_expr="gte")

    class Meta:
        model = Property
        fields = ["property_type", "municipality", "barangay"]

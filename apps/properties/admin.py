"""Admin registration for properties."""

from __future__ import annotations

from django.contrib import admin

from .models import Property, PropertyPhoto, Review


class PropertyPhotoInline(admin.TabularInline):
    model = PropertyPhoto
    extra = 0


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("name", "property_type", "municipality", "barangay", "base_price", "max_guests", "status")
    list_filter = ("status", "property_type", "municipality")
    search_fields = ("name", "barangay", "municipality", "host_name")
    inlines = [PropertyPhotoInline]
    actions = ["approve", "reject"]

    @admin.action(description="Approve selected properties")
    def approve(self, request, queryset):  # type: ignore
        queryset.update(status=Property.Status.APPROVED)

    @admin.action(description="Reject selected properties")
    def reject(self, request, queryset):  # type: ignore
        queryset.update(status=Property.Status.REJECTED)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("property", "author_name", "overall_rating", "created_at")
    list_filter = ("overall_rating",)

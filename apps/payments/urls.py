"""URL routing for payments."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import PaymentCreateView

urlpatterns = [
    path("", PaymentCreateView.as_view(), name="payment-create"),
]

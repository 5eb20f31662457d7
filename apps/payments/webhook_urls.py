"""Payment provider callbacks."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import xendit_webhook

urlpatterns = [
    path("xendit/", xendit_webhook, name="xendit-webhook"),
]

from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .handlers import register_handlers

        register_handlers(message_bus)

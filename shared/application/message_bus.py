"""
Message Bus

Routes domain events to the handlers registered for their type. Booking
notifications hang off this bus so the ledger never has to know about
e-mail or Celery.
"""

from typing import Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """Events: multiple handlers per event type (1:N)"""

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """
        Register an event handler

        Registering the same handler twice for one event type is a no-op,
        so app ``ready()`` hooks can run more than once safely.
        """
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug("Registered event handler %s for %s", handler.__name__, event_type.__name__)

    def clear(self):
        self._event_handlers.clear()

    def publish_events(self, events: List[DomainEvent]):
        """
        Publish domain events

        Errors in one handler are logged and do not stop the others: the
        state change behind the event is already committed.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.debug("No handlers registered for event %s", event_type.__name__)
                continue

            logger.info("Publishing event %s (ID: %s)", event_type.__name__, event.event_id)

            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        "Error in event handler %s for event %s",
                        handler.__name__,
                        event_type.__name__,
                    )


# Global message bus instance
message_bus = MessageBus()

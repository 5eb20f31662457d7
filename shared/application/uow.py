"""
Unit of Work Pattern

Wraps a database transaction and makes sure domain events leave the
process only after that transaction has committed.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    @abstractmethod
    def rollback(self):
        pass

    @abstractmethod
    def collect_events(self, aggregate):
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            BookingModel.objects.filter(...).update(...)
            uow.collect_events(booking)
        # events are published once the outermost transaction commits

    Nesting is allowed; inner units become savepoints and their events are
    dropped together with the savepoint if it rolls back.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        self._transaction = transaction.atomic()
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        events = self._events.copy()
        self._events.clear()

        if events:
            logger.debug("Scheduling %d events for publication after commit", len(events))
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    def collect_events(self, aggregate):
        """Move pending events off the aggregate into this unit of work"""
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info("Publishing %d domain events after commit", len(events))
        message_bus.publish_events(events)

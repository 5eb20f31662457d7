"""Booking store.

The ledger talks to storage only through ``AbstractBookingRepository`` so it
can run against the Django ORM in production and an in-memory fake in
tests. Database errors never leave this module raw; they surface as
``StoreUnavailable``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List
from uuid import UUID

from django.db import DatabaseError  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DateRange
from shared.infrastructure.locks import property_locks

from .domain.entities import Booking, BookingStatus, PaymentStatus
from .exceptions import StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertySnapshot:
    """What the booking core needs to know about a property."""

    id: UUID
    name: str
    base_price: int
    max_guests: int
    listed: bool = True


class AbstractBookingRepository(ABC):

    @abstractmethod
    def get_property(self, property_id: UUID) -> PropertySnapshot | None:
        raise NotImplementedError

    @abstractmethod
    def active_bookings_for_property(
        self, property_id: UUID, dates: DateRange | None = None
    ) -> List[Booking]:
        """Pending and confirmed bookings, optionally narrowed to those touching ``dates``."""
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: UUID) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def add(self, booking: Booking) -> None:
        raise NotImplementedError

    @abstractmethod
    def update(self, booking: Booking, expected_version: int) -> bool:
        """
        Write ``booking`` back if the stored version still equals
        ``expected_version``; bump the version on success.

        Returns False when someone else wrote first.
        """
        raise NotImplementedError

    @abstractmethod
    def property_lock(self, property_id: UUID):
        """Context manager serializing booking creation for one property."""
        raise NotImplementedError


def _to_entity(model) -> Booking:
    return Booking(
        id=model.id,
        property_id=model.property_id,
        dates=DateRange(model.check_in, model.check_out),
        guests=model.guests,
        total_price=model.total_price,
        guest_name=model.guest_name,
        guest_email=model.guest_email,
        status=BookingStatus(model.status),
        payment_status=PaymentStatus(model.payment_status),
        payment_reference=model.payment_reference,
        version=model.version,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class DjangoBookingRepository(AbstractBookingRepository):
    """
    ORM-backed store

    Creation is serialized per property by a process-local lock plus
    ``SELECT ... FOR UPDATE`` on the property row inside the transaction.
    Backends without row locks (SQLite) rely on the process-local lock
    and on SQLite's single-writer model.
    """

    def get_property(self, property_id: UUID) -> PropertySnapshot | None:
        from apps.properties.models import Property

        try:
            prop = Property.objects.filter(pk=property_id).first()
        except DatabaseError as exc:
            raise StoreUnavailable() from exc
        if prop is None:
            return None
        return PropertySnapshot(
            id=prop.id,
            name=prop.name,
            base_price=prop.base_price,
            max_guests=prop.max_guests,
            listed=prop.is_listed,
        )

    def active_bookings_for_property(
        self, property_id: UUID, dates: DateRange | None = None
    ) -> List[Booking]:
        from .models import Booking as BookingModel

        try:
            queryset = BookingModel.objects.filter(
                property_id=property_id,
                status__in=BookingModel.ACTIVE_STATUSES,
            )
            if dates is not None:
                queryset = queryset.filter(check_in__lt=dates.end_date, check_out__gt=dates.start_date)
            return [_to_entity(model) for model in queryset]
        except DatabaseError as exc:
            raise StoreUnavailable() from exc

    def get(self, booking_id: UUID) -> Booking | None:
        from .models import Booking as BookingModel

        try:
            model = BookingModel.objects.filter(pk=booking_id).first()
        except DatabaseError as exc:
            raise StoreUnavailable() from exc
        return _to_entity(model) if model else None

    def add(self, booking: Booking) -> None:
        from .models import Booking as BookingModel

        try:
            with DjangoUnitOfWork() as uow:
                BookingModel.objects.create(
                    id=booking.id,
                    property_id=booking.property_id,
                    check_in=booking.check_in,
                    check_out=booking.check_out,
                    guests=booking.guests,
                    total_price=booking.total_price,
                    guest_name=booking.guest_name,
                    guest_email=booking.guest_email,
                    status=booking.status.value,
                    payment_status=booking.payment_status.value,
                    payment_reference=booking.payment_reference,
                    version=booking.version,
                    created_at=booking.created_at,
                    updated_at=booking.updated_at,
                )
                uow.collect_events(booking)
        except DatabaseError as exc:
            raise StoreUnavailable() from exc

    def update(self, booking: Booking, expected_version: int) -> bool:
        from .models import Booking as BookingModel

        try:
            with DjangoUnitOfWork() as uow:
                updated = BookingModel.objects.filter(
                    pk=booking.id,
                    version=expected_version,
                ).update(
                    status=booking.status.value,
                    payment_status=booking.payment_status.value,
                    payment_reference=booking.payment_reference,
                    updated_at=booking.updated_at,
                    version=expected_version + 1,
                )
                if updated != 1:
                    booking.clear_events()
                    return False
                booking.version = expected_version + 1
                uow.collect_events(booking)
        except DatabaseError as exc:
            raise StoreUnavailable() from exc
        return True

    @contextmanager
    def property_lock(self, property_id: UUID) -> Iterator[None]:
        from apps.properties.models import Property

        with property_locks.hold(property_id):
            try:
                with DjangoUnitOfWork():
                    # Row lock; ignored by backends without SELECT ... FOR UPDATE
                    list(
                        Property.objects.select_for_update()
                        .filter(pk=property_id)
                        .values_list("pk", flat=True)
                    )
                    yield
            except DatabaseError as exc:
                raise StoreUnavailable() from exc

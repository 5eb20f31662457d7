"""Concurrent booking creation against the in-memory store."""

from __future__ import annotations

import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, timedelta

from apps.bookings.application.ledger import BookingLedger, CreateBookingCommand
from apps.bookings.exceptions import BookingConflictError
from apps.bookings.tests.fakes import InMemoryBookingRepository


def _attempt(ledger: BookingLedger, property_id, check_in: date, check_out: date):
    try:
        return ledger.create(
            CreateBookingCommand(property_id=property_id, check_in=check_in, check_out=check_out, guests=2)
        )
    except BookingConflictError:
        return None


def _assert_pairwise_disjoint(bookings) -> None:
    ordered = sorted(bookings, key=lambda booking: booking.check_in)
    for previous, current in zip(ordered, ordered[1:]):
        assert previous.check_out <= current.check_in, (previous.dates, current.dates)


def test_only_one_of_many_identical_requests_wins() -> None:
    # Every reader pauses after reading, so without serialization all would pass the check
    repo = InMemoryBookingRepository(after_read=lambda: time.sleep(0.01))
    prop = repo.add_property()
    ledger = BookingLedger(repo)
    check_in = date(2024, 8, 1)

    with ThreadPoolExecutor(max_workers=20) as executor:
        futures = [
            executor.submit(_attempt, ledger, prop.id, check_in, check_in + timedelta(days=3))
            for _ in range(20)
        ]
        results = [future.result() for future in as_completed(futures)]

    assert len([booking for booking in results if booking is not None]) == 1
    assert len(repo.bookings) == 1


def test_random_overlapping_requests_never_double_book() -> None:
    repo = InMemoryBookingRepository(after_read=lambda: time.sleep(0.001))
    prop = repo.add_property()
    ledger = BookingLedger(repo)
    rng = random.Random(1234)
    start = date(2024, 9, 1)
    requests = []
    for _ in range(60):
        offset = rng.randint(0, 30)
        requests.append((start + timedelta(days=offset), start + timedelta(days=offset + rng.randint(1, 5))))

    with ThreadPoolExecutor(max_workers=12) as executor:
        futures = [executor.submit(_attempt, ledger, prop.id, check_in, check_out) for check_in, check_out in requests]
        created = [future.result() for future in as_completed(futures)]

    created = [booking for booking in created if booking is not None]
    assert created
    _assert_pairwise_disjoint(repo.active_bookings_for_property(prop.id))


def test_different_properties_do_not_block_each_other() -> None:
    repo = InMemoryBookingRepository()
    properties = [repo.add_property(name=f"Villa {n}") for n in range(5)]
    ledger = BookingLedger(repo)
    check_in = date(2024, 10, 1)

    with ThreadPoolExecutor(max_workers=5) as executor:
        futures = [
            executor.submit(_attempt, ledger, prop.id, check_in, check_in + timedelta(days=2))
            for prop in properties
        ]
        results = [future.result() for future in futures]

    assert all(booking is not None for booking in results)


def test_without_serialization_check_then_insert_races() -> None:
    # Both readers finish the availability read before either inserts
    barrier = threading.Barrier(2, timeout=5)
    repo = InMemoryBookingRepository(serialize=False, after_read=barrier.wait)
    prop = repo.add_property()
    ledger = BookingLedger(repo)
    check_in = date(2024, 11, 1)

    with ThreadPoolExecutor(max_workers=2) as executor:
        futures = [
            executor.submit(_attempt, ledger, prop.id, check_in, check_in + timedelta(days=2))
            for _ in range(2)
        ]
        results = [future.result() for future in futures]

    assert all(booking is not None for booking in results)
    assert len(repo.bookings) == 2

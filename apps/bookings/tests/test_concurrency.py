"""
Racing commits against a real transaction boundary. Each worker thread
gets its own database connection, so these run with transaction=True.
"""
import threading
from collections import Counter
from datetime import timedelta

import pytest
from django.db import connection

from apps.bookings.engine import commit_booking
from apps.bookings.exceptions import (
    BookingEngineError,
    CapacityExceededError,
    SlotUnavailableError,
)
from apps.bookings.models import Booking
from apps.bookings.slots import Slot, day_pass

from .helpers import NOW, WEEKDAY, at

pytestmark = pytest.mark.django_db(transaction=True)


def _race(course, profiles, slot):
    """Commit `slot` once per profile, all threads released together."""
    barrier = threading.Barrier(len(profiles))
    outcomes = []
    lock = threading.Lock()

    def worker(profile):
        try:
            barrier.wait()
            commit_booking(profile.id, course.id, slot, now=NOW)
            result = 'ok'
        except BookingEngineError as exc:
            result = exc
        finally:
            connection.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker, args=(p,)) for p in profiles]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def test_exclusive_slot_has_exactly_one_winner(personal_course, make_member):
    profiles = [make_member() for _ in range(6)]
    slot = Slot(at(WEEKDAY, 10), at(WEEKDAY, 10) + timedelta(hours=1))

    outcomes = _race(personal_course, profiles, slot)

    assert len(outcomes) == 6
    assert outcomes.count('ok') == 1
    losers = [o for o in outcomes if o != 'ok']
    assert all(isinstance(o, SlotUnavailableError) for o in losers)
    assert Booking.objects.filter(course=personal_course).confirmed().count() == 1


def test_class_never_exceeds_capacity(yoga_course, make_member):
    profiles = [make_member() for _ in range(7)]
    slot = Slot(at(WEEKDAY, 18), at(WEEKDAY, 19))

    outcomes = _race(yoga_course, profiles, slot)

    kinds = Counter(type(o).__name__ if o != 'ok' else 'ok' for o in outcomes)
    assert kinds['ok'] == yoga_course.capacity
    assert kinds['CapacityExceededError'] == 7 - yoga_course.capacity
    assert all(o == 'ok' or isinstance(o, CapacityExceededError) for o in outcomes)
    assert Booking.objects.filter(course=yoga_course).confirmed().count() == yoga_course.capacity


def test_day_passes_never_conflict(gym_course, make_member):
    profiles = [make_member() for _ in range(5)]

    outcomes = _race(gym_course, profiles, day_pass(WEEKDAY))

    assert outcomes == ['ok'] * 5
    assert Booking.objects.filter(course=gym_course).count() == 5

"""
Occupancy rules: is a candidate slot still free given the bookings that
already exist for the course?

Intervals are half-open: [start, end). Two intervals that merely touch
(one ends exactly when the other starts) do not overlap.

Anything with `start_time` / `end_time` attributes works as an interval,
so the same checks run over Slots and Booking rows.
"""
from apps.courses.models import CourseType

from .exceptions import CapacityExceededError, SlotUnavailableError
from .models import BookingStatus


def overlaps(a, b) -> bool:
    """True if [a.start_time, a.end_time) intersects [b.start_time, b.end_time)."""
    return a.start_time < b.end_time and b.start_time < a.end_time


def _occupying(bookings):
    # Cancelled rows never hold a slot, whoever handed them to us
    return [b for b in bookings if getattr(b, 'status', BookingStatus.CONFIRMED) == BookingStatus.CONFIRMED]


def count_overlapping(slot, bookings) -> int:
    return sum(1 for b in _occupying(bookings) if overlaps(slot, b))


# ── Per-type rules ────────────────────────────────────────────────────────────

def _open_access(course, slot, bookings):
    return


def _single_occupant(course, slot, bookings):
    if count_overlapping(slot, bookings):
        raise SlotUnavailableError(
            "This session was just booked by another member. Please choose a different time."
        )


def _up_to_capacity(course, slot, bookings):
    taken = count_overlapping(slot, bookings)
    if taken >= course.capacity:
        raise CapacityExceededError(
            f"This class is full ({taken}/{course.capacity}). Please choose a different time."
        )


OCCUPANCY_RULES = {
    CourseType.UNRESTRICTED:     _open_access,
    CourseType.CAPACITY_LIMITED: _up_to_capacity,
    CourseType.EXCLUSIVE:        _single_occupant,
}


def check_occupancy(course, slot, bookings) -> None:
    """
    Raise SlotUnavailableError (CapacityExceededError for small-group
    courses) if `slot` cannot take another member.
    """
    OCCUPANCY_RULES[course.course_type](course, slot, bookings)


def is_available(course, slot, bookings) -> bool:
    try:
        check_occupancy(course, slot, bookings)
    except SlotUnavailableError:
        return False
    return True

from datetime import timedelta

import pytest

from apps.bookings.calendar import OpeningHours
from apps.bookings.slots import SLOT_GENERATORS, Slot, day_pass, generate_slots
from apps.courses.models import Course, CourseType

from .helpers import WEEKDAY, SATURDAY, at


def _course(course_type, duration=None, capacity=None):
    return Course(name='c', course_type=course_type, duration_minutes=duration, capacity=capacity, price=0)


def test_every_course_type_has_a_generator():
    assert set(SLOT_GENERATORS) == set(CourseType)


def test_closed_day_yields_nothing():
    for course_type in CourseType:
        course = _course(course_type, duration=60, capacity=3 if course_type == CourseType.CAPACITY_LIMITED else None)
        assert list(generate_slots(course, WEEKDAY, None)) == []


def test_hourly_slots_cover_opening_window():
    course = _course(CourseType.EXCLUSIVE, duration=60)
    slots = list(generate_slots(course, WEEKDAY, OpeningHours(7, 22)))

    assert len(slots) == 15
    assert [s.start_time.hour for s in slots] == list(range(7, 22))
    assert all(s.duration == timedelta(minutes=60) for s in slots)
    assert slots == sorted(slots)


def test_slots_are_sized_by_course_duration():
    course = _course(CourseType.CAPACITY_LIMITED, duration=45, capacity=5)
    slots = list(generate_slots(course, SATURDAY, OpeningHours(8, 20)))

    assert slots[0] == Slot(at(SATURDAY, 8), at(SATURDAY, 8, 45))
    assert slots[-1] == Slot(at(SATURDAY, 19), at(SATURDAY, 19, 45))
    assert len(slots) == 12


def test_long_sessions_stop_before_running_past_closing():
    course = _course(CourseType.EXCLUSIVE, duration=90)
    slots = list(generate_slots(course, WEEKDAY, OpeningHours(7, 22)))

    assert slots[-1] == Slot(at(WEEKDAY, 20), at(WEEKDAY, 21, 30))
    assert all(s.end_time <= at(WEEKDAY, 22) for s in slots)


def test_open_access_gets_a_single_day_pass():
    course = _course(CourseType.UNRESTRICTED)
    slots = list(generate_slots(course, WEEKDAY, OpeningHours(7, 22)))

    assert slots == [day_pass(WEEKDAY)]
    assert slots[0].start_time == at(WEEKDAY, 0)
    assert slots[0].end_time.time().isoformat() == '23:59:59'


def test_generation_is_repeatable():
    course = _course(CourseType.EXCLUSIVE, duration=60)
    first = list(generate_slots(course, WEEKDAY, OpeningHours(7, 22)))
    second = list(generate_slots(course, WEEKDAY, OpeningHours(7, 22)))
    assert first == second


def test_slot_display_and_dict():
    slot = Slot(at(WEEKDAY, 7), at(WEEKDAY, 8))
    assert slot.display == '7:00 – 8:00'
    payload = slot.as_dict()
    assert payload['start_time'] == '2030-06-04T07:00:00+09:00'
    assert payload['end_time'] == '2030-06-04T08:00:00+09:00'

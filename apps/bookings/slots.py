"""
Slot generation: candidate slots for one course on one date, before any
occupancy filtering.

Session courses get one slot per whole hour of the opening window, sized
by the course duration. Open-access courses get a single day pass.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, date as date_type, time as time_type

from django.utils import timezone

from apps.courses.models import CourseType

from .calendar import OpeningHours

DAY_PASS_END = time_type(23, 59, 59)


@dataclass(frozen=True, order=True)
class Slot:
    """A [start_time, end_time) interval offered to, or chosen by, a member."""
    start_time: datetime
    end_time: datetime

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def display(self) -> str:
        start = timezone.localtime(self.start_time)
        end = timezone.localtime(self.end_time)
        return f"{_fmt_time(start)} – {_fmt_time(end)}"

    def as_dict(self) -> dict:
        return {
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'display': self.display,
        }


def _fmt_time(t) -> str:
    """Format as '7:00' / '21:30' without a leading zero on the hour."""
    return f"{t.hour}:{t.minute:02d}"


def local_midnight(day: date_type, tz=None) -> datetime:
    return datetime.combine(day, time_type.min, tzinfo=tz or timezone.get_current_timezone())


def day_bounds(day: date_type, tz=None) -> tuple:
    """[start, end) instants of a local calendar day."""
    start = local_midnight(day, tz)
    return start, local_midnight(day + timedelta(days=1), tz)


def day_pass(day: date_type, tz=None) -> Slot:
    """Full-day slot booked by open-access courses: 00:00:00 to 23:59:59 local."""
    tz = tz or timezone.get_current_timezone()
    return Slot(
        start_time=local_midnight(day, tz),
        end_time=datetime.combine(day, DAY_PASS_END, tzinfo=tz),
    )


def opening_bounds(day: date_type, hours: OpeningHours, tz=None) -> tuple:
    """Opening and closing instants for `day`."""
    midnight = local_midnight(day, tz)
    return (midnight + timedelta(hours=hours.opening_hour),
            midnight + timedelta(hours=hours.closing_hour))


# ── Per-type generators ───────────────────────────────────────────────────────

def _day_pass_slots(course, day, hours, tz):
    yield day_pass(day, tz)


def _hourly_slots(course, day, hours, tz):
    _, closing = opening_bounds(day, hours, tz)
    length = timedelta(minutes=course.duration_minutes)
    midnight = local_midnight(day, tz)

    for hour in range(hours.opening_hour, hours.closing_hour):
        start = midnight + timedelta(hours=hour)
        end = start + length
        if end > closing:
            break  # No room for another session before closing
        yield Slot(start, end)


SLOT_GENERATORS = {
    CourseType.UNRESTRICTED:     _day_pass_slots,
    CourseType.CAPACITY_LIMITED: _hourly_slots,
    CourseType.EXCLUSIVE:        _hourly_slots,
}


def generate_slots(course, day: date_type, hours: OpeningHours | None, tz=None):
    """
    Yield the candidate slots for `course` on `day`, ascending by start.

    `hours` is the calendar policy result for `day`; None (closed) yields
    nothing. Same inputs always produce the same sequence.
    """
    if hours is None:
        return
    yield from SLOT_GENERATORS[course.course_type](course, day, hours, tz)

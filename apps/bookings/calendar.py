"""
Calendar policy: which days the club is open and for which hours.

Pure and deterministic: no database, no clock. The process-wide policy is
built once from settings.BOOKING_CALENDAR and cached; a running request
never sees it change. Call reload_calendar_policy() (or redeploy) to pick
up new settings.

Public API:
  CalendarPolicy.open_hours(date)  -> OpeningHours | None (closed)
  CalendarPolicy.is_holiday(date)  -> bool
  get_calendar_policy()
  reload_calendar_policy()
"""
from dataclasses import dataclass
from datetime import date as date_type
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.test.signals import setting_changed
from django.dispatch import receiver

SATURDAY, SUNDAY = 5, 6


@dataclass(frozen=True)
class OpeningHours:
    """Whole-hour opening window for one date; closing hour is exclusive."""
    opening_hour: int
    closing_hour: int


@dataclass(frozen=True)
class CalendarPolicy:
    weekday_open: int = 7
    weekday_close: int = 22
    weekend_open: int = 8
    weekend_close: int = 20
    # (month, day) pairs, inclusive. A start later in the year than the end
    # wraps over new year. None disables the yearly closure.
    closure_start: tuple | None = (12, 29)
    closure_end: tuple | None = (1, 3)
    closed_dates: tuple = ()

    def __post_init__(self):
        for opening, closing in ((self.weekday_open, self.weekday_close),
                                 (self.weekend_open, self.weekend_close)):
            if not 0 <= opening < closing <= 24:
                raise ImproperlyConfigured(
                    f"Opening hours {opening}-{closing} are not a valid window."
                )
        if (self.closure_start is None) != (self.closure_end is None):
            raise ImproperlyConfigured('Year-end closure needs both a start and an end.')
        for first, last in self.closed_dates:
            if first > last:
                raise ImproperlyConfigured(f"Closed range {first}..{last} is reversed.")

    def _in_yearly_closure(self, day: date_type) -> bool:
        if self.closure_start is None:
            return False
        month_day = (day.month, day.day)
        if self.closure_start <= self.closure_end:
            return self.closure_start <= month_day <= self.closure_end
        return month_day >= self.closure_start or month_day <= self.closure_end

    def is_holiday(self, day: date_type) -> bool:
        if self._in_yearly_closure(day):
            return True
        return any(first <= day <= last for first, last in self.closed_dates)

    def open_hours(self, day: date_type) -> OpeningHours | None:
        """Opening window for `day`, or None when the club is closed."""
        if self.is_holiday(day):
            return None
        if day.weekday() in (SATURDAY, SUNDAY):
            return OpeningHours(self.weekend_open, self.weekend_close)
        return OpeningHours(self.weekday_open, self.weekday_close)

    @classmethod
    def from_config(cls, conf: dict) -> 'CalendarPolicy':
        weekday = conf.get('WEEKDAY_HOURS', (7, 22))
        weekend = conf.get('WEEKEND_HOURS', (8, 20))
        closure = conf.get('YEAR_END_CLOSURE', ((12, 29), (1, 3)))
        closure_start, closure_end = (tuple(closure[0]), tuple(closure[1])) if closure else (None, None)
        return cls(
            weekday_open=weekday[0],
            weekday_close=weekday[1],
            weekend_open=weekend[0],
            weekend_close=weekend[1],
            closure_start=closure_start,
            closure_end=closure_end,
            closed_dates=tuple(
                (_as_date(first), _as_date(last))
                for first, last in conf.get('CLOSED_DATES', ())
            ),
        )


def _as_date(value) -> date_type:
    if isinstance(value, date_type):
        return value
    try:
        return date_type.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ImproperlyConfigured(f"Closed date {value!r} is not an ISO date.") from exc


@lru_cache(maxsize=1)
def get_calendar_policy() -> CalendarPolicy:
    return CalendarPolicy.from_config(getattr(settings, 'BOOKING_CALENDAR', {}))


def reload_calendar_policy() -> CalendarPolicy:
    get_calendar_policy.cache_clear()
    return get_calendar_policy()


@receiver(setting_changed)
def _drop_cached_policy(sender, setting, **kwargs):
    if setting == 'BOOKING_CALENDAR':
        get_calendar_policy.cache_clear()

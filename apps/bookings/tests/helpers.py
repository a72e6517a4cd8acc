from datetime import datetime, date, time
from zoneinfo import ZoneInfo

from django.conf import settings

LOCAL_TZ = ZoneInfo(settings.TIME_ZONE)

# Monday 2030-06-03, early morning before the club opens
NOW = datetime(2030, 6, 3, 6, 0, tzinfo=LOCAL_TZ)
WEEKDAY = date(2030, 6, 4)   # Tuesday
SATURDAY = date(2030, 6, 8)

# A week before the year-end closure
DECEMBER_NOW = datetime(2030, 12, 20, 9, 0, tzinfo=LOCAL_TZ)
HOLIDAY = date(2030, 12, 30)


def at(day, hour, minute=0, second=0):
    """Aware local datetime for `day` at hour:minute."""
    return datetime.combine(day, time(hour, minute, second), tzinfo=LOCAL_TZ)

"""
Booking engine: pure business logic, no HTTP/request awareness.

Public API:
  get_course(course_id)
  get_profile(profile_id)
  validate_booking_date(booking_date, now=None)
  confirmed_bookings(course, range_start, range_end)
  get_available_slots(course_id, booking_date, policy=None, now=None)
  validate_slot(course, slot, policy=None, now=None)
  commit_booking(profile_id, course_id, slot, policy=None, now=None, notes='')
  get_profile_bookings(profile_id, include_cancelled=False)

Reads never lock and are advisory: a slot returned by get_available_slots
may be gone by the time the member commits. commit_booking re-checks
occupancy inside the transaction that inserts the row.
"""
import logging
from datetime import timedelta, date as date_type
from functools import partial, wraps

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import connection, transaction, IntegrityError, OperationalError
from django.utils import timezone

from apps.courses.models import Course
from apps.members.models import Profile
from apps.notifications.emails import notify_booking_committed

from .calendar import CalendarPolicy, get_calendar_policy
from .exceptions import (
    CourseNotFoundError,
    DuplicateBookingError,
    HolidayBlackoutError,
    InvalidDateRangeError,
    InvalidSlotError,
    OutOfBusinessHoursError,
    ProfileNotFoundError,
    SlotUnavailableError,
    StoreUnavailableError,
)
from .models import Booking, BookingStatus, BookingStatusLog, CourseSlotLock
from .occupancy import check_occupancy, is_available
from .slots import Slot, day_bounds, day_pass, generate_slots, opening_bounds

logger = logging.getLogger(__name__)


# ── Lookups ───────────────────────────────────────────────────────────────────

def get_course(course_id) -> Course:
    try:
        return Course.objects.active().get(id=course_id)
    except (Course.DoesNotExist, ValidationError, ValueError):
        raise CourseNotFoundError(f"Course {course_id} not found.") from None


def get_profile(profile_id) -> Profile:
    try:
        return Profile.objects.active().get(id=profile_id)
    except (Profile.DoesNotExist, ValidationError, ValueError):
        raise ProfileNotFoundError(f"Profile {profile_id} not found.") from None


def confirmed_bookings(course: Course, range_start, range_end):
    """Confirmed bookings of `course` overlapping [range_start, range_end)."""
    return (
        Booking.objects
        .filter(course=course)
        .confirmed()
        .overlapping(range_start, range_end)
        .order_by('start_time')
    )


# ── Date / slot validation ────────────────────────────────────────────────────

def validate_booking_date(booking_date: date_type, now=None) -> None:
    """
    Bookable dates run from today through today + BOOKING_HORIZON_DAYS
    (local time). Raises InvalidDateRangeError otherwise.
    """
    today = timezone.localtime(now or timezone.now()).date()
    horizon = today + timedelta(days=settings.BOOKING_HORIZON_DAYS)
    if booking_date < today:
        raise InvalidDateRangeError("Bookings cannot be made for past dates.")
    if booking_date > horizon:
        raise InvalidDateRangeError(
            f"Bookings open {settings.BOOKING_HORIZON_DAYS} days ahead; "
            f"choose a date on or before {horizon.isoformat()}."
        )


def validate_slot(course: Course, slot: Slot, policy: CalendarPolicy = None, now=None) -> None:
    """
    Check a member-supplied slot against the calendar policy and the shape
    the course generates. Run again at commit time because the member may
    hold a slot fetched before a policy change or a date rollover.
    """
    policy = policy or get_calendar_policy()
    now = now or timezone.now()

    if timezone.is_naive(slot.start_time) or timezone.is_naive(slot.end_time):
        raise InvalidSlotError("Slot times must carry a timezone.")
    if slot.end_time <= slot.start_time:
        raise InvalidSlotError("Slot must end after it starts.")

    booking_date = timezone.localtime(slot.start_time).date()
    validate_booking_date(booking_date, now)

    hours = policy.open_hours(booking_date)
    if hours is None:
        raise HolidayBlackoutError(
            f"The club is closed on {booking_date.isoformat()}. Please choose another date."
        )

    if not course.is_session:
        if slot != day_pass(booking_date):
            raise InvalidSlotError("Open-access courses are booked as a full-day pass.")
        return

    opening, closing = opening_bounds(booking_date, hours)
    if slot.start_time < opening or slot.end_time > closing:
        raise OutOfBusinessHoursError(
            f"Sessions on {booking_date.isoformat()} must fall between "
            f"{hours.opening_hour}:00 and {hours.closing_hour}:00."
        )

    local_start = timezone.localtime(slot.start_time)
    if local_start.minute or local_start.second or local_start.microsecond:
        raise InvalidSlotError("Sessions start on the hour.")
    if slot.duration != timedelta(minutes=course.duration_minutes):
        raise InvalidSlotError(f"{course.name} sessions last {course.duration_minutes} minutes.")

    if slot.start_time <= now:
        raise InvalidDateRangeError("This session has already started.")


# ── Store guard ───────────────────────────────────────────────────────────────

def _store_errors(func):
    """Surface any database outage inside `func` as StoreUnavailableError."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationalError as exc:
            logger.warning('%s aborted, store unavailable: %s', func.__name__, exc)
            raise StoreUnavailableError(
                "The booking service is busy. Please try again in a moment."
            ) from exc
    return wrapper


# ── Core: Availability ────────────────────────────────────────────────────────

@_store_errors
def get_available_slots(course_id, booking_date: date_type,
                        policy: CalendarPolicy = None, now=None) -> list:
    """
    Open slots for a course on a date, ascending by start time.

    Empty list means closed (holiday) or fully booked. Session slots that
    have already started are left out; the day pass is offered all day.

    Raises:
      CourseNotFoundError: unknown or retired course
      InvalidDateRangeError: date in the past or beyond the horizon
      StoreUnavailableError: database unreachable
    """
    course = get_course(course_id)
    now = now or timezone.now()
    validate_booking_date(booking_date, now)
    policy = policy or get_calendar_policy()

    candidates = generate_slots(course, booking_date, policy.open_hours(booking_date))
    day_start, day_end = day_bounds(booking_date)
    existing = list(confirmed_bookings(course, day_start, day_end))

    slots = [
        slot for slot in candidates
        if (not course.is_session or slot.start_time > now)
        and is_available(course, slot, existing)
    ]
    logger.debug(
        'Availability for %s on %s: %d open slots (%d confirmed bookings)',
        course.name, booking_date, len(slots), len(existing),
    )
    return slots


# ── Core: Atomic Commit ───────────────────────────────────────────────────────

def _bound_lock_wait() -> None:
    """Make the row locks below give up instead of waiting forever."""
    if connection.vendor == 'postgresql':
        with connection.cursor() as cursor:
            cursor.execute(
                "SELECT set_config('lock_timeout', %s, true)",
                [f"{settings.BOOKING_LOCK_TIMEOUT_SECONDS}s"],
            )


def _lock_hours(slot: Slot) -> list:
    """Start instants of every local hour that [start, end) touches, ascending."""
    hour = timezone.localtime(slot.start_time).replace(minute=0, second=0, microsecond=0)
    hours = []
    while hour < slot.end_time:
        hours.append(hour)
        hour += timedelta(hours=1)
    return hours


def _lock_course_slot(course: Course, slot: Slot) -> list:
    """
    Lock the course's hour rows under `slot`. Call inside a transaction.

    Any two overlapping slots share at least one hour, so they serialise;
    slots in different hours never wait on each other. Rows are always
    taken in ascending order, so two commits cannot deadlock.
    """
    _bound_lock_wait()
    locks = []
    for hour_start in _lock_hours(slot):
        CourseSlotLock.objects.get_or_create(course=course, hour_start=hour_start)
        locks.append(
            CourseSlotLock.objects.select_for_update().get(course=course, hour_start=hour_start)
        )
    return locks


@_store_errors
def commit_booking(profile_id, course_id, slot: Slot, policy: CalendarPolicy = None,
                   now=None, notes: str = '') -> Booking:
    """
    Atomically re-validate `slot` and insert a CONFIRMED booking.

    Steps (session courses, all inside one transaction):
      1. Lock the CourseSlotLock rows for every hour the slot touches
         (SELECT FOR UPDATE, ascending)
      2. Re-read confirmed bookings overlapping the slot
      3. Re-run the occupancy rule for the course type
      4. Insert the booking and its audit log row
    Open-access day passes skip 1-3; the per-member unique constraint
    still stops a double booking.

    The member and staff emails go out only after the transaction commits
    and can never undo it.

    Raises:
      CourseNotFoundError / ProfileNotFoundError
      InvalidDateRangeError, InvalidSlotError
      HolidayBlackoutError, OutOfBusinessHoursError
      SlotUnavailableError: lost the race (CapacityExceededError for
        full classes, DuplicateBookingError when the
        member already holds the slot)
      StoreUnavailableError: lock wait timed out / database unreachable
    """
    course = get_course(course_id)
    profile = get_profile(profile_id)
    now = now or timezone.now()
    validate_slot(course, slot, policy, now)

    try:
        with transaction.atomic():
            if course.is_session:
                _lock_course_slot(course, slot)
                existing = list(confirmed_bookings(course, slot.start_time, slot.end_time))
                if any(b.profile_id == profile.id and b.start_time == slot.start_time for b in existing):
                    raise DuplicateBookingError("You have already booked this session.")
                check_occupancy(course, slot, existing)

            booking = Booking.objects.create(
                course=course,
                profile=profile,
                start_time=slot.start_time,
                end_time=slot.end_time,
                status=BookingStatus.CONFIRMED,
                notes=notes,
            )
            BookingStatusLog.objects.create(
                booking=booking,
                from_status='',
                to_status=BookingStatus.CONFIRMED,
                changed_by='member',
                reason='Reserved by member',
            )
            transaction.on_commit(partial(notify_booking_committed, booking), robust=True)
    except SlotUnavailableError as exc:
        logger.info(
            'Commit rejected (%s): course=%s profile=%s slot=%s',
            exc.code, course.id, profile.id, slot.start_time.isoformat(),
        )
        raise
    except IntegrityError as exc:
        logger.info('Commit rejected (duplicate): course=%s profile=%s', course.id, profile.id)
        raise DuplicateBookingError("You have already booked this session.") from exc

    logger.info(
        'Booking %s confirmed: course=%s profile=%s %s-%s',
        booking.id_short, course.id, profile.id,
        slot.start_time.isoformat(), slot.end_time.isoformat(),
    )
    return booking


# ── Member dashboard ──────────────────────────────────────────────────────────

@_store_errors
def get_profile_bookings(profile_id, include_cancelled: bool = False) -> list:
    """A member's bookings, most recent first."""
    profile = get_profile(profile_id)
    qs = Booking.objects.filter(profile=profile).select_related('course')
    if not include_cancelled:
        qs = qs.confirmed()
    return list(qs.order_by('-start_time'))

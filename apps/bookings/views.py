"""
Booking JSON API for the presentation layer.

  GET  /bookings/api/availability/?course_id=<uuid>&date=YYYY-MM-DD
  POST /bookings/api/bookings/   {profile_id, course_id, start_time, end_time}
  GET  /bookings/api/profiles/<uuid>/bookings/

The caller is trusted to pass an authenticated profile id. Engine errors
map to status codes: not found 404, lost slot 409, store busy 503, any
other domain error 422.
"""
import json
import logging
from datetime import datetime

from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .engine import commit_booking, get_available_slots, get_profile_bookings
from .exceptions import (
    BookingEngineError,
    NotFoundError,
    SlotUnavailableError,
    StoreUnavailableError,
)
from .slots import Slot

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _parse_date(date_str: str):
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except (ValueError, TypeError):
        return None


def _parse_instant(value):
    """ISO-8601 string to an aware datetime; naive values are local time."""
    try:
        parsed = parse_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed is not None and timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _error_response(exc: BookingEngineError) -> JsonResponse:
    if isinstance(exc, NotFoundError):
        status = 404
    elif isinstance(exc, SlotUnavailableError):
        status = 409
    elif isinstance(exc, StoreUnavailableError):
        status = 503
    else:
        status = 422
    return JsonResponse(
        {'error': str(exc), 'code': exc.code, 'retryable': exc.retryable},
        status=status,
    )


def _bad_request(message: str) -> JsonResponse:
    return JsonResponse({'error': message, 'code': 'bad_request', 'retryable': False}, status=400)


def _booking_payload(booking) -> dict:
    return {
        'booking_id': str(booking.id),
        'reference': booking.id_short,
        'course_id': str(booking.course_id),
        'course_name': booking.course.name,
        'course_type': booking.course.course_type,
        'profile_id': str(booking.profile_id),
        'start_time': booking.start_time.isoformat(),
        'end_time': booking.end_time.isoformat(),
        'status': booking.status,
    }


# ─────────────────────────────────────────────────────────────────────────────
# AJAX: Available Slots
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
def api_availability(request):
    course_id = request.GET.get('course_id')
    date_str = request.GET.get('date')

    booking_date = _parse_date(date_str)
    if not course_id:
        return _bad_request('course_id is required')
    if not booking_date:
        return JsonResponse(
            {'error': 'Invalid date', 'code': 'invalid_date_range', 'retryable': False},
            status=422,
        )

    try:
        slots = get_available_slots(course_id, booking_date)
    except BookingEngineError as exc:
        return _error_response(exc)

    return JsonResponse({
        'course_id': course_id,
        'date': booking_date.isoformat(),
        'slots': [s.as_dict() for s in slots],
    })


# ─────────────────────────────────────────────────────────────────────────────
# Commit a booking
# ─────────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
def api_create_booking(request):
    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _bad_request('Request body must be JSON')
    if not isinstance(payload, dict):
        return _bad_request('Request body must be a JSON object')

    missing = [k for k in ('profile_id', 'course_id', 'start_time', 'end_time') if not payload.get(k)]
    if missing:
        return _bad_request(f"Missing fields: {', '.join(missing)}")

    start = _parse_instant(payload['start_time'])
    end = _parse_instant(payload['end_time'])
    if start is None or end is None:
        return _bad_request('start_time and end_time must be ISO-8601 datetimes')

    try:
        booking = commit_booking(
            profile_id=payload['profile_id'],
            course_id=payload['course_id'],
            slot=Slot(start, end),
            notes=str(payload.get('notes', ''))[:500],
        )
    except BookingEngineError as exc:
        return _error_response(exc)

    return JsonResponse(_booking_payload(booking), status=201)


# ─────────────────────────────────────────────────────────────────────────────
# Member dashboard
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
def api_profile_bookings(request, profile_id):
    include_cancelled = request.GET.get('include_cancelled') == '1'
    try:
        bookings = get_profile_bookings(profile_id, include_cancelled=include_cancelled)
    except BookingEngineError as exc:
        return _error_response(exc)

    return JsonResponse({'bookings': [_booking_payload(b) for b in bookings]})

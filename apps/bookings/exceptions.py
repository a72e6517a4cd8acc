"""
Custom exceptions for the booking engine.
Raised in engine.py and translated to HTTP responses in views.py.

Every error carries a stable `code` so callers can tell whether to retry,
ask the member to pick another slot, or give up.
"""


class BookingEngineError(Exception):
    """Base exception for all booking engine errors."""
    code = 'booking_error'
    retryable = False


class NotFoundError(BookingEngineError):
    code = 'not_found'


class CourseNotFoundError(NotFoundError):
    """Raised when the course id is unknown or the course is retired."""


class ProfileNotFoundError(NotFoundError):
    """Raised when the profile id is unknown or deactivated."""


class InvalidDateRangeError(BookingEngineError):
    """Raised for dates in the past or beyond the forward-booking horizon."""
    code = 'invalid_date_range'


class InvalidSlotError(BookingEngineError):
    """Raised when a slot does not have the shape the course generates."""
    code = 'invalid_slot'


class HolidayBlackoutError(BookingEngineError):
    """Raised when the slot falls on a closure date."""
    code = 'holiday_blackout'


class OutOfBusinessHoursError(BookingEngineError):
    """Raised when the slot lies outside the opening hours for its date."""
    code = 'out_of_business_hours'


class SlotUnavailableError(BookingEngineError):
    """Raised when a confirmed booking already holds the slot."""
    code = 'slot_unavailable'


class CapacityExceededError(SlotUnavailableError):
    """Raised when a small-group slot already has `capacity` members."""
    code = 'capacity_exceeded'


class DuplicateBookingError(SlotUnavailableError):
    """Raised when the member already holds this exact slot."""
    code = 'duplicate_booking'


class StoreUnavailableError(BookingEngineError):
    """Raised when the database times out or is unreachable. Safe to retry."""
    code = 'store_unavailable'
    retryable = True

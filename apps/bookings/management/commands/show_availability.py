"""
management command: show_availability

Prints the calendar window and the open slots for one course on one date.

Usage:
    python manage.py show_availability <course_id> 2026-02-25
"""
from datetime import date as date_type
from django.core.management.base import BaseCommand, CommandError
from apps.bookings.calendar import get_calendar_policy
from apps.bookings.engine import get_available_slots, get_course
from apps.bookings.exceptions import BookingEngineError


class Command(BaseCommand):
    help = 'Show the opening window and open slots for a course on a date'

    def add_arguments(self, parser):
        parser.add_argument('course_id')
        parser.add_argument('date', help='YYYY-MM-DD')

    def handle(self, *args, **options):
        try:
            booking_date = date_type.fromisoformat(options['date'])
        except ValueError as exc:
            raise CommandError(f"Invalid date: {options['date']}") from exc

        try:
            course = get_course(options['course_id'])
            slots = get_available_slots(course.id, booking_date)
        except BookingEngineError as exc:
            raise CommandError(f"{exc.code}: {exc}") from exc

        self.stdout.write(f"Course: {course}")
        if course.is_session:
            self.stdout.write(f"Duration: {course.duration_minutes} min | Capacity: {course.capacity or 1}")

        hours = get_calendar_policy().open_hours(booking_date)
        if hours is None:
            self.stdout.write(f"{booking_date}: closed (holiday)")
        else:
            self.stdout.write(f"{booking_date}: open {hours.opening_hour}:00 - {hours.closing_hour}:00")

        self.stdout.write(f"Open slots: {len(slots)}")
        for slot in slots:
            self.stdout.write(f"  {slot.display}")

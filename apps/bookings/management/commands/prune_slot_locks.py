"""
management command: prune_slot_locks

Deletes CourseSlotLock rows for hours on days that are already over.
Commits only ever lock hours from now on, so past rows are dead weight.

Run via OS cron once a night:
  0 3 * * *  /path/to/venv/bin/python manage.py prune_slot_locks
"""
from datetime import timedelta
from django.core.management.base import BaseCommand
from django.utils import timezone
from apps.bookings.models import CourseSlotLock
from apps.bookings.slots import local_midnight


class Command(BaseCommand):
    help = 'Delete commit lock rows for past dates'

    def add_arguments(self, parser):
        parser.add_argument(
            '--keep-days', type=int, default=0,
            help='Keep lock rows this many days into the past',
        )

    def handle(self, *args, **options):
        today = timezone.localdate()
        cutoff = today - timedelta(days=options['keep_days'])

        deleted, _ = CourseSlotLock.objects.filter(hour_start__lt=local_midnight(cutoff)).delete()

        self.stdout.write(
            self.style.SUCCESS(f'prune_slot_locks: deleted {deleted} lock rows before {cutoff}')
        )

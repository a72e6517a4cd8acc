"""
Bookings app models:
  - CourseSlotLock   : One row per course+hour; commits lock the hours they touch
  - Booking          : A member's reservation of a slot
  - BookingStatusLog : Full audit trail of state transitions
"""
from django.db import models, transaction
from django.utils import timezone
from apps.core.models import UUIDModel, TimestampedModel
from apps.courses.models import Course
from apps.members.models import Profile


# ── Commit Lock ───────────────────────────────────────────────────────────────

class CourseSlotLock(UUIDModel):
    """
    Lock row for one course and one local hour. A session commit takes
    SELECT ... FOR UPDATE on every hour its slot touches, so only commits
    whose slots share an hour wait on each other.
    """
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='slot_locks')
    hour_start = models.DateTimeField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Course Slot Lock'
        verbose_name_plural = 'Course Slot Locks'
        ordering = ['hour_start']
        constraints = [
            models.UniqueConstraint(fields=['course', 'hour_start'], name='uq_course_slot_lock'),
        ]

    def __str__(self):
        return f"Lock: {self.course.name} at {timezone.localtime(self.hour_start):%Y-%m-%d %H:00}"


# ── Booking State Machine ─────────────────────────────────────────────────────

class BookingStatus(models.TextChoices):
    CONFIRMED = 'confirmed', 'Confirmed'
    CANCELLED = 'cancelled', 'Cancelled'


class BookingQuerySet(models.QuerySet):
    def confirmed(self):
        return self.filter(status=BookingStatus.CONFIRMED)

    def overlapping(self, start, end):
        """Rows whose [start_time, end_time) intersects [start, end)."""
        return self.filter(start_time__lt=end, end_time__gt=start)


class Booking(UUIDModel, TimestampedModel):
    """
    A member's reservation. Created CONFIRMED by the engine's commit; only
    CONFIRMED rows occupy a slot.
    """
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name='bookings')
    profile = models.ForeignKey(Profile, on_delete=models.PROTECT, related_name='bookings')

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()

    status = models.CharField(
        max_length=20, choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED, db_index=True,
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = 'Booking'
        verbose_name_plural = 'Bookings'
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['course', 'status', 'start_time'], name='ix_booking_course_window'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='ck_booking_end_after_start',
            ),
            # A member cannot hold the same slot twice
            models.UniqueConstraint(
                fields=['course', 'profile', 'start_time'],
                condition=models.Q(status='confirmed'),
                name='uq_confirmed_member_slot',
            ),
        ]

    def __str__(self):
        return (
            f"#{self.id_short} | {self.profile.full_name} | "
            f"{self.course.name} | {timezone.localtime(self.start_time):%Y-%m-%d %H:%M}"
        )

    @property
    def id_short(self):
        """Returns the first 8 chars of UUID in uppercase."""
        return str(self.id)[:8].upper()

    @property
    def is_confirmed(self):
        return self.status == BookingStatus.CONFIRMED

    # ── State transition helpers ──────────────────────────────────────────────

    def cancel(self, changed_by='member', reason=''):
        """Release the slot. Cancelling twice is a no-op."""
        if self.status == BookingStatus.CANCELLED:
            return
        previous = self.status
        try:
            with transaction.atomic():
                self._transition(BookingStatus.CANCELLED, changed_by, reason)
                self.cancelled_at = timezone.now()
                self.save(update_fields=['status', 'cancelled_at', 'updated_at'])
        except Exception:
            self.status, self.cancelled_at = previous, None
            raise

    def _transition(self, new_status, changed_by, reason=''):
        old_status = self.status
        self.status = new_status
        BookingStatusLog.objects.create(
            booking=self,
            from_status=old_status,
            to_status=new_status,
            changed_by=changed_by,
            reason=reason,
        )


# ── Booking Audit Log ─────────────────────────────────────────────────────────

class BookingStatusLog(UUIDModel):
    """Immutable audit trail of every status transition on a booking."""
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name='status_logs')
    from_status = models.CharField(max_length=20, choices=BookingStatus.choices, blank=True)
    to_status = models.CharField(max_length=20, choices=BookingStatus.choices)
    changed_by = models.CharField(max_length=80, help_text='member / admin / system')
    reason = models.TextField(blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Booking Status Log'
        verbose_name_plural = 'Booking Status Logs'
        ordering = ['changed_at']

    def __str__(self):
        return f"Booking {str(self.booking_id)[:8]}: {self.from_status or '∅'} → {self.to_status}"

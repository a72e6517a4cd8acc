"""
Course model: the bookable catalog.

Each course belongs to exactly one of three scheduling variants:
  - gym      : open access, one day pass per open day, no intraday slots
  - yoga     : small-group class, up to `capacity` members per slot
  - personal : one-on-one session, a single member per slot

Billing fields (price, is_monthly, sessions_per_month) are carried for
display only; the booking engine never reads them.
"""
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from apps.core.models import BaseModel


class CourseType(models.TextChoices):
    UNRESTRICTED     = 'gym',      'Machine gym (open access)'
    CAPACITY_LIMITED = 'yoga',     'Yoga / Pilates (small group)'
    EXCLUSIVE        = 'personal', 'Personal training (one-on-one)'


class Course(BaseModel):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    course_type = models.CharField(max_length=10, choices=CourseType.choices, db_index=True)
    duration_minutes = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1)],
        help_text='Session length. Not used by open-access courses.',
    )
    capacity = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1)],
        help_text='Maximum participants per slot (small-group courses only).',
    )
    price = models.DecimalField(max_digits=8, decimal_places=0)
    is_monthly = models.BooleanField(default=False, help_text='Monthly plan rather than per session')
    sessions_per_month = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'
        ordering = ['course_type', 'name']
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(course_type=CourseType.CAPACITY_LIMITED, capacity__isnull=False, capacity__gte=1)
                    | (~models.Q(course_type=CourseType.CAPACITY_LIMITED) & models.Q(capacity__isnull=True))
                ),
                name='ck_course_capacity_matches_type',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(course_type=CourseType.UNRESTRICTED)
                    | models.Q(duration_minutes__isnull=False, duration_minutes__gte=1)
                ),
                name='ck_course_session_has_duration',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_course_type_display()})"

    def clean(self):
        errors = {}
        if self.course_type == CourseType.CAPACITY_LIMITED:
            if not self.capacity:
                errors['capacity'] = 'Small-group courses need a capacity.'
        elif self.capacity is not None:
            errors['capacity'] = 'Only small-group courses have a capacity.'

        if self.is_session and not self.duration_minutes:
            errors['duration_minutes'] = 'Session courses need a duration.'

        if errors:
            raise ValidationError(errors)

    @property
    def is_session(self):
        """True for course types booked in intraday time slots."""
        return self.course_type != CourseType.UNRESTRICTED

    @property
    def price_display(self):
        if self.is_monthly:
            return f"月額{self.price:,}円～"
        return f"{self.price:,}円～"

    @property
    def duration_display(self):
        if not self.is_session:
            return '時間制限なし'
        if self.sessions_per_month:
            return f"月{self.sessions_per_month}回 {self.duration_minutes}分/回"
        return f"{self.duration_minutes}分/回"

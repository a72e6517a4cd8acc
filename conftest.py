from itertools import count

import pytest

from apps.bookings.tests.helpers import NOW
from apps.courses.models import Course, CourseType
from apps.members.models import Profile


@pytest.fixture
def gym_course(db):
    return Course.objects.create(
        name='マシンジムコース', course_type=CourseType.UNRESTRICTED,
        price=8000, is_monthly=True,
    )


@pytest.fixture
def yoga_course(db):
    return Course.objects.create(
        name='ヨガ・ピラティスコース', course_type=CourseType.CAPACITY_LIMITED,
        duration_minutes=60, capacity=2,
        price=9000, is_monthly=True, sessions_per_month=4,
    )


@pytest.fixture
def personal_course(db):
    return Course.objects.create(
        name='パーソナルトレーニング', course_type=CourseType.EXCLUSIVE,
        duration_minutes=60, price=8000,
    )


@pytest.fixture
def make_member(db):
    seq = count(1)

    def _make(**kwargs):
        n = next(seq)
        kwargs.setdefault('auth_subject', f'auth|member-{n}')
        kwargs.setdefault('full_name', f'会員 {n}')
        kwargs.setdefault('email', f'member{n}@fitclub.test')
        return Profile.objects.create(**kwargs)
    return _make


@pytest.fixture
def member(make_member):
    return make_member(full_name='山田 花子', email='hanako@fitclub.test')


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin django.utils.timezone.now() for code paths without a `now=` argument."""
    from django.utils import timezone
    monkeypatch.setattr(timezone, 'now', lambda: NOW)
    return NOW

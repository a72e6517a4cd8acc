import logging
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.core import mail

from apps.bookings.engine import commit_booking
from apps.bookings.exceptions import SlotUnavailableError
from apps.bookings.models import Booking
from apps.bookings.slots import Slot, day_pass
from apps.bookings.tests.helpers import NOW, SATURDAY, WEEKDAY, at
from apps.notifications.emails import notify_booking_committed, send_booking_confirmed

pytestmark = pytest.mark.django_db


def _session(course, member, hour=9):
    start = at(WEEKDAY, hour)
    return Booking.objects.create(
        course=course, profile=member,
        start_time=start, end_time=start + timedelta(minutes=course.duration_minutes),
    )


def test_commit_sends_receipt_and_staff_notice(personal_course, member, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        booking = commit_booking(member.id, personal_course.id, Slot(at(WEEKDAY, 9), at(WEEKDAY, 10)), now=NOW)

    assert len(callbacks) == 1
    assert [m.to for m in mail.outbox] == [['hanako@fitclub.test'], ['staff@fitclub.test']]
    receipt, notice = mail.outbox
    assert receipt.subject == '予約完了 - パーソナルトレーニング 2030/06/04'
    assert '09:00 〜 10:00' in receipt.body
    assert booking.id_short in receipt.body
    assert receipt.alternatives[0][1] == 'text/html'
    assert '山田 花子' in notice.subject


def test_nothing_is_sent_before_commit(personal_course, member, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False):
        commit_booking(member.id, personal_course.id, Slot(at(WEEKDAY, 9), at(WEEKDAY, 10)), now=NOW)
    assert mail.outbox == []


def test_rejected_commit_sends_nothing(personal_course, make_member, django_capture_on_commit_callbacks):
    _session(personal_course, make_member())
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(SlotUnavailableError):
            commit_booking(make_member().id, personal_course.id, Slot(at(WEEKDAY, 9), at(WEEKDAY, 10)), now=NOW)
    assert callbacks == []
    assert mail.outbox == []


def test_day_pass_receipt_has_no_time_range(gym_course, member, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        commit_booking(member.id, gym_course.id, day_pass(SATURDAY), now=NOW)
    assert '営業時間内はいつでも' in mail.outbox[0].body


def test_delivery_failure_is_logged_and_swallowed(personal_course, member, caplog):
    booking = _session(personal_course, member)

    with patch('apps.notifications.emails.EmailMultiAlternatives.send', side_effect=ConnectionRefusedError):
        with caplog.at_level(logging.ERROR, logger='apps.notifications.emails'):
            notify_booking_committed(booking)

    assert Booking.objects.filter(pk=booking.pk, status='confirmed').exists()
    assert sum('Failed to send email' in r.message for r in caplog.records) == 2


def test_member_without_email_is_skipped(personal_course, make_member):
    booking = _session(personal_course, make_member(email=''))
    send_booking_confirmed(booking)
    assert mail.outbox == []


def test_staff_notice_skipped_when_inbox_unset(personal_course, member, settings):
    settings.BOOKING_NOTIFY_EMAIL = ''
    notify_booking_committed(_session(personal_course, member))
    assert [m.to for m in mail.outbox] == [['hanako@fitclub.test']]

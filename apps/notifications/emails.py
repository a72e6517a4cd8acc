"""
Email notification service for FitClub.

All functions are synchronous and best-effort: a delivery failure is
logged and never reaches the booking flow. The engine schedules
notify_booking_committed() with transaction.on_commit, so nothing is
sent for a booking that was rolled back.

Public API:
  notify_booking_committed(booking)
  send_booking_confirmed(booking)
  send_new_booking_notice(booking)
"""
import logging
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

logger = logging.getLogger(__name__)


def _booking_context(booking) -> dict:
    """Common template context for all booking emails."""
    start = timezone.localtime(booking.start_time)
    end = timezone.localtime(booking.end_time)
    return {
        'member_name':   booking.profile.full_name,
        'member_email':  booking.profile.email,
        'course_name':   booking.course.name,
        'is_day_pass':   not booking.course.is_session,
        'booking_date':  start.date(),
        'start_time':    start.time(),
        'end_time':      end.time(),
        'booking_ref':   booking.id_short,
        'support_email': settings.DEFAULT_FROM_EMAIL,
    }


def _send(subject: str, to_email: str, html_template: str, txt_template: str, context: dict):
    """Low-level send helper. Builds multipart email with HTML + text fallback."""
    if not to_email:
        logger.warning('Email skipped, no recipient (booking ref %s)', context.get('booking_ref'))
        return

    try:
        text_body = render_to_string(txt_template, context)
        html_body = render_to_string(html_template, context)

        msg = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to_email],
        )
        msg.attach_alternative(html_body, 'text/html')
        msg.send(fail_silently=False)
        logger.info('Email "%s" sent to %s', subject, to_email)
    except Exception:
        # Never fail a committed booking because of email
        logger.exception('Failed to send email "%s" to %s', subject, to_email)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def send_booking_confirmed(booking):
    """Reservation receipt to the member."""
    ctx = _booking_context(booking)
    _send(
        subject=f'予約完了 - {booking.course.name} {ctx["booking_date"]:%Y/%m/%d}',
        to_email=booking.profile.email,
        html_template='emails/booking_confirmed.html',
        txt_template='emails/booking_confirmed.txt',
        context=ctx,
    )


def send_new_booking_notice(booking):
    """New-booking notice to the staff inbox (BOOKING_NOTIFY_EMAIL)."""
    ctx = _booking_context(booking)
    _send(
        subject=f'新規予約 - {booking.course.name} / {booking.profile.full_name}',
        to_email=getattr(settings, 'BOOKING_NOTIFY_EMAIL', ''),
        html_template='emails/new_booking_notice.html',
        txt_template='emails/new_booking_notice.txt',
        context=ctx,
    )


def notify_booking_committed(booking):
    send_booking_confirmed(booking)
    send_new_booking_notice(booking)

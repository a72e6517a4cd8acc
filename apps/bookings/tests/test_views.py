import json
import uuid

import pytest
from django.db import OperationalError
from django.urls import reverse

from apps.bookings.models import Booking
from apps.courses.models import Course

from .helpers import SATURDAY, WEEKDAY, at

pytestmark = pytest.mark.django_db

AVAILABILITY_URL = reverse('bookings:api_availability')
CREATE_URL = reverse('bookings:api_create_booking')


def _post(client, payload):
    return client.post(CREATE_URL, data=json.dumps(payload), content_type='application/json')


def _booking_body(member, course, start, end):
    return {
        'profile_id': str(member.id),
        'course_id': str(course.id),
        'start_time': start.isoformat(),
        'end_time': end.isoformat(),
    }


class TestAvailabilityApi:
    def test_lists_open_slots(self, client, personal_course, frozen_now):
        resp = client.get(AVAILABILITY_URL, {'course_id': personal_course.id, 'date': WEEKDAY.isoformat()})

        assert resp.status_code == 200
        data = resp.json()
        assert data['date'] == '2030-06-04'
        assert len(data['slots']) == 15
        assert data['slots'][0]['start_time'] == at(WEEKDAY, 7).isoformat()
        assert data['slots'][0]['display'] == '7:00 – 8:00'

    def test_missing_course_is_bad_request(self, client, frozen_now):
        resp = client.get(AVAILABILITY_URL, {'date': WEEKDAY.isoformat()})
        assert resp.status_code == 400

    def test_garbled_date(self, client, personal_course, frozen_now):
        resp = client.get(AVAILABILITY_URL, {'course_id': personal_course.id, 'date': '06/04/2030'})
        assert resp.status_code == 422
        assert resp.json()['code'] == 'invalid_date_range'

    def test_unknown_course_is_404(self, client, frozen_now):
        resp = client.get(AVAILABILITY_URL, {'course_id': uuid.uuid4(), 'date': WEEKDAY.isoformat()})
        assert resp.status_code == 404
        assert resp.json()['code'] == 'not_found'

    def test_database_outage_is_service_unavailable(self, client, personal_course, frozen_now, monkeypatch):
        def _gone(*args, **kwargs):
            raise OperationalError('server closed the connection')
        monkeypatch.setattr(Course.objects, 'active', _gone)

        resp = client.get(AVAILABILITY_URL, {'course_id': personal_course.id, 'date': WEEKDAY.isoformat()})

        assert resp.status_code == 503
        assert resp.json()['code'] == 'store_unavailable'

    def test_post_not_allowed(self, client):
        assert client.post(AVAILABILITY_URL).status_code == 405


class TestCreateBookingApi:
    def test_commit_returns_created(self, client, personal_course, member, frozen_now):
        resp = _post(client, _booking_body(member, personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))

        assert resp.status_code == 201
        data = resp.json()
        booking = Booking.objects.get(id=data['booking_id'])
        assert data['status'] == 'confirmed'
        assert data['reference'] == booking.id_short
        assert booking.profile == member

    def test_naive_times_are_read_as_local(self, client, personal_course, member, frozen_now):
        body = _booking_body(member, personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10))
        body['start_time'] = '2030-06-04T09:00:00'
        body['end_time'] = '2030-06-04T10:00:00'

        resp = _post(client, body)

        assert resp.status_code == 201
        assert Booking.objects.get().start_time == at(WEEKDAY, 9)

    def test_lost_slot_is_conflict(self, client, personal_course, make_member, frozen_now):
        first = _post(client, _booking_body(make_member(), personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))
        second = _post(client, _booking_body(make_member(), personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()['code'] == 'slot_unavailable'
        assert second.json()['retryable'] is False

    def test_full_class_is_conflict_with_capacity_code(self, client, yoga_course, make_member, frozen_now):
        for _ in range(2):
            _post(client, _booking_body(make_member(), yoga_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))
        resp = _post(client, _booking_body(make_member(), yoga_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))

        assert resp.status_code == 409
        assert resp.json()['code'] == 'capacity_exceeded'

    def test_out_of_hours_is_unprocessable(self, client, personal_course, member, frozen_now):
        resp = _post(client, _booking_body(member, personal_course, at(SATURDAY, 7), at(SATURDAY, 8)))
        assert resp.status_code == 422
        assert resp.json()['code'] == 'out_of_business_hours'

    def test_store_unavailable_is_retryable(self, client, personal_course, member, frozen_now, monkeypatch):
        def _timeout(*args, **kwargs):
            raise OperationalError('database is locked')
        monkeypatch.setattr('apps.bookings.engine._lock_course_slot', _timeout)

        resp = _post(client, _booking_body(member, personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))

        assert resp.status_code == 503
        assert resp.json()['retryable'] is True
        assert not Booking.objects.exists()

    def test_missing_fields(self, client, member, frozen_now):
        resp = _post(client, {'profile_id': str(member.id)})
        assert resp.status_code == 400
        assert 'course_id' in resp.json()['error']

    def test_body_must_be_json(self, client):
        resp = client.post(CREATE_URL, data='not json', content_type='application/json')
        assert resp.status_code == 400

    def test_unparseable_times(self, client, personal_course, member):
        body = _booking_body(member, personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10))
        body['start_time'] = 'tomorrow morning'
        assert _post(client, body).status_code == 400


class TestProfileBookingsApi:
    def test_lists_confirmed_bookings(self, client, personal_course, gym_course, member, frozen_now):
        _post(client, _booking_body(member, personal_course, at(WEEKDAY, 9), at(WEEKDAY, 10)))
        _post(client, _booking_body(member, gym_course, at(SATURDAY, 0), at(SATURDAY, 23, 59, 59)))
        Booking.objects.get(course=personal_course).cancel()

        url = reverse('bookings:api_profile_bookings', args=[member.id])
        active = client.get(url).json()['bookings']
        everything = client.get(url, {'include_cancelled': '1'}).json()['bookings']

        assert [b['course_type'] for b in active] == ['gym']
        assert {b['status'] for b in everything} == {'confirmed', 'cancelled'}

    def test_unknown_profile_is_404(self, client):
        url = reverse('bookings:api_profile_bookings', args=[uuid.uuid4()])
        assert client.get(url).status_code == 404

"""
Booking API URLs.

  /bookings/api/availability/                  GET: open slots for course+date
  /bookings/api/bookings/                      POST: commit a booking
  /bookings/api/profiles/<uuid>/bookings/      GET: member's bookings
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('api/availability/', views.api_availability, name='api_availability'),
    path('api/bookings/', views.api_create_booking, name='api_create_booking'),
    path('api/profiles/<uuid:profile_id>/bookings/', views.api_profile_bookings, name='api_profile_bookings'),
]

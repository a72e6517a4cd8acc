"""
URL configuration for the FitClub reservation system.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('courses/', include('apps.courses.urls', namespace='courses')),
    path('bookings/', include('apps.bookings.urls', namespace='bookings')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns

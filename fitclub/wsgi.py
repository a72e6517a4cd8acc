"""
WSGI config for the FitClub reservation system.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fitclub.settings.production')

application = get_wsgi_application()

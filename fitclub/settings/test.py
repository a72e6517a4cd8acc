"""
Test settings: file-backed SQLite so worker threads share one database.
IMMEDIATE transactions take the write lock at BEGIN, which serialises
concurrent commits the way row locks do on PostgreSQL.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from .base import *  # noqa: E402

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test.sqlite3',
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': 30,
        },
        'TEST': {'NAME': BASE_DIR / 'test_fitclub.sqlite3'},
    }
}

STORAGES['staticfiles'] = {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
BOOKING_NOTIFY_EMAIL = 'staff@fitclub.test'

AXES_ENABLED = False

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

"""
Test settings
"""
from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test_db.sqlite3',
        # Writers take the database lock at BEGIN
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': 20,
        },
        # File-backed: the race tests share it across threads
        'TEST': {
            'NAME': BASE_DIR / 'test_db.sqlite3',
        },
    }
}

# Run against PostgreSQL when TEST_DATABASE_URL is set
if env('TEST_DATABASE_URL', default=''):
    DATABASES['default'] = env.db('TEST_DATABASE_URL')

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

TIME_ZONE = 'Europe/Rome'
SLOT_STEP_MINUTES = 30
BOOKING_IDEMPOTENCY_WINDOW_MINUTES = 10

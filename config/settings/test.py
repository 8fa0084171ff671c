"""
FleetDesk — Test Settings

In-memory SQLite, local-memory cache and eager Celery so the suite runs
without PostgreSQL or Redis. Activated by pytest (see pyproject.toml).

@file config/settings/test.py
"""

from .base import *  # noqa: F401, F403

DEBUG = False

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []  # noqa: F405

LOGGING['loggers']['fleetdesk']['level'] = 'WARNING'  # noqa: F405

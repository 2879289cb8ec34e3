"""Test settings: in-memory SQLite, quiet logging."""

from .base import *  # noqa: F401,F403

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

HOUSING = {
    'SINGLE_MIN_AGE': 35,
    'MARRIED_MIN_AGE': 21,
}

LOGGING['loggers']['apps']['level'] = 'WARNING'  # noqa: F405
LOGGING['loggers']['shared']['level'] = 'WARNING'  # noqa: F405

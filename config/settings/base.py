"""Base settings for all environments.

This configuration file defines the common settings of the housing
allocation core. Values come from environment variables, optionally loaded
from a ``.env`` file at the project root. Environment-specific overrides
live in ``dev.py``, ``prod.py`` and ``test.py``.
"""

import os
from pathlib import Path

import structlog
from django.core.exceptions import ImproperlyConfigured
from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(BASE_DIR / '.env')


def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ''):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_env('DJANGO_SECRET_KEY', 'replace-me-in-production')

DEBUG = get_env('DJANGO_DEBUG', 'False').lower() == 'true'

ALLOWED_HOSTS: list[str] = [
    host.strip() for host in get_env('DJANGO_ALLOWED_HOSTS', '').split(',') if host.strip()
]

# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    # Domain apps
    'apps.projects',
    'apps.applications',
    'apps.officers',
    'apps.enquiries',
]

# Database

DATABASES = {
    'default': {
        'ENGINE': get_env('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': get_env('DB_NAME', BASE_DIR / 'db.sqlite3'),
        'USER': get_env('DB_USER', ''),
        'PASSWORD': get_env('DB_PASSWORD', ''),
        'HOST': get_env('DB_HOST', ''),
        'PORT': get_env('DB_PORT', ''),
    }
}

# Internationalization

LANGUAGE_CODE = 'en'

TIME_ZONE = 'Asia/Singapore'

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Allocation rules
HOUSING = {
    # Minimum age of a single applicant (two-room flats only)
    'SINGLE_MIN_AGE': int(get_env('HOUSING_SINGLE_MIN_AGE', 35)),
    # Minimum age of a married applicant (any room type)
    'MARRIED_MIN_AGE': int(get_env('HOUSING_MARRIED_MIN_AGE', 21)),
}

# Logging: stdlib loggers rendered as JSON through structlog
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOG_LEVEL = get_env('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'json': {
            '()': 'structlog.stdlib.ProcessorFormatter',
            'processor': structlog.processors.JSONRenderer(),
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'json',
            'level': LOG_LEVEL,
        }
    },
    'root': {'handlers': ['console'], 'level': 'WARNING'},
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        'apps': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'shared': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}

"""Production settings for the housing allocation core.

Sensitive values must be provided via environment variables; startup fails
with ImproperlyConfigured when one is missing.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)  # noqa: F405

# Production runs on a database with row locks for SELECT FOR UPDATE
DATABASES = {
    'default': {
        'ENGINE': get_env('DB_ENGINE', 'django.db.backends.postgresql'),  # noqa: F405
        'NAME': get_env('DB_NAME', required=True),  # noqa: F405
        'USER': get_env('DB_USER', required=True),  # noqa: F405
        'PASSWORD': get_env('DB_PASSWORD', required=True),  # noqa: F405
        'HOST': get_env('DB_HOST', 'localhost'),  # noqa: F405
        'PORT': get_env('DB_PORT', '5432'),  # noqa: F405
    }
}

"""Development settings for the housing allocation core.

Extends the base settings with debug enabled and verbose domain logging.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow local hosts in development
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]']

LOGGING['loggers']['apps']['level'] = 'DEBUG'  # noqa: F405
LOGGING['handlers']['console']['level'] = 'DEBUG'  # noqa: F405

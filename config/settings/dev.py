"""Development settings for SpotBook project.

This module extends the base settings with development specific
configuration, such as enabling debug and allowing all hosts. Do not use
these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# The Vite dev server runs on another origin during development
CORS_ALLOW_ALL_ORIGINS = True

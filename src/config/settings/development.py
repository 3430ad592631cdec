# config/settings/development.py
"""
Development settings for the Laundry Service
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

# CORS - Allow all in development
CORS_ALLOW_ALL_ORIGINS = True

# Email backend for development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Refresh cookie over plain http
REFRESH_COOKIE['SECURE'] = False

# Simplified logging
LOGGING['handlers']['console']['formatter'] = 'standard'
LOGGING['root']['level'] = 'DEBUG'
LOGGING['loggers']['apps']['level'] = 'DEBUG'

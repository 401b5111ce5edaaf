"""
Development settings for gdpr_admin project.

This file contains settings specific to local development.
"""

from .base import *

# ============================================================================
# DEBUG & DEVELOPMENT
# ============================================================================

DEBUG = True
ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# ============================================================================
# DATABASE - Development
# ============================================================================

# PostgreSQL when DB_NAME is provided, otherwise a local SQLite file
if config('DB_NAME', default=''):
    DATABASES['default']['CONN_MAX_AGE'] = 0
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# ============================================================================
# CACHING - Development
# ============================================================================

if not config('REDIS_URL', default=''):
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'gdpr-admin-dev',
        }
    }

# ============================================================================
# EMAIL BACKEND - Development
# ============================================================================

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# ============================================================================
# LOGGING - Development
# ============================================================================

LOGGING['loggers']['privacy']['level'] = 'DEBUG'
LOGGING['loggers']['django']['level'] = config(
    'DJANGO_LOG_LEVEL', default='INFO')

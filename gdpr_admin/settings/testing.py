"""
Testing settings for gdpr_admin project.

This file contains settings specific to running tests.
Optimized for speed and isolation.
"""

from .base import *

# ============================================================================
# DEBUG & TESTING
# ============================================================================

DEBUG = False
TESTING = True

# ============================================================================
# DATABASE - Testing
# ============================================================================

# Use in-memory SQLite for faster tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# ============================================================================
# EMAIL BACKEND - Testing
# ============================================================================

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

# ============================================================================
# PASSWORD HASHING - Testing
# ============================================================================

# Use faster password hasher for tests (speeds up user creation)
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# ============================================================================
# CACHING - Testing
# ============================================================================

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

# ============================================================================
# LOGGING - Testing
# ============================================================================

# Minimize logging during tests (set to DEBUG to troubleshoot)
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',  # Change to DEBUG to see detailed logs
    },
}

# ============================================================================
# THROTTLING - Testing
# ============================================================================

REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {
    'user': '10000/hour',
}

# ============================================================================
# SECURITY - Testing
# ============================================================================

SECRET_KEY = 'test-secret-key-not-for-production'  # nosec - test environment only
ALLOWED_HOSTS = ['*']
CSRF_COOKIE_SECURE = False
SESSION_COOKIE_SECURE = False
SECURE_SSL_REDIRECT = False

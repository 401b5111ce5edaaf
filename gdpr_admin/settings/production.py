"""
Production settings for gdpr_admin project.

This file contains settings specific to production deployment.
Security and performance optimized.
"""

import logging

from .base import *
import sentry_sdk
from sentry_sdk.integrations.django import DjangoIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

# ============================================================================
# SECRET KEY VALIDATION
# ============================================================================

if SECRET_KEY.startswith('django-insecure-'):
    raise ValueError(
        "Production SECRET_KEY must not use the default insecure key. "
        "Please set a proper SECRET_KEY environment variable."
    )

if len(SECRET_KEY) < 32:
    raise ValueError(
        "Production SECRET_KEY must be at least 32 characters long for security. "
        f"Current length: {len(SECRET_KEY)}"
    )

# ============================================================================
# PRODUCTION SECURITY
# ============================================================================

DEBUG = False

ALLOWED_HOSTS = [host.strip() for host in ALLOWED_HOSTS if host.strip()]

# ============================================================================
# MIDDLEWARE - Production
# ============================================================================

MIDDLEWARE.insert(
    MIDDLEWARE.index('django.middleware.security.SecurityMiddleware') + 1,
    'whitenoise.middleware.WhiteNoiseMiddleware',
)

# ============================================================================
# DATABASE - Production (PostgreSQL)
# ============================================================================

DATABASE_URL = config('DATABASE_URL', default='')

if DATABASE_URL:
    import dj_database_url
    DATABASES = {
        'default': dj_database_url.parse(
            DATABASE_URL,
            conn_max_age=60,
        )
    }
    DATABASES['default']['OPTIONS'] = {
        'sslmode': 'prefer',
    }

# ============================================================================
# SECURITY HEADERS - Production
# ============================================================================

SECURE_SSL_REDIRECT = config('SECURE_SSL_REDIRECT', default=True, cast=bool)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# HSTS
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = 'strict-origin-when-cross-origin'
X_FRAME_OPTIONS = 'DENY'

CSRF_TRUSTED_ORIGINS = config('CSRF_TRUSTED_ORIGINS', default='', cast=Csv())
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

# ============================================================================
# STATIC FILES - Production
# ============================================================================

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

WHITENOISE_MAX_AGE = 31536000  # 1 year

# ============================================================================
# CACHE - Production (Redis with Database fallback)
# ============================================================================

REDIS_URL = config('REDIS_URL', default=None)

if REDIS_URL:
    CACHES['default']['LOCATION'] = REDIS_URL
    SESSION_ENGINE = 'django.contrib.sessions.backends.cache'
    SESSION_CACHE_ALIAS = 'default'
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.db.DatabaseCache',
            'LOCATION': 'cache_table',
        }
    }

# ============================================================================
# LOGGING - Production
# ============================================================================

LOG_DIR = config('LOG_DIR', default=str(BASE_DIR / 'logs'))
os.makedirs(LOG_DIR, exist_ok=True)

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['privacy']['level'] = 'INFO'
LOGGING['loggers']['django']['level'] = 'WARNING'

LOGGING['handlers']['file'] = {
    'class': 'logging.handlers.RotatingFileHandler',
    'filename': os.path.join(LOG_DIR, 'django.log'),
    'maxBytes': 10485760,  # 10MB
    'backupCount': 5,
    'formatter': 'structured',
    'filters': ['sensitive_data_filter'],
}
LOGGING['handlers']['security_file'] = {
    'class': 'logging.handlers.RotatingFileHandler',
    'filename': os.path.join(LOG_DIR, 'security.log'),
    'maxBytes': 10485760,  # 10MB
    'backupCount': 10,
    'formatter': 'structured',
    'filters': ['sensitive_data_filter'],
}

LOGGING['loggers']['privacy']['handlers'].append('file')
LOGGING['loggers']['business']['handlers'].append('file')
LOGGING['loggers']['security']['handlers'].append('security_file')

# ============================================================================
# MONITORING - Sentry
# ============================================================================

SENTRY_DSN = config('SENTRY_DSN', default=None)

if SENTRY_DSN:
    sentry_logging = LoggingIntegration(
        level=logging.INFO,
        event_level=logging.ERROR
    )

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[
            DjangoIntegration(
                transaction_style='url',
                middleware_spans=True,
                signals_spans=True,
            ),
            sentry_logging,
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
        environment=config('SENTRY_ENVIRONMENT', default='production'),
    )

"""
Core application configuration for the GDPR admin.

This app contains the option store, sanitizers, security tokens,
logging utilities and the API exception handler shared by the project.
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'Core'

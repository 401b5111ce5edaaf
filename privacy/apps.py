from django.apps import AppConfig


class PrivacyConfig(AppConfig):
    """Configuration for the GDPR admin pages."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'privacy'
    verbose_name = 'GDPR'

    def ready(self):
        """Register the cookie settings with their sanitizers."""
        from . import signals  # noqa: F401
        from .registration import register_settings

        register_settings()

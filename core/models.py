from django.db import models
from django.core.cache import cache


class Option(models.Model):
    """Site-wide key-value option, stored as JSON and read through the cache."""

    key = models.CharField(
        max_length=191,
        unique=True,
        help_text="Unique identifier for this option"
    )
    value = models.JSONField(
        null=True,
        blank=True,
        help_text="Option value (any JSON-serializable structure)"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'core_option'
        verbose_name = "Option"
        verbose_name_plural = "Options"
        ordering = ['key']

    def __str__(self):
        return self.key

    def save(self, *args, **kwargs):
        """Clear cache when options change."""
        super().save(*args, **kwargs)
        cache.delete(f'option_{self.key}')

    def delete(self, *args, **kwargs):
        cache.delete(f'option_{self.key}')
        return super().delete(*args, **kwargs)

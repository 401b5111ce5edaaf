import json

from django.contrib import admin
from django.contrib import messages
from django.utils.html import format_html

from .models import Option
from .options import OptionStore, get_registered_setting


@admin.register(Option)
class OptionAdmin(admin.ModelAdmin):
    """Admin interface for stored options."""

    list_display = [
        'key',
        'value_preview',
        'sanitized_status',
        'updated_at'
    ]
    search_fields = ['key']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = [
        ('Option', {
            'fields': ['key', 'value'],
            'description': 'Registered options are sanitized on save'
        }),
        ('Audit Information', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        })
    ]

    actions = ['clear_options_cache']

    def value_preview(self, obj):
        """Show a preview of the value."""
        value = json.dumps(obj.value, ensure_ascii=False)
        if len(value) > 50:
            return value[:47] + "..."
        return value
    value_preview.short_description = "Value"

    def sanitized_status(self, obj):
        """Show whether writes to this key are sanitized."""
        if get_registered_setting(obj.key):
            return format_html(
                '<span style="color: green; font-weight: bold;">{}</span>', '✓ Registered'
            )
        return format_html('<span style="color: grey;">{}</span>', 'Unregistered')
    sanitized_status.short_description = "Sanitizer"

    def get_readonly_fields(self, request, obj=None):
        # Saves are keyed on `key`, so renaming would leave the old row behind
        if obj is not None:
            return self.readonly_fields + ['key']
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        """Route saves through the option store so sanitizers apply."""
        obj.value = OptionStore.set(obj.key, obj.value)
        obj.pk = type(obj).objects.get(key=obj.key).pk

        messages.success(
            request,
            f'Option "{obj.key}" saved. Cache refreshed.'
        )

    def clear_options_cache(self, request, queryset):
        """Clear the options cache."""
        OptionStore.clear_cache()
        self.message_user(request, 'Options cache cleared successfully.')
    clear_options_cache.short_description = "Clear options cache"


# Customize admin site
admin.site.site_header = "GDPR Administration"
admin.site.site_title = "GDPR Admin"
admin.site.index_title = "Site administration"

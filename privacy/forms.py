"""
Forms for the GDPR settings and requests pages.
"""

import html

from django import forms
from django.utils.translation import gettext_lazy as _

from core.options import OptionStore, get_registered_setting
from core.utils import sanitize_email

from .constants import (
    OPTION_BANNER_CONTENT,
    OPTION_POPUP_CONTENT,
    OPTION_PRIVACY_EXCERPT,
    USER_EMAIL_FIELD,
)
from .sanitizers import parse_nested_fields, sanitize_cookie_tabs_with_report


def _stored_text(key):
    # Stored plain text is escaped; unescape it so the widget does not escape twice
    value = OptionStore.get(key, '')
    return html.unescape(value) if isinstance(value, str) else ''


class CookieSettingsForm(forms.Form):
    """
    Cookie banner settings.

    The two text fields are regular form fields. The cookie categories are
    posted as bracketed field names and rebuilt in clean().
    """

    gdpr_cookie_banner_content = forms.CharField(
        label=_('Banner content'),
        required=False,
        widget=forms.Textarea(attrs={'rows': 5, 'cols': 40}),
    )
    gdpr_cookie_privacy_excerpt = forms.CharField(
        label=_('Cookie Privacy Excerpt'),
        required=False,
        widget=forms.Textarea(attrs={'rows': 5, 'cols': 40}),
    )

    TEXT_OPTIONS = (OPTION_BANNER_CONTENT, OPTION_PRIVACY_EXCERPT)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.is_bound:
            for key in self.TEXT_OPTIONS:
                self.fields[key].initial = _stored_text(key)
        self.report = None

    def clean(self):
        cleaned_data = super().clean()
        source = self.data if self.is_bound else {}
        cleaned_data[OPTION_POPUP_CONTENT] = parse_nested_fields(source, OPTION_POPUP_CONTENT)
        return cleaned_data

    def save(self):
        """
        Persist every option through its registered sanitizer.

        Returns:
            SanitizeReport for the cookie categories
        """
        for key in self.TEXT_OPTIONS:
            OptionStore.set(key, self.cleaned_data.get(key, ''))

        popup_content = self.cleaned_data.get(OPTION_POPUP_CONTENT, {})
        _sanitized, self.report = sanitize_cookie_tabs_with_report(popup_content)
        OptionStore.set(OPTION_POPUP_CONTENT, popup_content)
        return self.report

    @staticmethod
    def cookie_tabs():
        """Stored cookie categories for the repeating-group editor."""
        registered = get_registered_setting(OPTION_POPUP_CONTENT)
        default = registered.default if registered else {}
        tabs = OptionStore.get(OPTION_POPUP_CONTENT, default)
        return tabs if isinstance(tabs, dict) else {}


class UserEmailForm(forms.Form):
    """Email submitted by the request actions; token checks happen in the view."""

    user_email = forms.CharField(required=False)

    def clean_user_email(self):
        return sanitize_email(self.cleaned_data.get(USER_EMAIL_FIELD, ''))

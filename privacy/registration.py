"""
Settings registration for the GDPR settings page.

Registers the three cookie options with their sanitizers and describes
the section and tabs rendered on the page. PrivacyConfig.ready()
calls register_settings() so the registry is complete before any request
is served.
"""

from collections import OrderedDict

from django.utils.translation import gettext_lazy as _

from core.options import register_setting
from core.utils import sanitize_text_field

from .constants import (
    OPTION_BANNER_CONTENT,
    OPTION_POPUP_CONTENT,
    OPTION_PRIVACY_EXCERPT,
    SETTINGS_GROUP,
    SETTINGS_PAGE,
)
from .sanitizers import sanitize_cookie_tabs
from .signals import settings_tabs

COOKIE_SECTION = {
    'id': 'cookie_banner_section',
    'title': _('Cookie Settings'),
    'page': SETTINGS_PAGE,
}

DEFAULT_TAB = 'cookies'


def register_settings():
    register_setting(SETTINGS_GROUP, OPTION_BANNER_CONTENT, sanitize_text_field, default='')
    register_setting(SETTINGS_GROUP, OPTION_PRIVACY_EXCERPT, sanitize_text_field, default='')
    register_setting(SETTINGS_GROUP, OPTION_POPUP_CONTENT, sanitize_cookie_tabs, default={})


def get_settings_tabs():
    """
    Tabs of the settings page, extended by settings_tabs receivers.

    Receivers that return something other than a mapping are ignored.
    """
    tabs = OrderedDict([
        (DEFAULT_TAB, {'name': _('Cookies'), 'page': SETTINGS_PAGE}),
    ])

    for _receiver, extra_tabs in settings_tabs.send(sender=None, tabs=dict(tabs)):
        if isinstance(extra_tabs, dict):
            tabs.update(extra_tabs)

    return tabs

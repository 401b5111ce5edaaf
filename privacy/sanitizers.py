"""
Sanitizers for the cookie popup settings.

The cookie categories editor posts a nested structure:

    gdpr_cookie_popup_content[<category>][name]
    gdpr_cookie_popup_content[<category>][always_active]
    gdpr_cookie_popup_content[<category>][how_we_use]
    gdpr_cookie_popup_content[<category>][cookies_used]
    gdpr_cookie_popup_content[<category>][hosts][<host>][name]
    gdpr_cookie_popup_content[<category>][hosts][<host>][cookies_used]
    gdpr_cookie_popup_content[<category>][hosts][<host>][optout]

Incomplete categories and hosts are dropped rather than rejected, so a
half-filled editor never blocks saving the rest of the settings.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Tuple

from core.utils import sanitize_post_html, sanitize_text_field, sanitize_url

logger = logging.getLogger(__name__)

REQUIRED_CATEGORY_FIELDS = ('name', 'how_we_use', 'cookies_used')
REQUIRED_HOST_FIELDS = ('name', 'cookies_used')

BRACKET_SEGMENT = re.compile(r'\[([^\[\]]*)\]')


class SanitizeReport:
    """Keys of the records dropped by sanitize_cookie_tabs_with_report."""

    def __init__(self):
        self.dropped_categories: List[str] = []
        self.dropped_hosts: List[Tuple[str, str]] = []

    @property
    def has_drops(self) -> bool:
        return bool(self.dropped_categories or self.dropped_hosts)

    def __repr__(self):
        return (f"<SanitizeReport categories={self.dropped_categories!r} "
                f"hosts={self.dropped_hosts!r}>")


def _is_blank(value: Any) -> bool:
    # Nested mappings from bracketed field names are never valid text
    return not isinstance(value, str) or value.strip() == ''


def _clean(value: Any, sanitizer=sanitize_text_field) -> str:
    return sanitizer(value) if isinstance(value, str) else ''


def _sanitize_host(host: Mapping) -> Dict[str, str]:
    return {
        'name': _clean(host.get('name')),
        'cookies_used': _clean(host.get('cookies_used')),
        'optout': _clean(host.get('optout'), sanitize_url),
    }


def _sanitize_category(props: Mapping, category_key: str, report: SanitizeReport) -> Dict[str, Any]:
    category = {
        'name': _clean(props.get('name')),
        'always_active': _clean(props.get('always_active')),
        'how_we_use': _clean(props.get('how_we_use'), sanitize_post_html),
        'cookies_used': _clean(props.get('cookies_used')),
        'hosts': {},
    }

    hosts = props.get('hosts')
    if not isinstance(hosts, Mapping):
        return category

    for host_key, host in hosts.items():
        host_key = str(host_key)
        if not isinstance(host, Mapping) or any(_is_blank(host.get(field)) for field in REQUIRED_HOST_FIELDS):
            report.dropped_hosts.append((category_key, host_key))
            continue

        cleaned = _sanitize_host(host)
        if any(cleaned[field] == '' for field in REQUIRED_HOST_FIELDS):
            report.dropped_hosts.append((category_key, host_key))
            continue

        category['hosts'][host_key] = cleaned

    return category


def sanitize_cookie_tabs_with_report(tabs: Any) -> Tuple[Dict[str, Any], SanitizeReport]:
    """
    Clean submitted cookie categories and report what was dropped.

    Returns:
        (sanitized categories, SanitizeReport)
    """
    report = SanitizeReport()
    if not isinstance(tabs, Mapping):
        return {}, report

    output = {}
    for key, props in tabs.items():
        key = str(key)
        if not isinstance(props, Mapping) or any(_is_blank(props.get(field)) for field in REQUIRED_CATEGORY_FIELDS):
            report.dropped_categories.append(key)
            continue

        category = _sanitize_category(props, key, report)
        if any(category[field] == '' for field in REQUIRED_CATEGORY_FIELDS):
            report.dropped_categories.append(key)
            continue

        output[key] = category

    if report.has_drops:
        logger.warning(
            "Dropped incomplete cookie settings: %d categories, %d hosts",
            len(report.dropped_categories), len(report.dropped_hosts)
        )

    return output, report


def sanitize_cookie_tabs(tabs: Any) -> Dict[str, Any]:
    """Sanitize callback registered for the cookie popup content option."""
    output, _ = sanitize_cookie_tabs_with_report(tabs)
    return output


def parse_nested_fields(data: Any, prefix: str) -> Dict[str, Any]:
    """
    Rebuild a nested mapping from bracketed form field names.

    ``prefix[a][b]=1`` and ``prefix[a][c]=2`` become ``{'a': {'b': '1', 'c': '2'}}``.
    Empty brackets append a numbered entry. Later values win when a
    field is submitted twice.
    """
    result: Dict[str, Any] = {}
    if not data:
        return result

    for field_name in data.keys():
        if not field_name.startswith(prefix + '['):
            continue

        remainder = field_name[len(prefix):]
        segments = BRACKET_SEGMENT.findall(remainder)
        if not segments or ''.join(f'[{segment}]' for segment in segments) != remainder:
            continue

        values = data.getlist(field_name) if hasattr(data, 'getlist') else [data[field_name]]
        for value in values:
            node = result
            for segment in segments[:-1]:
                segment = segment or str(len(node))
                child = node.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    node[segment] = child
                node = child

            leaf = segments[-1] or str(len(node))
            node[leaf] = value

    return result

"""
Utility functions for the GDPR admin.

Input sanitizers used before anything is persisted, plus small request
and URL helpers shared by the views.
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils.html import escape
from django.utils.http import url_has_allowed_host_and_scheme
import logging

logger = logging.getLogger(__name__)

# Control characters other than tab/newline/carriage return
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
WHITESPACE_RUN = re.compile(r'\s+')
PERCENT_OCTET = re.compile(r'%[a-fA-F0-9]{2}')

# Blocks removed together with their content
DANGEROUS_BLOCKS = re.compile(
    r'<(script|style|iframe|object|embed|svg|math|form|template|noscript)\b[^>]*>.*?</\1\s*>',
    re.IGNORECASE | re.DOTALL
)
DANGEROUS_OPENERS = re.compile(
    r'<(script|style|iframe|object|embed|svg|math|form|template|noscript)\b[^>]*>',
    re.IGNORECASE
)
HTML_COMMENT = re.compile(r'<!--.*?-->', re.DOTALL)
HTML_TAG = re.compile(r'<(/?)([a-zA-Z][a-zA-Z0-9]*)([^>]*)>')
# Stands in for a rebuilt tag while the remaining text is escaped
TAG_PLACEHOLDER = re.compile(r'\x00(\d+)\x00')
HTML_ATTRIBUTE = re.compile(
    r'([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*=\s*("[^"]*"|\'[^\']*\'|[^\s"\'>]+)')

# Tags and attributes kept in rich text fields (post-content subset)
ALLOWED_POST_TAGS = {
    'a': {'href', 'title', 'target', 'rel'},
    'abbr': {'title'},
    'b': set(),
    'blockquote': {'cite'},
    'br': set(),
    'code': set(),
    'del': set(),
    'em': set(),
    'h1': set(), 'h2': set(), 'h3': set(), 'h4': set(), 'h5': set(), 'h6': set(),
    'hr': set(),
    'i': set(),
    'li': set(),
    'ol': set(),
    'p': {'class'},
    'pre': set(),
    's': set(),
    'span': {'class'},
    'strong': set(),
    'sub': set(),
    'sup': set(),
    'u': set(),
    'ul': set(),
}
VOID_TAGS = {'br', 'hr'}
URL_ATTRIBUTES = {'href', 'cite'}

# Schemes that execute code when followed
SCRIPT_SCHEMES = {'javascript', 'vbscript', 'data'}
URL_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\xff]")


def sanitize_email(email: Any) -> str:
    """
    Strip whitespace from an email address and validate it.

    Returns:
        str: The trimmed address, or an empty string when it is not a
        syntactically valid email address.
    """
    if not email:
        return ''

    email = CONTROL_CHARS.sub('', str(email)).strip()
    try:
        validate_email(email)
    except ValidationError:
        return ''
    return email


def sanitize_text_field(value: Any) -> str:
    """
    Clean a single-line plain text value for storage and display.

    Drops control characters and percent-encoded octets, collapses runs of
    whitespace, trims, then HTML-escapes the result.
    """
    if value is None:
        return ''

    text = CONTROL_CHARS.sub('', str(value))
    text = PERCENT_OCTET.sub('', text)
    text = WHITESPACE_RUN.sub(' ', text).strip()
    return escape(text)


def _is_script_url(url: str) -> bool:
    scheme = urlsplit(re.sub(r'\s', '', url)).scheme.lower()
    return scheme in SCRIPT_SCHEMES


def _clean_attributes(tag: str, raw_attributes: str) -> str:
    allowed = ALLOWED_POST_TAGS[tag]
    kept = []
    for name, raw_value in HTML_ATTRIBUTE.findall(raw_attributes):
        name = name.lower()
        if name not in allowed:
            continue
        value = raw_value
        if value[:1] in ('"', "'"):
            value = value[1:-1]
        if name in URL_ATTRIBUTES and _is_script_url(value):
            continue
        kept.append(f'{name}="{escape(value)}"')
    return (' ' + ' '.join(kept)) if kept else ''


def sanitize_post_html(value: Any) -> str:
    """
    Keep a constrained subset of HTML in rich text content.

    Script-like blocks are removed with their content, comments are
    dropped, tags outside ALLOWED_POST_TAGS are unwrapped, and allowed
    tags keep only their allowed attributes (never event handlers or
    script URLs). Any ``<`` or ``>`` left outside a rebuilt tag is
    escaped, so an unterminated tag can never reach the output as markup.
    """
    if not value:
        return ''

    # Control characters are stripped first, so NUL is free for placeholders
    text = CONTROL_CHARS.sub('', str(value))

    previous = None
    while previous != text:
        previous = text
        text = DANGEROUS_BLOCKS.sub('', text)
        text = HTML_COMMENT.sub('', text)
    text = DANGEROUS_OPENERS.sub('', text)

    kept_tags = []

    def rebuild_tag(match):
        closing, tag, attributes = match.group(1), match.group(2).lower(), match.group(3)
        if tag not in ALLOWED_POST_TAGS:
            return ''
        if closing:
            if tag in VOID_TAGS:
                return ''
            rebuilt = f'</{tag}>'
        elif tag in VOID_TAGS:
            rebuilt = f'<{tag} />'
        else:
            rebuilt = f'<{tag}{_clean_attributes(tag, attributes)}>'
        kept_tags.append(rebuilt)
        return f'\x00{len(kept_tags) - 1}\x00'

    text = HTML_TAG.sub(rebuild_tag, text)
    text = text.replace('<', '&lt;').replace('>', '&gt;')
    text = TAG_PLACEHOLDER.sub(lambda match: kept_tags[int(match.group(1))], text)
    return text.strip()


def sanitize_url(value: Any) -> str:
    """
    Syntactic cleanup of a URL before storage.

    Characters that are never valid in a URL are removed, spaces are
    encoded, bare host names get an ``http://`` prefix and script URLs are
    rejected. The target is not fetched or otherwise verified.
    """
    if not value:
        return ''

    url = CONTROL_CHARS.sub('', str(value)).strip()
    url = url.replace(' ', '%20')
    url = URL_DISALLOWED_CHARS.sub('', url)
    if not url:
        return ''

    if _is_script_url(url):
        logger.warning("Rejected script URL during sanitization")
        return ''

    if ':' not in url and not url.startswith(('/', '#', '?')):
        url = f'http://{url}'

    return url


def add_query_arg(url: str, params: Dict[str, Any]) -> str:
    """
    Add or replace query arguments on a URL, keeping its fragment.

    Boolean values are written as ``true``/``false``.
    """
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        query[key] = value
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def get_client_ip(request) -> Optional[str]:
    """
    Get client IP address from request, handling proxies.

    Args:
        request: Django request object

    Returns:
        str: Client IP address or None
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # Take the first IP in the chain
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')

    return ip


def is_safe_redirect_url(url: str, request) -> bool:
    """
    Check if URL is safe for redirects (prevents open redirect attacks).

    Only URLs on the current host (or relative URLs) are accepted.
    """
    if not url:
        return False

    return url_has_allowed_host_and_scheme(
        url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    )


def get_referer(request, fallback: str) -> str:
    """Return the same-host referer of a request, or the fallback URL."""
    referer = request.META.get('HTTP_REFERER', '')
    if is_safe_redirect_url(referer, request):
        return referer
    return fallback

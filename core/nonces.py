"""
Per-action security tokens for admin forms.

Django's CSRF middleware protects every POST; these tokens additionally
bind a form submission to one named action and to the user the form was
rendered for, so a token issued for "remove from queue" cannot be
replayed against "delete user".
"""

import logging

from django.conf import settings
from django.core import signing

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 86400  # 24 hours


def _signer(action: str) -> signing.TimestampSigner:
    return signing.TimestampSigner(salt=f'core.nonces.{action}')


def _user_fingerprint(request) -> str:
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return '0'
    return str(user.pk)


def create_token(request, action: str) -> str:
    """Create a token for ``action`` bound to the requesting user."""
    return _signer(action).sign(_user_fingerprint(request))


def verify_token(request, token, action: str) -> bool:
    """
    Check a submitted token against ``action``.

    Returns False for missing, tampered, expired, foreign-action or
    foreign-user tokens.
    """
    if not token or not isinstance(token, str):
        return False

    max_age = getattr(settings, 'GDPR_TOKEN_MAX_AGE', DEFAULT_MAX_AGE)
    try:
        value = _signer(action).unsign(token, max_age=max_age)
    except signing.SignatureExpired:
        logger.info("Expired security token for action %s", action)
        return False
    except signing.BadSignature:
        return False

    return value == _user_fingerprint(request)

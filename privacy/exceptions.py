"""
Errors raised by the data subject request workflow.

InvalidSecurityToken stops the request with an error page. The other
errors are reported to the admin as a status message after redirecting.
"""

from django.utils.translation import gettext as _


class GDPRRequestError(Exception):
    """Base class for request workflow errors."""

    code = 'gdpr-error'
    default_message = 'The request could not be processed.'

    def __init__(self, message=None, email=None):
        self.email = email
        self.message = message or self.get_default_message()
        super().__init__(self.message)

    def get_default_message(self):
        return _(self.default_message)


class InvalidSecurityToken(GDPRRequestError):
    code = 'invalid-token'
    default_message = 'We could not verify the user email or the security token. Please try again.'


class UserNotFound(GDPRRequestError):
    code = 'invalid-user'
    default_message = 'User not found.'


class DuplicateRequest(GDPRRequestError):
    code = 'duplicate-request'
    default_message = 'User already placed a deletion request.'


class RequestNotFound(GDPRRequestError):
    code = 'request-not-found'

    def get_default_message(self):
        return _('No deletion request found for %(email)s.') % {'email': self.email}

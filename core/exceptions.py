"""
Problem+JSON (RFC 7807) error responses for the GDPR staff API.

The API is read-only, so errors are limited to a rejected query
parameter, missing staff access and throttling.
"""

import logging
from rest_framework import status
from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException

from core.utils import get_client_ip

logger = logging.getLogger(__name__)

ERROR_TITLES = {
    400: 'Bad Request',
    401: 'Unauthorized',
    403: 'Forbidden',
    405: 'Method Not Allowed',
    429: 'Too Many Requests',
}


class ProblemDetailException(APIException):
    """Raised by API views to answer with a titled problem document."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'A problem occurred'
    default_code = 'error'

    def __init__(self, title=None, detail=None, status_code=None):
        self.title = title or 'Error'
        if status_code:
            self.status_code = status_code
        super().__init__(detail or self.default_detail)


def problem_exception_handler(exc, context):
    """DRF exception handler rendering errors as application/problem+json."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
    problem_data = {
        'type': 'about:blank',
        'title': getattr(exc, 'title', None) or ERROR_TITLES.get(response.status_code, 'Error'),
        'status': response.status_code,
        'detail': str(detail),
    }

    request = context.get('request')
    if request:
        problem_data['instance'] = request.build_absolute_uri()

    log_error(exc, request, response.status_code)

    response.data = problem_data
    response.content_type = 'application/problem+json'
    return response


def log_error(exc, request, status_code):
    user = getattr(request, 'user', None)

    logger.warning(
        f"API Error {status_code}: {exc}",
        extra={
            'status_code': status_code,
            'exception_type': type(exc).__name__,
            'user_id': user.pk if user is not None and user.is_authenticated else None,
            'path': request.path if request else None,
            'ip_address': get_client_ip(request) if request else None,
        },
    )

"""
Structured logging utilities with JSON formatting and sensitive data filtering.

Provides:
- PII filtering (email addresses, security tokens) on every handler
- Structured JSON output for log aggregation
- Helpers for security and business events raised by the GDPR admin
"""

import json
import logging
import re
import traceback
from typing import Dict, Any
from datetime import datetime
from django.http import HttpRequest

from core.utils import get_client_ip

# LogRecord attributes that are never treated as extra context
RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelno', 'levelname', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message', 'asctime',
}


class SensitiveDataFilter(logging.Filter):
    """
    Filter to remove sensitive data from log records.

    Data subject email addresses and form security tokens must not end up
    in log files.
    """

    SENSITIVE_PATTERNS = [
        # Email patterns
        (re.compile(
            r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b'), '[EMAIL]'),
        # Passwords and tokens
        (re.compile(
            r'(password|token|secret|key)\s*[:=]\s*[\'"][^\'"\s]+[\'"]', re.IGNORECASE), r'\1=[FILTERED]'),
    ]

    # Fields that should be completely removed from logs
    SENSITIVE_FIELDS = {
        'password', 'token', 'secret', 'key', 'authorization',
        'csrf_token', 'csrfmiddlewaretoken', 'session_key', 'secret_key',
        'gdpr_delete_user', 'gdpr_delete_remove_user', 'gdpr_delete_email_lookup',
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter sensitive data from log record.

        Returns True to allow the record to be logged.
        """
        if isinstance(record.msg, str):
            record.msg = self._filter_string(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = self._filter_dict(record.args)
            else:
                record.args = tuple(
                    self._filter_string(arg) if isinstance(arg, str)
                    else self._filter_dict(arg) if isinstance(arg, dict)
                    else arg
                    for arg in record.args
                )

        for attr_name, attr_value in list(record.__dict__.items()):
            if attr_name in RESERVED_ATTRS or attr_name.startswith('_'):
                continue
            if attr_name.lower() in self.SENSITIVE_FIELDS:
                setattr(record, attr_name, '[FILTERED]')
            elif isinstance(attr_value, str):
                setattr(record, attr_name, self._filter_string(attr_value))
            elif isinstance(attr_value, dict):
                setattr(record, attr_name, self._filter_dict(attr_value))

        return True

    def _filter_string(self, text: str) -> str:
        """Filter sensitive patterns from string."""
        if not text:
            return text

        filtered_text = text
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            filtered_text = pattern.sub(replacement, filtered_text)

        return filtered_text

    def _filter_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Filter sensitive fields from dictionary."""
        filtered_data = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_FIELDS:
                filtered_data[key] = '[FILTERED]'
            elif isinstance(value, str):
                filtered_data[key] = self._filter_string(value)
            elif isinstance(value, dict):
                filtered_data[key] = self._filter_dict(value)
            elif isinstance(value, list):
                filtered_data[key] = [
                    self._filter_dict(item) if isinstance(item, dict)
                    else self._filter_string(item) if isinstance(item, str)
                    else item
                    for item in value
                ]
            else:
                filtered_data[key] = value

        return filtered_data


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for better parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Add any extra attributes
        for key, value in record.__dict__.items():
            if key not in RESERVED_ATTRS and not key.startswith('_') and key not in log_entry:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def log_security_event(event_type: str, request: HttpRequest, details: Dict[str, Any] = None, user=None):
    """
    Log a security-related event.

    Args:
        event_type: Type of security event (invalid_security_token, ...)
        request: HTTP request object
        details: Additional details about the event
        user: User object if available
    """
    logger = logging.getLogger('security')

    log_data = {
        'event_type': event_type,
        'ip_address': get_client_ip(request),
        'user_agent': request.META.get('HTTP_USER_AGENT', ''),
        'request_path': request.path,
    }

    user = user or getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        log_data['user_id'] = user.pk

    if details:
        log_data['details'] = details

    logger.warning(f"Security event: {event_type}", extra=log_data)


def log_business_event(event_type: str, user=None, details: Dict[str, Any] = None):
    """
    Log important business events for auditing.

    Args:
        event_type: Type of business event (deletion_request_added, user_erased, ...)
        user: Staff user who triggered the event
        details: Additional details about the event
    """
    logger = logging.getLogger('business')

    log_data = {
        'event_type': event_type,
        'business_event': True,
    }

    if user is not None and getattr(user, 'is_authenticated', False):
        log_data['user_id'] = user.pk

    if details:
        log_data.update(details)

    logger.info(f"Business event: {event_type}", extra=log_data)

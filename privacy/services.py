"""
Data subject request workflow.

All requests live in a single stored list (the ``gdpr_requests`` option).
Every operation reads the full list, changes it in memory and writes the
whole list back; concurrent writers are last-write-wins.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional

from django.apps import apps
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import dateformat, timezone
import structlog

from core.options import OptionStore
from core.utils import sanitize_email

from .constants import OPTION_REQUESTS, REQUEST_DELETE, REQUEST_TYPES
from .exceptions import DuplicateRequest, RequestNotFound, UserNotFound
from .signals import has_user_content, pre_user_erasure

logger = structlog.get_logger(__name__)
User = get_user_model()


def _same_email(left: Any, right: Any) -> bool:
    return str(left or '').strip().lower() == str(right or '').strip().lower()


def get_user_by_email(email: str):
    """Resolve an email address to a user account, or None."""
    email = sanitize_email(email)
    if not email:
        return None
    return User.objects.filter(email__iexact=email).order_by('pk').first()


def resolve_user(user):
    """Accept a user instance or an integer id; return the user or None."""
    if isinstance(user, User):
        return user
    if isinstance(user, bool) or not isinstance(user, int):
        return None
    return User.objects.filter(pk=user).first()


class RequestQueueService:
    """
    Service for reading and changing the stored request list.
    """

    @staticmethod
    def get_requests() -> List[Dict[str, Any]]:
        """Return the stored requests, skipping malformed entries."""
        stored = OptionStore.get(OPTION_REQUESTS, [])
        if not isinstance(stored, (list, tuple)):
            return []
        return [entry for entry in stored if isinstance(entry, dict)]

    @staticmethod
    def save_requests(requests: List[Dict[str, Any]]):
        OptionStore.set(OPTION_REQUESTS, list(requests))

    @staticmethod
    def group_requests(requests: List[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
        """
        Bucket requests by type.

        Every known type gets a bucket, even when empty. Entries with an
        unknown type are left out.
        """
        groups = OrderedDict((request_type, []) for request_type, _label in REQUEST_TYPES)
        for request in requests:
            request_type = request.get('type')
            if request_type in groups:
                groups[request_type].append(request)
        return groups

    @staticmethod
    def request_tabs(groups: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Dict[str, Any]]:
        """Tab label and request count for each request type."""
        return OrderedDict(
            (request_type, {'name': label, 'count': len(groups.get(request_type, []))})
            for request_type, label in REQUEST_TYPES
        )

    @staticmethod
    def find_request(requests: List[Dict[str, Any]], email: str, request_type: str) -> Optional[int]:
        """Index of the first request matching (email, type), or None."""
        for index, request in enumerate(requests):
            if request.get('type') == request_type and _same_email(request.get('email'), email):
                return index
        return None

    @staticmethod
    def build_request(email: str, request_type: str, data: Optional[str] = None) -> Dict[str, Any]:
        request = {
            'email': email,
            'date': dateformat.format(timezone.localtime(), settings.GDPR_REQUEST_DATE_FORMAT),
            'type': request_type,
        }
        if data:
            request['data'] = data
        return request

    @staticmethod
    def add_deletion_request(email: str) -> Dict[str, Any]:
        """
        Queue an erasure request for the account registered with ``email``.

        Raises:
            UserNotFound: no account uses this address
            DuplicateRequest: the address already has an erasure request
        """
        email = sanitize_email(email)
        user = get_user_by_email(email)
        if user is None:
            logger.info("Deletion request for unknown user rejected")
            raise UserNotFound(email=email)

        requests = RequestQueueService.get_requests()
        if RequestQueueService.find_request(requests, email, REQUEST_DELETE) is not None:
            logger.info("Duplicate deletion request rejected", user_id=str(user.pk))
            raise DuplicateRequest(email=email)

        request = RequestQueueService.build_request(email, REQUEST_DELETE)
        requests.append(request)
        RequestQueueService.save_requests(requests)

        logger.info("Deletion request queued", user_id=str(user.pk))
        return request

    @staticmethod
    def remove_request(email: str, request_type: str) -> Dict[str, Any]:
        """
        Remove the first request matching (email, type).

        Raises:
            RequestNotFound: no such request is queued
        """
        email = sanitize_email(email)
        requests = RequestQueueService.get_requests()
        index = RequestQueueService.find_request(requests, email, request_type)
        if index is None:
            raise RequestNotFound(email=email)

        removed = requests.pop(index)
        RequestQueueService.save_requests(requests)

        logger.info("Request removed from queue", request_type=request_type)
        return removed

    @staticmethod
    def remove_deletion_request(email: str) -> Dict[str, Any]:
        return RequestQueueService.remove_request(email, REQUEST_DELETE)

    @staticmethod
    @transaction.atomic
    def process_user_deletion(email: str) -> Optional[Dict[str, Any]]:
        """
        Erase the account registered with ``email`` and drop its erasure request.

        Returns:
            The removed queue entry, or None if the account had none.

        Raises:
            UserNotFound: the account no longer exists; the queue is untouched
        """
        email = sanitize_email(email)
        user = get_user_by_email(email)
        if user is None:
            raise UserNotFound(email=email)

        delete_user(user)

        try:
            return RequestQueueService.remove_deletion_request(email)
        except RequestNotFound:
            logger.warning("Erased user had no queued deletion request")
            return None


def delete_user(user):
    """
    Erase a user account (instance or integer id).

    pre_user_erasure receivers run first so related data can be purged.

    Raises:
        UserNotFound: the identity cannot be resolved
    """
    resolved = resolve_user(user)
    if resolved is None:
        raise UserNotFound(
            message='An invalid user was provided for deletion. '
                    'It must either be a user object or a user ID.'
        )

    user_id = resolved.pk
    pre_user_erasure.send(sender=resolved.__class__, user=resolved)
    resolved.delete()

    logger.info("User account erased", user_id=str(user_id))
    return True


def _content_model_has_rows(model_label: str, lookup: str, user) -> bool:
    model = apps.get_model(model_label)
    value = user.email if lookup.endswith('email') else user
    if lookup.endswith('email') and not value:
        return False
    return model._default_manager.filter(**{lookup: value}).exists()


def user_has_content(user) -> Optional[bool]:
    """
    Whether a user authored content that erasure would affect.

    Checks every model in GDPR_USER_CONTENT_MODELS, then asks
    has_user_content receivers. Returns None when the identity cannot be
    resolved.
    """
    resolved = resolve_user(user)
    if resolved is None:
        return None

    for model_label, lookup in getattr(settings, 'GDPR_USER_CONTENT_MODELS', []):
        if _content_model_has_rows(model_label, lookup, resolved):
            return True

    responses = has_user_content.send(sender=resolved.__class__, user=resolved)
    return any(bool(response) for _receiver, response in responses)

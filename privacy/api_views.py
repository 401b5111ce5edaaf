"""
Read-only JSON API over the GDPR admin data.

Staff only; the same data the admin pages render.
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema

from core.exceptions import ProblemDetailException
from core.options import OptionStore

from .constants import (
    OPTION_BANNER_CONTENT,
    OPTION_POPUP_CONTENT,
    OPTION_PRIVACY_EXCERPT,
    REQUEST_TYPE_LABELS,
)
from .serializers import CookieSettingsSerializer, RequestQueueSerializer
from .services import RequestQueueService

logger = logging.getLogger(__name__)


def _request_payload(entry):
    payload = {
        'email': entry.get('email', ''),
        'date': entry.get('date', ''),
        'type': entry.get('type', ''),
    }
    if entry.get('data'):
        payload['data'] = entry['data']
    return payload


class RequestQueueView(APIView):
    """
    Queued data subject requests grouped by type, with per-type counts.
    """
    permission_classes = [IsAdminUser]
    throttle_classes = [UserRateThrottle]

    @extend_schema(
        operation_id='gdpr_requests_list',
        summary='List data subject requests',
        description='Requests grouped by type (access, rectify, portability, complaint, delete).',
        parameters=[
            OpenApiParameter(
                name='type',
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=list(REQUEST_TYPE_LABELS),
                description='Only return requests of this type',
            ),
        ],
        responses={
            200: RequestQueueSerializer,
            400: OpenApiResponse(description='Unknown request type'),
            403: OpenApiResponse(description='Staff access required'),
        },
        tags=['GDPR'],
    )
    def get(self, request):
        request_type = request.query_params.get('type')
        if request_type is not None and request_type not in REQUEST_TYPE_LABELS:
            raise ProblemDetailException(
                title='Invalid Request Type',
                detail=f"Unknown request type '{request_type}'.",
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        groups = RequestQueueService.group_requests(RequestQueueService.get_requests())
        tabs = RequestQueueService.request_tabs(groups)

        if request_type is not None:
            groups = {request_type: groups[request_type]}
            tabs = {request_type: tabs[request_type]}

        payload = {
            'tabs': tabs,
            'requests': {
                key: [_request_payload(entry) for entry in entries]
                for key, entries in groups.items()
            },
        }
        return Response(RequestQueueSerializer(payload).data)


class CookieSettingsView(APIView):
    """
    Stored cookie banner settings.
    """
    permission_classes = [IsAdminUser]
    throttle_classes = [UserRateThrottle]

    @extend_schema(
        operation_id='gdpr_cookie_settings',
        summary='Cookie banner settings',
        responses={
            200: CookieSettingsSerializer,
            403: OpenApiResponse(description='Staff access required'),
        },
        tags=['GDPR'],
    )
    def get(self, request):
        popup_content = OptionStore.get(OPTION_POPUP_CONTENT, {})
        payload = {
            OPTION_BANNER_CONTENT: OptionStore.get(OPTION_BANNER_CONTENT, '') or '',
            OPTION_PRIVACY_EXCERPT: OptionStore.get(OPTION_PRIVACY_EXCERPT, '') or '',
            OPTION_POPUP_CONTENT: popup_content if isinstance(popup_content, dict) else {},
        }
        return Response(CookieSettingsSerializer(payload).data)

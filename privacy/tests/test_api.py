"""
Tests for the read-only GDPR admin API.
"""

import pytest
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from core.options import OptionStore
from privacy.constants import OPTION_BANNER_CONTENT, OPTION_POPUP_CONTENT, OPTION_REQUESTS

from .factories import DataRequestFactory, StaffUserFactory, UserFactory


@pytest.mark.api
class RequestQueueAPITest(TestCase):
    """Test GET /api/v1/gdpr/requests/."""

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=StaffUserFactory())
        self.url = reverse('privacy-api:requests')

    def test_grouped_requests_with_counts(self):
        OptionStore.set(OPTION_REQUESTS, [
            DataRequestFactory(email='a@x.com', type='delete'),
            DataRequestFactory(email='b@x.com', type='rectify', data='Fix my name.'),
        ])

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['tabs']['delete'], {'name': 'Erasure', 'count': 1})
        self.assertEqual(response.data['tabs']['access']['count'], 0)
        self.assertEqual(response.data['requests']['delete'][0]['email'], 'a@x.com')
        self.assertNotIn('data', response.data['requests']['delete'][0])
        self.assertEqual(response.data['requests']['rectify'][0]['data'], 'Fix my name.')
        self.assertEqual(response.data['requests']['portability'], [])

    def test_filter_by_type(self):
        OptionStore.set(OPTION_REQUESTS, [DataRequestFactory(type='access')])

        response = self.client.get(self.url, {'type': 'access'})

        self.assertEqual(list(response.data['tabs']), ['access'])
        self.assertEqual(len(response.data['requests']['access']), 1)

    def test_unknown_type_is_problem_json(self):
        response = self.client.get(self.url, {'type': 'bogus'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response['Content-Type'], 'application/problem+json')
        self.assertEqual(response.data['title'], 'Invalid Request Type')
        self.assertEqual(response.data['status'], 400)
        self.assertEqual(response.data['detail'], "Unknown request type 'bogus'.")
        self.assertNotIn('invalid_params', response.data)

    def test_non_staff_forbidden(self):
        self.client.force_authenticate(user=UserFactory())
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response['Content-Type'], 'application/problem+json')
        self.assertEqual(response.data['title'], 'Forbidden')


@pytest.mark.api
class CookieSettingsAPITest(TestCase):
    """Test GET /api/v1/gdpr/cookie-settings/."""

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=StaffUserFactory())
        self.url = reverse('privacy-api:cookie_settings')

    def test_empty_settings(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['gdpr_cookie_banner_content'], '')
        self.assertEqual(response.data['gdpr_cookie_popup_content'], {})

    def test_stored_settings(self):
        OptionStore.set(OPTION_BANNER_CONTENT, 'We use cookies')
        OptionStore.set(OPTION_POPUP_CONTENT, {
            'analytics': {
                'name': 'Analytics',
                'how_we_use': '<p>Stats</p>',
                'cookies_used': '_ga',
            },
        })

        response = self.client.get(self.url)

        self.assertEqual(response.data['gdpr_cookie_banner_content'], 'We use cookies')
        category = response.data['gdpr_cookie_popup_content']['analytics']
        self.assertEqual(category['name'], 'Analytics')
        self.assertEqual(category['hosts'], {})

    def test_anonymous_forbidden(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(self.url)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

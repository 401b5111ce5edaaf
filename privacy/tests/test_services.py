"""
Unit tests for the request queue service.

Tests:
- Grouping and tab counts
- Adding, removing and processing erasure requests
- User erasure and content checks
"""

import pytest
from django.contrib.admin.models import ADDITION, LogEntry
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.test import TestCase, override_settings
from django.utils import dateformat, timezone

from core.options import OptionStore
from privacy.constants import OPTION_REQUESTS
from privacy.exceptions import DuplicateRequest, RequestNotFound, UserNotFound
from privacy.services import (
    RequestQueueService,
    delete_user,
    get_user_by_email,
    user_has_content,
)
from privacy.signals import has_user_content, pre_user_erasure

from .factories import DataRequestFactory, UserFactory

User = get_user_model()


@pytest.mark.unit
class GroupRequestsTest(TestCase):
    """Test grouping requests into tabs."""

    def test_empty_list_gives_zero_counts(self):
        groups = RequestQueueService.group_requests([])
        tabs = RequestQueueService.request_tabs(groups)

        self.assertEqual(list(groups), ['access', 'rectify', 'portability', 'complaint', 'delete'])
        self.assertTrue(all(entries == [] for entries in groups.values()))
        self.assertTrue(all(tab['count'] == 0 for tab in tabs.values()))

    def test_tab_labels(self):
        tabs = RequestQueueService.request_tabs(RequestQueueService.group_requests([]))
        self.assertEqual(
            [str(tab['name']) for tab in tabs.values()],
            ['Access Data', 'Rectify Data', 'Data Portability', 'Complaint', 'Erasure'],
        )

    def test_requests_are_bucketed_by_type(self):
        requests = [
            DataRequestFactory(type='delete'),
            DataRequestFactory(type='access'),
            DataRequestFactory(type='delete'),
            DataRequestFactory(type='complaint', data='I want to complain.'),
        ]

        groups = RequestQueueService.group_requests(requests)
        tabs = RequestQueueService.request_tabs(groups)

        self.assertEqual(len(groups['delete']), 2)
        self.assertEqual(tabs['delete']['count'], 2)
        self.assertEqual(tabs['access']['count'], 1)
        self.assertEqual(tabs['complaint']['count'], 1)
        self.assertEqual(tabs['rectify']['count'], 0)
        self.assertEqual(groups['complaint'][0]['data'], 'I want to complain.')

    def test_unknown_type_is_ignored(self):
        groups = RequestQueueService.group_requests([DataRequestFactory(type='bogus')])
        self.assertTrue(all(entries == [] for entries in groups.values()))

    def test_get_requests_skips_malformed_storage(self):
        OptionStore.set(OPTION_REQUESTS, 'not a list')
        self.assertEqual(RequestQueueService.get_requests(), [])

        OptionStore.set(OPTION_REQUESTS, [DataRequestFactory(), 'junk', 3])
        self.assertEqual(len(RequestQueueService.get_requests()), 1)


@pytest.mark.unit
class AddDeletionRequestTest(TestCase):
    """Test queueing erasure requests."""

    def setUp(self):
        self.user = UserFactory(email='a@x.com')

    def test_add_request_for_existing_user(self):
        request = RequestQueueService.add_deletion_request('a@x.com')

        stored = OptionStore.get(OPTION_REQUESTS)
        self.assertEqual(stored, [request])
        self.assertEqual(request['email'], 'a@x.com')
        self.assertEqual(request['type'], 'delete')
        self.assertEqual(request['date'], dateformat.format(timezone.localtime(), 'F j, Y'))

    def test_unknown_user_raises_and_leaves_list(self):
        with self.assertRaises(UserNotFound) as ctx:
            RequestQueueService.add_deletion_request('nobody@x.com')

        self.assertEqual(ctx.exception.code, 'invalid-user')
        self.assertEqual(ctx.exception.message, 'User not found.')
        self.assertEqual(OptionStore.get(OPTION_REQUESTS, []), [])

    def test_invalid_email_is_user_not_found(self):
        with self.assertRaises(UserNotFound):
            RequestQueueService.add_deletion_request('not-an-email')

    def test_duplicate_request_is_rejected(self):
        RequestQueueService.add_deletion_request('a@x.com')

        with self.assertRaises(DuplicateRequest) as ctx:
            RequestQueueService.add_deletion_request('a@x.com')

        self.assertEqual(ctx.exception.message, 'User already placed a deletion request.')
        self.assertEqual(len(OptionStore.get(OPTION_REQUESTS)), 1)

    def test_duplicate_check_ignores_case(self):
        RequestQueueService.add_deletion_request('a@x.com')

        with self.assertRaises(DuplicateRequest):
            RequestQueueService.add_deletion_request('A@X.com')

    def test_existing_queue_rejects_duplicate_and_accepts_new_email(self):
        OptionStore.set(OPTION_REQUESTS, [{'email': 'a@x.com', 'type': 'delete'}])
        UserFactory(email='b@x.com')

        with self.assertRaises(DuplicateRequest):
            RequestQueueService.add_deletion_request('a@x.com')
        self.assertEqual(len(OptionStore.get(OPTION_REQUESTS)), 1)

        RequestQueueService.add_deletion_request('b@x.com')

        stored = OptionStore.get(OPTION_REQUESTS)
        self.assertEqual(len(stored), 2)
        self.assertEqual(stored[1]['email'], 'b@x.com')
        self.assertEqual(stored[1]['type'], 'delete')
        self.assertEqual(stored[1]['date'], dateformat.format(timezone.localtime(), 'F j, Y'))

    def test_other_request_types_do_not_count_as_duplicates(self):
        OptionStore.set(OPTION_REQUESTS, [DataRequestFactory(email='a@x.com', type='access')])

        RequestQueueService.add_deletion_request('a@x.com')

        self.assertEqual(len(OptionStore.get(OPTION_REQUESTS)), 2)


@pytest.mark.unit
class RemoveDeletionRequestTest(TestCase):
    """Test removing erasure requests."""

    def test_first_match_is_removed_and_order_kept(self):
        """a@x.com and b@x.com queued; removing a@x.com keeps b@x.com."""
        UserFactory(email='a@x.com')
        UserFactory(email='b@x.com')
        RequestQueueService.add_deletion_request('a@x.com')
        RequestQueueService.add_deletion_request('b@x.com')

        RequestQueueService.remove_deletion_request('a@x.com')

        stored = OptionStore.get(OPTION_REQUESTS)
        self.assertEqual([r['email'] for r in stored], ['b@x.com'])

    def test_matches_on_type(self):
        access = DataRequestFactory(email='a@x.com', type='access')
        delete = DataRequestFactory(email='a@x.com', type='delete')
        OptionStore.set(OPTION_REQUESTS, [access, delete])

        removed = RequestQueueService.remove_deletion_request('a@x.com')

        self.assertEqual(removed, delete)
        self.assertEqual(OptionStore.get(OPTION_REQUESTS), [access])

    def test_missing_request_raises_and_leaves_list(self):
        other = DataRequestFactory(email='b@x.com')
        OptionStore.set(OPTION_REQUESTS, [other])

        with self.assertRaises(RequestNotFound) as ctx:
            RequestQueueService.remove_deletion_request('a@x.com')

        self.assertEqual(ctx.exception.message, 'No deletion request found for a@x.com.')
        self.assertEqual(OptionStore.get(OPTION_REQUESTS), [other])

    def test_empty_queue_raises(self):
        with self.assertRaises(RequestNotFound):
            RequestQueueService.remove_deletion_request('a@x.com')


@pytest.mark.unit
class ProcessUserDeletionTest(TestCase):
    """Test erasing a user and dropping the queue entry."""

    def setUp(self):
        self.user = UserFactory(email='a@x.com')
        UserFactory(email='b@x.com')
        RequestQueueService.add_deletion_request('a@x.com')
        RequestQueueService.add_deletion_request('b@x.com')

    def test_user_deleted_and_entry_removed(self):
        removed = RequestQueueService.process_user_deletion('a@x.com')

        self.assertEqual(removed['email'], 'a@x.com')
        self.assertFalse(User.objects.filter(email='a@x.com').exists())
        self.assertEqual([r['email'] for r in OptionStore.get(OPTION_REQUESTS)], ['b@x.com'])

    def test_missing_user_leaves_queue_untouched(self):
        self.user.delete()
        before = OptionStore.get(OPTION_REQUESTS)

        with self.assertRaises(UserNotFound):
            RequestQueueService.process_user_deletion('a@x.com')

        self.assertEqual(OptionStore.get(OPTION_REQUESTS), before)

    def test_user_without_queue_entry_is_still_deleted(self):
        UserFactory(email='c@x.com')

        removed = RequestQueueService.process_user_deletion('c@x.com')

        self.assertIsNone(removed)
        self.assertFalse(User.objects.filter(email='c@x.com').exists())
        self.assertEqual(len(OptionStore.get(OPTION_REQUESTS)), 2)

    def test_pre_user_erasure_receivers_run_before_delete(self):
        seen = []

        def receiver(sender, user, **kwargs):
            seen.append((user.email, User.objects.filter(pk=user.pk).exists()))

        pre_user_erasure.connect(receiver)
        try:
            RequestQueueService.process_user_deletion('a@x.com')
        finally:
            pre_user_erasure.disconnect(receiver)

        self.assertEqual(seen, [('a@x.com', True)])


@pytest.mark.unit
class DeleteUserTest(TestCase):
    """Test delete_user identity handling."""

    def test_delete_by_instance(self):
        user = UserFactory()
        self.assertTrue(delete_user(user))
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_delete_by_id(self):
        user = UserFactory()
        self.assertTrue(delete_user(user.pk))
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_invalid_identity_raises(self):
        for value in (None, 'a@x.com', 999999, True):
            with self.subTest(value=value):
                with self.assertRaises(UserNotFound):
                    delete_user(value)


@pytest.mark.unit
class UserHasContentTest(TestCase):
    """Test user_has_content."""

    def setUp(self):
        self.user = UserFactory()

    def test_unresolvable_identity_returns_none(self):
        self.assertIsNone(user_has_content('someone'))
        self.assertIsNone(user_has_content(999999))
        self.assertIsNone(user_has_content(None))

    def test_user_without_content(self):
        self.assertFalse(user_has_content(self.user))
        self.assertFalse(user_has_content(self.user.pk))

    @override_settings(GDPR_USER_CONTENT_MODELS=[('admin.LogEntry', 'user')])
    def test_configured_content_model(self):
        self.assertFalse(user_has_content(self.user))

        LogEntry.objects.create(
            user=self.user,
            content_type=ContentType.objects.get_for_model(User),
            object_id=str(self.user.pk),
            object_repr=str(self.user),
            action_flag=ADDITION,
        )

        self.assertTrue(user_has_content(self.user))

    @override_settings(GDPR_USER_CONTENT_MODELS=[('auth.User', 'email')])
    def test_email_lookup_matches_user_email(self):
        self.assertTrue(user_has_content(self.user))

    def test_signal_receiver_can_report_content(self):
        def receiver(sender, user, **kwargs):
            return user.pk == self.user.pk

        has_user_content.connect(receiver)
        try:
            self.assertTrue(user_has_content(self.user))
            self.assertFalse(user_has_content(UserFactory()))
        finally:
            has_user_content.disconnect(receiver)


@pytest.mark.unit
class GetUserByEmailTest(TestCase):

    def test_lookup_is_case_insensitive(self):
        user = UserFactory(email='Mixed@Example.com')
        self.assertEqual(get_user_by_email('mixed@example.com'), user)

    def test_invalid_email_returns_none(self):
        self.assertIsNone(get_user_by_email(''))
        self.assertIsNone(get_user_by_email('nope'))

"""
Integration tests for the User admin and the last seen middleware.
"""

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone

from accounts.models import User
from tests.utils.factories import DeletedUserFactory, UserFactory


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_login(admin_user)
    return api_client


@pytest.mark.integration
class TestUserAdmin:
    """Test cases for the User admin."""

    def test_changelist(self, admin_client):
        UserFactory(username='visible')

        response = admin_client.get(reverse('admin:accounts_user_changelist'))

        assert response.status_code == 200
        assert b'visible' in response.content

    def test_regular_user_is_refused(self, logged_in_client):
        response = logged_in_client.get(reverse('admin:accounts_user_changelist'))

        assert response.status_code == 302

    def test_deleted_users_hidden_by_default(self, admin_client):
        UserFactory(username='alive')
        DeletedUserFactory(username='dead')

        response = admin_client.get(reverse('admin:accounts_user_changelist'))

        usernames = {user.username for user in response.context['cl'].result_list}
        assert usernames == {'admin', 'alive'}

    def test_undelete_needs_deleted_users_listed(self, admin_client):
        """Test that actions only reach users the current filter shows."""
        user = DeletedUserFactory(username='returning')

        admin_client.post(reverse('admin:accounts_user_changelist'), {
            'action': 'undelete_users',
            '_selected_action': [str(user.pk)],
        })

        assert User.objects.get(pk=user.pk).is_deleted is True

    @pytest.mark.parametrize('option, expected', [
        ('0', {'admin', 'alive'}),
        ('1', {'admin', 'alive', 'dead'}),
        ('2', {'dead'}),
    ])
    def test_deletion_state_filter(self, admin_client, option, expected):
        UserFactory(username='alive')
        DeletedUserFactory(username='dead')

        response = admin_client.get(reverse('admin:accounts_user_changelist'), {'deleted': option})

        usernames = {user.username for user in response.context['cl'].result_list}
        assert usernames == expected

    def test_soft_delete_action(self, admin_client, admin_user):
        user = UserFactory(username='spammer')

        response = admin_client.post(reverse('admin:accounts_user_changelist'), {
            'action': 'soft_delete_users',
            '_selected_action': [str(user.pk)],
        })

        assert response.status_code == 302
        user = User.objects.get(pk=user.pk)
        assert user.is_deleted is True
        assert user.deleter == admin_user
        assert user.deleter_comment == 'Deleted from admin.'

    def test_undelete_action(self, admin_client):
        user = DeletedUserFactory(username='returning')

        admin_client.post(reverse('admin:accounts_user_changelist') + '?deleted=2', {
            'action': 'undelete_users',
            '_selected_action': [str(user.pk)],
        })

        assert User.objects.get(pk=user.pk).is_deleted is False


@pytest.mark.integration
class TestLastSeenMiddleware:
    """Test cases for LastSeenMiddleware."""

    def test_stale_last_seen_is_refreshed(self, logged_in_client, authenticated_user):
        stale = timezone.now() - timedelta(hours=1)
        User.objects.filter(pk=authenticated_user.pk).update(time_stamp_last_seen=stale)

        logged_in_client.get(reverse('home:index'))

        assert User.objects.get(pk=authenticated_user.pk).time_stamp_last_seen > stale

    def test_recent_last_seen_is_left_alone(self, logged_in_client, authenticated_user):
        recent = timezone.now() - timedelta(seconds=10)
        User.objects.filter(pk=authenticated_user.pk).update(time_stamp_last_seen=recent)

        logged_in_client.get(reverse('home:index'))

        assert User.objects.get(pk=authenticated_user.pk).time_stamp_last_seen == recent

    def test_last_seen_is_not_a_modification(self, logged_in_client, authenticated_user):
        User.objects.filter(pk=authenticated_user.pk).update(time_stamp_last_seen=None)

        logged_in_client.get(reverse('home:index'))

        user = User.objects.get(pk=authenticated_user.pk)
        assert user.last_seen is not None
        assert user.modified is None

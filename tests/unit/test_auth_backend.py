"""
Unit tests for the username or email authentication backend.
"""

from unittest.mock import patch

import pytest
from django.test import RequestFactory

from accounts.backends import UsernameOrEmailBackend
from accounts.models import User
from tests.utils.factories import DEFAULT_PASSWORD, DeletedUserFactory, UserFactory


@pytest.fixture
def backend():
    return UsernameOrEmailBackend()


@pytest.fixture
def request_():
    return RequestFactory().post('/account/login/')


@pytest.mark.unit
class TestUsernameOrEmailBackend:
    """Test cases for UsernameOrEmailBackend."""

    def test_authenticate_with_username(self, backend, request_, db):
        user = UserFactory(username='jdoe')

        assert backend.authenticate(request_, username='jdoe', password=DEFAULT_PASSWORD) == user

    def test_authenticate_with_email(self, backend, request_, db):
        user = UserFactory(email='jdoe@example.com')

        assert backend.authenticate(request_, username='JDOE@example.com', password=DEFAULT_PASSWORD) == user

    def test_wrong_password(self, backend, request_, db):
        UserFactory(username='jdoe')

        assert backend.authenticate(request_, username='jdoe', password='wrong') is None

    def test_unknown_user_still_hashes_password(self, backend, request_, db):
        """Test that unknown accounts cost a password hash like known ones."""
        with patch.object(User, 'set_password', autospec=True) as set_password:
            result = backend.authenticate(request_, username='nobody', password='whatever')

        assert result is None
        set_password.assert_called_once()

    def test_deleted_user_rejected(self, backend, request_, db):
        DeletedUserFactory(username='gone')

        assert backend.authenticate(request_, username='gone', password=DEFAULT_PASSWORD) is None

    def test_missing_credentials(self, backend, request_, db):
        assert backend.authenticate(request_, username=None, password='x') is None
        assert backend.authenticate(request_, username='jdoe', password=None) is None

    def test_get_user(self, backend, db):
        user = UserFactory()

        assert backend.get_user(user.pk) == user
        assert backend.get_user(str(user.pk)) == user

    def test_get_user_rejects_deleted_and_malformed(self, backend, db):
        user = DeletedUserFactory()

        assert backend.get_user(user.pk) is None
        assert backend.get_user('garbage') is None

"""
Pytest configuration and shared fixtures.
This file is automatically loaded by pytest.
"""

import pytest
import responses
from django.core.cache import caches

# Import factories
from tests.utils.factories import DEFAULT_PASSWORD, UserFactory


class AlertRecorder:
    """Alert handler that keeps every alert it is given"""

    def __init__(self):
        self.alerts = []

    def __call__(self, alert):
        self.alerts.append(alert)


@pytest.fixture(autouse=True)
def fast_password_hasher(settings):
    """
    Hashing with the default hasher is slow. Tests don't need it.
    """
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(autouse=True)
def translation_cache(settings):
    """
    Keep the translation cache in memory and empty for every test.
    """
    settings.CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'default',
        },
        'translations': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'translations',
            'TIMEOUT': None,
        },
    }
    settings.TRANSLATIONS_URL = 'https://example.com/translations/'
    cache = caches['translations']
    cache.clear()
    yield cache
    cache.clear()


@pytest.fixture
def api_client():
    """
    Django test client for making requests.
    """
    from django.test import Client
    return Client()


@pytest.fixture
def csrf_client():
    """
    Django test client that enforces CSRF checks like a browser would.
    """
    from django.test import Client
    return Client(enforce_csrf_checks=True)


@pytest.fixture
def authenticated_user(db):
    """
    Create a regular user. Its password is DEFAULT_PASSWORD.
    """
    return UserFactory(
        username='testuser',
        email='testuser@example.com',
        first_name='Test',
        last_name='User',
        display_name='Tester',
    )


@pytest.fixture
def logged_in_client(api_client, authenticated_user):
    """
    Test client with authenticated_user logged in.
    """
    api_client.force_login(authenticated_user)
    return api_client


@pytest.fixture
def admin_user(db):
    """
    Create an admin user.
    """
    return UserFactory(username='admin', roles=['admin', 'user'])


@pytest.fixture
def password():
    return DEFAULT_PASSWORD


@pytest.fixture
def alert_recorder():
    """
    Alert handler collecting alerts for assertions.
    """
    return AlertRecorder()


@pytest.fixture
def mock_translations_api():
    """
    Mock the translation catalogue server using responses library.
    Nothing is registered; see tests.utils.mocks.setup_translation_mocks.
    """
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Automatically enable database access for all tests.
    """
    pass

# apps/core/tests/test_credential_store.py
"""
Tests for CredentialStore
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import OperationalError
from django.utils import timezone

from apps.core.exceptions import EmailTakenError, StoreUnavailableError
from apps.core.hashers import hash_password
from apps.core.models import Role, User, UserSession
from apps.core.services import CredentialStore


pytestmark = pytest.mark.django_db


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore()


class TestUsers:

    def test_create_user_keeps_email_case(self, store):
        user = store.create_user('Mixed.Case@Test.com', 'Mixed', hash_password('Secret123!'), Role.USER)

        assert store.find_by_email('Mixed.Case@Test.com') == user
        assert store.find_by_email('mixed.case@test.com') is None

    def test_unique_email_enforced_by_store(self, store, active_user):
        """A lost race past the existence check still fails as EmailTaken."""
        with pytest.raises(EmailTakenError):
            store.create_user(active_user.email, 'Other', hash_password('Other123!'), Role.USER)

        assert User.objects.filter(email=active_user.email).count() == 1

    def test_find_by_id_with_malformed_id(self, store):
        assert store.find_by_id('not-a-uuid') is None

    def test_database_outage_is_store_unavailable(self, store):
        with patch.object(User.objects, 'filter', side_effect=OperationalError('connection refused')):
            with pytest.raises(StoreUnavailableError) as exc_info:
                store.find_by_email('a@b.com')

        assert exc_info.value.status_code == 503
        assert 'connection refused' not in exc_info.value.message


class TestSessions:

    def test_rotate_replaces_token_in_place(self, store, active_user):
        session = store.add_session(active_user, 'old-token', ip_address='10.0.0.1')

        assert store.rotate_session(active_user.id, 'old-token', 'new-token')

        session.refresh_from_db()
        assert session.refresh_token == 'new-token'
        assert UserSession.objects.filter(user=active_user).count() == 1

    def test_rotate_is_compare_and_set(self, store, active_user):
        """Of two rotations from the same value only the first applies."""
        store.add_session(active_user, 'old-token')

        assert store.rotate_session(active_user.id, 'old-token', 'winner') is True
        assert store.rotate_session(active_user.id, 'old-token', 'loser') is False

        assert list(
            UserSession.objects.filter(user=active_user).values_list('refresh_token', flat=True)
        ) == ['winner']

    def test_rotate_other_users_session(self, store, active_user, admin_user):
        store.add_session(active_user, 'old-token')

        assert store.rotate_session(admin_user.id, 'old-token', 'new-token') is False

    def test_sessions_deleted_with_user(self, store, active_user):
        store.add_session(active_user, 'token-1')
        store.add_session(active_user, 'token-2')

        active_user.delete()

        assert not UserSession.objects.exists()

    def test_delete_all_sessions(self, store, active_user, admin_user):
        store.add_session(active_user, 'token-1')
        store.add_session(active_user, 'token-2')
        store.add_session(admin_user, 'token-3')

        assert store.delete_all_sessions(active_user) == 2
        assert UserSession.objects.get().refresh_token == 'token-3'


class TestResetToken:

    def test_consume_once(self, store, active_user):
        store.set_reset_token(active_user, 'reset-token', timezone.now() + timedelta(hours=1))

        assert store.consume_reset_token(active_user.id, 'reset-token') is True
        assert store.consume_reset_token(active_user.id, 'reset-token') is False

        active_user.refresh_from_db()
        assert active_user.reset_token is None
        assert active_user.reset_token_expires_at is None

    def test_expired_token_not_consumed(self, store, active_user):
        store.set_reset_token(active_user, 'reset-token', timezone.now() - timedelta(seconds=1))

        assert store.consume_reset_token(active_user.id, 'reset-token') is False

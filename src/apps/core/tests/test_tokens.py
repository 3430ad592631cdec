# apps/core/tests/test_tokens.py
"""
Tests for the token issuer and signing-key startup check
"""

from datetime import timedelta

import jwt
import pytest
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from apps.core.authentication import JWTTokenGenerator, TokenKind, check_signing_key
from apps.core.exceptions import InvalidTokenError


pytestmark = pytest.mark.django_db


class TestIssueAndVerify:
    """Tests for JWTTokenGenerator.issue / verify."""

    def test_access_token_claims(self, active_user):
        token = JWTTokenGenerator.generate_access_token(active_user)

        payload = JWTTokenGenerator.verify(token, TokenKind.ACCESS)

        assert payload['sub'] == str(active_user.id)
        assert payload['email'] == 'a@b.com'
        assert payload['role'] == 'user'
        assert payload['type'] == 'access'
        assert payload['iss'] == settings.JWT_SETTINGS['ISSUER']
        assert payload['exp'] - payload['iat'] == 15 * 60

    def test_refresh_token_has_no_role(self, active_user):
        payload = JWTTokenGenerator.verify(
            JWTTokenGenerator.generate_refresh_token(active_user),
            TokenKind.REFRESH
        )

        assert 'role' not in payload
        assert payload['exp'] - payload['iat'] == 30 * 24 * 3600

    def test_tokens_issued_together_differ(self, active_user):
        """jti keeps same-second tokens distinct."""
        first = JWTTokenGenerator.generate_refresh_token(active_user)
        second = JWTTokenGenerator.generate_refresh_token(active_user)

        assert first != second

    def test_expired_token(self, active_user):
        token = JWTTokenGenerator.issue(
            {'sub': str(active_user.id)}, TokenKind.ACCESS, timedelta(seconds=-5)
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify(token, TokenKind.ACCESS)

        assert exc_info.value.code == 'token_expired'

    def test_tampered_signature(self, active_user):
        token = JWTTokenGenerator.generate_access_token(active_user)
        header, payload, signature = token.split('.')
        forged = f"{header}.{payload}.{signature[::-1]}"

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify(forged, TokenKind.ACCESS)

        assert exc_info.value.code == 'token_invalid'

    def test_token_signed_with_another_key(self, active_user):
        token = jwt.encode(
            {'sub': str(active_user.id), 'type': 'access', 'iat': 0, 'exp': 9999999999,
             'iss': settings.JWT_SETTINGS['ISSUER']},
            'some-other-key',
            algorithm='HS256'
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify(token, TokenKind.ACCESS)

        assert exc_info.value.code == 'token_invalid'

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify('not.a.jwt', TokenKind.REFRESH)

        assert exc_info.value.code == 'token_invalid'

    @pytest.mark.parametrize('expected_kind', [TokenKind.REFRESH, TokenKind.ACCESS])
    def test_reset_token_rejected_for_other_kinds(self, active_user, expected_kind):
        token = JWTTokenGenerator.generate_reset_token(active_user)

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify(token, expected_kind)

        assert exc_info.value.code == 'token_kind_mismatch'

    def test_refresh_token_rejected_as_reset(self, active_user):
        token = JWTTokenGenerator.generate_refresh_token(active_user)

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTTokenGenerator.verify(token, TokenKind.RESET)

        assert exc_info.value.code == 'token_kind_mismatch'


class TestSigningKeyCheck:

    def test_configured_key_passes(self):
        check_signing_key()

    @pytest.mark.parametrize('key', ['', None])
    def test_missing_key_refuses_to_start(self, key):
        with override_settings(JWT_SETTINGS={**settings.JWT_SETTINGS, 'SIGNING_KEY': key}):
            with pytest.raises(ImproperlyConfigured):
                check_signing_key()

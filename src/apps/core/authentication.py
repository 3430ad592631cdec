# apps/core/authentication.py
"""
Token issuing and DRF authentication.

Three token kinds share one HS256 signing key:
    access  - authorizes API calls
    refresh - mints new access tokens, rotated on each use
    reset   - authorizes a single password change
"""

import enum
import logging
import uuid
from datetime import timedelta
from typing import Dict, Optional, Tuple

import jwt
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.utils import timezone
from rest_framework import authentication, exceptions

from apps.core.exceptions import InvalidTokenError
from apps.core.models import User

logger = logging.getLogger(__name__)


class TokenKind(str, enum.Enum):
    ACCESS = 'access'
    REFRESH = 'refresh'
    RESET = 'reset'


def check_signing_key() -> None:
    """Refuse to run without an explicit signing key."""
    jwt_settings = getattr(settings, 'JWT_SETTINGS', {})
    if not jwt_settings.get('SIGNING_KEY'):
        raise ImproperlyConfigured(
            "JWT_SETTINGS['SIGNING_KEY'] is empty. Set the JWT_SECRET_KEY environment variable."
        )


class JWTTokenGenerator:
    """
    Generate and validate JWT tokens.
    """

    @staticmethod
    def issue(claims: Dict, kind: TokenKind, ttl: timedelta) -> str:
        """
        Sign a token.

        Args:
            claims: Subject and custom claims; must contain 'sub'
            kind: Token kind, stored in the 'type' claim
            ttl: Lifetime from now

        Returns:
            Encoded JWT
        """
        jwt_settings = settings.JWT_SETTINGS
        now = timezone.now()

        payload = dict(claims)
        payload.update({
            'type': TokenKind(kind).value,
            'iat': now,
            'exp': now + ttl,
            'iss': jwt_settings['ISSUER'],
            'jti': uuid.uuid4().hex,
        })

        return jwt.encode(
            payload,
            jwt_settings['SIGNING_KEY'],
            algorithm=jwt_settings['ALGORITHM']
        )

    @staticmethod
    def verify(token: str, expected_kind: TokenKind) -> Dict:
        """
        Decode a token and check its kind.

        Raises:
            InvalidTokenError: code token_expired, token_invalid or
                token_kind_mismatch
        """
        jwt_settings = settings.JWT_SETTINGS

        try:
            payload = jwt.decode(
                token,
                jwt_settings['SIGNING_KEY'],
                algorithms=[jwt_settings['ALGORITHM']],
                issuer=jwt_settings['ISSUER'],
                options={'require': ['exp', 'iat', 'sub', 'iss', 'type']}
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired", InvalidTokenError.EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise InvalidTokenError("Invalid token", InvalidTokenError.INVALID)

        if payload.get('type') != TokenKind(expected_kind).value:
            logger.warning(
                f"Token kind mismatch: expected {TokenKind(expected_kind).value}, "
                f"got {payload.get('type')}"
            )
            raise InvalidTokenError("Invalid token type", InvalidTokenError.KIND_MISMATCH)

        return payload

    @classmethod
    def generate_access_token(cls, user: User, ttl: timedelta = None) -> str:
        """Access token carrying id, email and role"""
        ttl = ttl or settings.JWT_SETTINGS['ACCESS_TOKEN_LIFETIME']
        return cls.issue(
            {'sub': str(user.id), 'email': user.email, 'role': user.role},
            TokenKind.ACCESS,
            ttl
        )

    @classmethod
    def generate_refresh_token(cls, user: User) -> str:
        return cls.issue(
            {'sub': str(user.id), 'email': user.email},
            TokenKind.REFRESH,
            settings.JWT_SETTINGS['REFRESH_TOKEN_LIFETIME']
        )

    @classmethod
    def generate_reset_token(cls, user: User) -> str:
        return cls.issue(
            {'sub': str(user.id), 'email': user.email},
            TokenKind.RESET,
            settings.JWT_SETTINGS['RESET_TOKEN_LIFETIME']
        )


class JWTAuthentication(authentication.BaseAuthentication):
    """
    JWT Authentication for Django REST Framework.

    Accepts only access tokens from the Authorization header and returns
    the stored user. Refresh and reset tokens are rejected.
    """

    keyword = 'Bearer'

    def authenticate(self, request) -> Optional[Tuple[User, dict]]:
        token = get_bearer_token(request)
        if token is None:
            return None
        return self._authenticate_token(token, request)

    def _authenticate_token(self, token: str, request) -> Tuple[User, dict]:
        """Validate JWT token and return user."""
        try:
            payload = JWTTokenGenerator.verify(token, TokenKind.ACCESS)
        except InvalidTokenError as e:
            raise exceptions.AuthenticationFailed(e.message, code=e.code)

        try:
            user = User.objects.get(id=payload['sub'])
        except (User.DoesNotExist, ValidationError, ValueError):
            raise exceptions.AuthenticationFailed('User not found')

        request.jwt_payload = payload
        return (user, payload)

    def authenticate_header(self, request) -> str:
        """Return the WWW-Authenticate header value."""
        return self.keyword


def get_bearer_token(request) -> Optional[str]:
    """Token from 'Authorization: Bearer <token>', or None when absent."""
    auth_header = authentication.get_authorization_header(request)
    if not auth_header:
        return None

    try:
        auth_parts = auth_header.decode('utf-8').split()
    except UnicodeDecodeError:
        raise exceptions.AuthenticationFailed('Invalid token header encoding')

    if len(auth_parts) != 2 or auth_parts[0].lower() != JWTAuthentication.keyword.lower():
        return None

    return auth_parts[1]

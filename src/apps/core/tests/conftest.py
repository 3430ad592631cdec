# apps/core/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for the users and authentication tests.
"""

import uuid

import pyotp
import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

from apps.core.authentication import JWTTokenGenerator
from apps.core.models import Role, User
from apps.core.services import AuthService, RateLimiter


# ==================== CACHE FIXTURES ====================

@pytest.fixture(autouse=True)
def clear_cache():
    """Clear temp tokens and rate-limit windows around every test."""
    caches['default'].clear()
    caches['rate_limit'].clear()
    yield
    caches['default'].clear()
    caches['rate_limit'].clear()


@pytest.fixture
def api_client() -> APIClient:
    """Return a DRF API client instance."""
    return APIClient()


# ==================== USER FIXTURES ====================

@pytest.fixture
def user_password() -> str:
    """Standard password for test users."""
    return 'Secret123!'


@pytest.fixture
def create_user(db, user_password):
    """Factory fixture to create test users."""
    def _create_user(
        email: str = None,
        password: str = None,
        name: str = 'Test User',
        role: str = Role.USER,
        **kwargs
    ) -> User:
        if email is None:
            email = f"user_{uuid.uuid4().hex[:8]}@test.com"

        return User.objects.create_user(
            email=email,
            name=name,
            password=password or user_password,
            role=role,
            **kwargs
        )

    return _create_user


@pytest.fixture
def active_user(create_user) -> User:
    """The a@b.com customer."""
    return create_user(email='a@b.com', name='A')


@pytest.fixture
def admin_user(create_user) -> User:
    return create_user(email='admin@test.com', name='Admin', role=Role.ADMIN)


@pytest.fixture
def totp_secret() -> str:
    return pyotp.random_base32()


@pytest.fixture
def user_with_2fa(create_user, totp_secret) -> User:
    """User with TOTP enabled."""
    return create_user(
        email='2fa@test.com',
        name='Two Factor',
        two_factor_secret=totp_secret,
        two_factor_enabled=True
    )


# ==================== SERVICE FIXTURES ====================

class FakeClock:
    """Manually advanced clock for rate-limit windows."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock) -> RateLimiter:
    return RateLimiter(clock=clock)


@pytest.fixture
def auth_service(rate_limiter) -> AuthService:
    """AuthService whose rate limiter runs on the fake clock."""
    return AuthService(rate_limiter=rate_limiter)


# ==================== AUTHENTICATED CLIENT FIXTURES ====================

def bearer(user: User) -> str:
    return f"Bearer {JWTTokenGenerator.generate_access_token(user)}"


@pytest.fixture
def authenticated_client(api_client, active_user) -> APIClient:
    """Return an API client authenticated as active_user."""
    api_client.credentials(HTTP_AUTHORIZATION=bearer(active_user))
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user) -> APIClient:
    """Return an API client with admin authentication."""
    api_client.credentials(HTTP_AUTHORIZATION=bearer(admin_user))
    return api_client

# apps/laundry/tests/conftest.py
"""
Fixtures for the order and complaint tests.
"""

from datetime import date

import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

from apps.core.authentication import JWTTokenGenerator
from apps.core.models import Role, User
from apps.laundry.services import OrderService


@pytest.fixture(autouse=True)
def clear_cache():
    caches['default'].clear()
    caches['rate_limit'].clear()
    yield


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def customer(db) -> User:
    return User.objects.create_user(email='a@b.com', name='A', password='Secret123!')


@pytest.fixture
def other_customer(db) -> User:
    return User.objects.create_user(email='other@b.com', name='Other', password='Secret123!')


@pytest.fixture
def admin(db) -> User:
    return User.objects.create_user(
        email='admin@test.com', name='Admin', password='Secret123!', role=Role.ADMIN
    )


def client_for(user: User) -> APIClient:
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {JWTTokenGenerator.generate_access_token(user)}")
    return client


@pytest.fixture
def customer_client(customer) -> APIClient:
    return client_for(customer)


@pytest.fixture
def admin_client(admin) -> APIClient:
    return client_for(admin)


@pytest.fixture
def make_order():
    """Factory fixture placing an order through the service."""
    def _make_order(user: User, clothing_type: str = 'Regular Wash', quantity: int = 4):
        return OrderService.create_order(
            user=user,
            clothing_type=clothing_type,
            quantity=quantity,
            pickup_date=date(2026, 11, 2),
        )

    return _make_order

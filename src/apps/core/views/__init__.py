# apps/core/views/__init__.py
from .auth import AuthViewSet
from .user import UserViewSet

__all__ = [
    'AuthViewSet',
    'UserViewSet',
]

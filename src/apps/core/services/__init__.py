# apps/core/services/__init__.py
"""
Core services: authentication flows and the collaborators they compose.
"""

from .auth_service import AuthService, RESET_REQUESTED_MESSAGE
from .credential_store import CredentialStore
from .notifier import ResetNotifier
from .rate_limiter import RateLimiter

__all__ = [
    'AuthService',
    'RESET_REQUESTED_MESSAGE',
    'CredentialStore',
    'ResetNotifier',
    'RateLimiter',
]

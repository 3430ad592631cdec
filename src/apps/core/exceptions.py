# apps/core/exceptions.py
"""
Authentication error taxonomy.

Every auth flow fails with exactly one of these. Each class carries the HTTP
status it is rendered with; the message never carries internal exception text.
"""

from typing import Dict, List

from rest_framework import status


class AuthenticationError(Exception):
    """Base exception for authentication errors"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str = 'auth_error', details: Dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class InvalidInputError(AuthenticationError):
    """Missing or malformed input"""
    def __init__(self, message: str = "Invalid input", details: Dict = None):
        super().__init__(message, 'validation_error', details)


class PasswordPolicyError(AuthenticationError):
    """Password doesn't meet policy requirements"""
    def __init__(self, violations: List[str]):
        super().__init__(
            "Password does not meet security requirements",
            'weak_password',
            {'violations': violations}
        )


class EmailTakenError(AuthenticationError):
    """An account with this email already exists"""
    def __init__(self):
        super().__init__("User already exists", 'email_taken')


class InvalidCredentialsError(AuthenticationError):
    """Invalid email or password. Never says which."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__("Invalid email or password", 'invalid_credentials')


class InvalidTokenError(AuthenticationError):
    """Token is expired, forged, malformed or of the wrong kind"""
    status_code = status.HTTP_401_UNAUTHORIZED

    EXPIRED = 'token_expired'
    INVALID = 'token_invalid'
    KIND_MISMATCH = 'token_kind_mismatch'

    def __init__(self, message: str = "Invalid or expired token", code: str = INVALID):
        super().__init__(message, code)


class SessionNotFoundError(AuthenticationError):
    """No session holds this refresh token (unknown or already rotated)"""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__("Session not found or already refreshed", 'session_not_found')


class TwoFactorError(AuthenticationError):
    """TOTP code rejected or 2FA not set up"""
    def __init__(self, message: str = "Invalid verification code", code: str = 'two_factor_invalid'):
        super().__init__(message, code)


class RateLimitedError(AuthenticationError):
    """Too many attempts in the current window"""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after: int):
        super().__init__(
            "Too many attempts. Please try again later.",
            'rate_limited',
            {'retry_after': retry_after}
        )
        self.retry_after = retry_after


class UserNotFoundError(AuthenticationError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self):
        super().__init__("User not found", 'user_not_found')


class PermissionDeniedError(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "You do not have permission to perform this action."):
        super().__init__(message, 'forbidden')


class StoreUnavailableError(AuthenticationError):
    """The credential store could not be reached"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self):
        super().__init__(
            "Unable to connect to database. Please try again later.",
            'store_unavailable'
        )


class NotificationDeliveryError(Exception):
    """The notifier could not hand a message to the mail backend"""

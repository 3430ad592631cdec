# apps/core/services/auth_service.py
"""
Authentication Service - Business Logic Layer

Handles all authentication operations including:
- Registration with password policy
- Login with optional TOTP challenge
- Refresh-token rotation and logout
- Password reset (request and confirm)
- Two-factor enrollment, activation and removal

Every failure is one AuthenticationError subclass; nothing is persisted
before all checks of a flow have passed.
"""

import base64
import logging
import secrets
import uuid
from io import BytesIO
from typing import Dict, List, Optional

import pyotp
import qrcode
from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from apps.core.authentication import JWTTokenGenerator, TokenKind
from apps.core.exceptions import (
    EmailTakenError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidTokenError,
    NotificationDeliveryError,
    PasswordPolicyError,
    PermissionDeniedError,
    SessionNotFoundError,
    TwoFactorError,
    UserNotFoundError,
)
from apps.core.hashers import hash_password, verify_password
from apps.core.models import Role, User
from apps.core.services.credential_store import CredentialStore
from apps.core.services.notifier import ResetNotifier
from apps.core.services.rate_limiter import RateLimiter
from apps.core.validators import is_valid_email, password_policy_violations

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists, a reset link has been sent"


class AuthService:
    """
    Orchestrates the credential store, password hasher, token issuer,
    rate limiter and notifier into the authentication flows.
    """

    # Configuration
    PASSWORD_MIN_LENGTH = 8
    TEMP_TOKEN_TTL = 300
    TOTP_ISSUER = 'LaundryPro'

    def __init__(
        self,
        store: CredentialStore = None,
        rate_limiter: RateLimiter = None,
        notifier: ResetNotifier = None,
    ):
        self.store = store or CredentialStore()
        self.rate_limiter = rate_limiter or RateLimiter()
        self.notifier = notifier or ResetNotifier()
        self.tokens = JWTTokenGenerator
        self._load_settings()

    def _load_settings(self):
        """Load settings from Django settings"""
        auth_settings = getattr(settings, 'AUTH_SETTINGS', {})
        self.PASSWORD_MIN_LENGTH = auth_settings.get('PASSWORD_MIN_LENGTH', 8)
        self.TEMP_TOKEN_TTL = auth_settings.get('TWO_FACTOR_CHALLENGE_TTL', 300)
        self.TOTP_ISSUER = auth_settings.get('TOTP_ISSUER', 'LaundryPro')
        self.LOGIN_RATE_LIMIT = auth_settings.get('LOGIN_RATE_LIMIT', (5, 60))
        self.REGISTER_RATE_LIMIT = auth_settings.get('REGISTER_RATE_LIMIT', (5, 60))
        self.RESET_RATE_LIMIT = auth_settings.get('RESET_RATE_LIMIT', (5, 300))

    # ==================== REGISTRATION ====================

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str,
        ip_address: str = None
    ) -> str:
        """
        Register a new user account.

        Args:
            name: Display name
            email: Email address, stored as given
            password: Plain password (validated against policy)
            role: 'user' or 'admin'
            ip_address: Client IP, the rate-limit identifier

        Returns:
            The new user's id

        Raises:
            InvalidInputError: Missing field, bad email syntax or unknown role
            PasswordPolicyError: If the password is too weak
            RateLimitedError: Too many registrations from this client
            EmailTakenError: If the email is already registered
            StoreUnavailableError: If the database is unreachable
        """
        self._require_fields(name=name, email=email, password=password, role=role)

        if not is_valid_email(email):
            raise InvalidInputError("Invalid email format", {'email': ["Enter a valid email address."]})

        if role not in Role.values:
            raise InvalidInputError("Invalid role", {'role': [f"Must be one of: {', '.join(Role.values)}"]})

        self._validate_password_policy(password)

        limit, window = self.REGISTER_RATE_LIMIT
        self.rate_limiter.check(ip_address or 'unknown', 'register', limit, window)

        if self.store.email_exists(email):
            logger.info("Registration rejected: email already registered")
            raise EmailTakenError()

        user = self.store.create_user(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=Role(role)
        )

        logger.info(f"User registered: {user.id} ({user.role})")
        return str(user.id)

    # ==================== LOGIN ====================

    def login(
        self,
        email: str,
        password: str,
        ip_address: str = None,
        user_agent: str = ''
    ) -> Dict:
        """
        Authenticate user with email and password.

        Args:
            email: User's email address
            password: User's password
            ip_address: Client IP address
            user_agent: Client user agent string

        Returns:
            Dict with tokens and user summary, or a 2FA challenge
            ({'requires_2fa': True, 'temp_token', 'methods'})

        Raises:
            InvalidInputError: Missing field or bad email syntax
            RateLimitedError: Too many attempts from this client
            InvalidCredentialsError: Unknown email or wrong password
        """
        self._require_fields(email=email, password=password)

        if not is_valid_email(email):
            raise InvalidInputError("Invalid email format", {'email': ["Enter a valid email address."]})

        limit, window = self.LOGIN_RATE_LIMIT
        self.rate_limiter.check(ip_address or 'unknown', 'login', limit, window)

        user = self.store.find_by_email(email)

        if user is None:
            # Hash anyway so both failure paths cost the same
            hash_password(password)
            logger.warning(f"Failed login from {ip_address}: unknown email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password):
            logger.warning(f"Failed login from {ip_address}: wrong password for user {user.id}")
            raise InvalidCredentialsError()

        if user.two_factor_enabled:
            temp_token = self._generate_temp_token(user.id, ip_address)
            logger.info(f"Login for user {user.id} awaiting 2FA")
            return {
                'requires_2fa': True,
                'temp_token': temp_token,
                'methods': ['totp'],
            }

        return self._complete_login(user, ip_address, user_agent)

    def complete_two_factor_login(
        self,
        temp_token: str,
        code: str,
        ip_address: str = None,
        user_agent: str = ''
    ) -> Dict:
        """
        Finish a login that was answered with a 2FA challenge.

        Raises:
            InvalidTokenError: If temp token is invalid or expired
            TwoFactorError: If the TOTP code is wrong
            RateLimitedError: Too many attempts from this client
        """
        self._require_fields(tempToken=temp_token, code=code)

        limit, window = self.LOGIN_RATE_LIMIT
        self.rate_limiter.check(ip_address or 'unknown', 'two_factor', limit, window)

        user_id = self._validate_temp_token(temp_token)
        if not user_id:
            raise InvalidTokenError("Invalid or expired session")

        user = self.store.find_by_id(user_id)
        if user is None:
            raise InvalidTokenError("Invalid session")

        if not user.two_factor_enabled or not user.two_factor_secret:
            raise TwoFactorError(
                "Two-factor authentication is not enabled",
                'two_factor_not_configured'
            )

        if not self._verify_totp(user.two_factor_secret, code):
            logger.warning(f"Invalid 2FA code for user {user.id}")
            raise TwoFactorError()

        self._clear_temp_token(temp_token)

        return self._complete_login(user, ip_address, user_agent)

    def _complete_login(
        self,
        user: User,
        ip_address: str = None,
        user_agent: str = ''
    ) -> Dict:
        """
        Mint the login access token and a refresh token, and open a session.
        """
        access_token = self.tokens.generate_access_token(
            user,
            ttl=settings.JWT_SETTINGS['LOGIN_ACCESS_TOKEN_LIFETIME']
        )
        refresh_token = self.tokens.generate_refresh_token(user)

        self.store.add_session(
            user,
            refresh_token,
            ip_address=ip_address,
            user_agent=user_agent
        )

        logger.info(f"User logged in: {user.id}")

        return {
            'access_token': access_token,
            'refresh_token': refresh_token,
            'user': self._serialize_user(user),
        }

    # ==================== TOKEN MANAGEMENT ====================

    def refresh_tokens(self, refresh_token: Optional[str]) -> Dict:
        """
        Rotate a refresh token.

        The stored session value is swapped in one conditional update, so the
        presented token stops working in the same write that issues its
        successor.

        Returns:
            Dict with 'access_token' and 'refresh_token'

        Raises:
            InvalidTokenError: Missing, expired, forged or non-refresh token
            SessionNotFoundError: No session holds this token
        """
        if not refresh_token:
            raise InvalidTokenError("Refresh token missing")

        payload = self.tokens.verify(refresh_token, TokenKind.REFRESH)

        user = self.store.find_by_id(payload['sub'])
        if user is None:
            raise SessionNotFoundError()

        access_token = self.tokens.generate_access_token(user)
        new_refresh_token = self.tokens.generate_refresh_token(user)

        if not self.store.rotate_session(user.id, refresh_token, new_refresh_token):
            logger.warning(f"Refresh with unknown or already rotated token for user {user.id}")
            raise SessionNotFoundError()

        logger.info(f"Session rotated for user {user.id}")

        return {
            'access_token': access_token,
            'refresh_token': new_refresh_token,
        }

    def logout(self, refresh_token: Optional[str]) -> None:
        """End the session holding this refresh token, if any."""
        if not refresh_token:
            return
        if self.store.delete_session(refresh_token):
            logger.info("Session ended by logout")

    def verify_access_token(self, token: Optional[str]) -> Dict:
        """
        Resolve an access token to its user summary.

        Raises:
            InvalidTokenError: Missing, expired, forged or non-access token
            UserNotFoundError: The token's user no longer exists
        """
        if not token:
            raise InvalidTokenError("Authorization token missing")

        payload = self.tokens.verify(token, TokenKind.ACCESS)

        user = self.store.find_by_id(payload['sub'])
        if user is None:
            raise UserNotFoundError()

        return self._serialize_user(user)

    # ==================== PASSWORD MANAGEMENT ====================

    def request_password_reset(self, email: str, ip_address: str = None) -> str:
        """
        Start a password reset.

        The same message comes back whether or not the email is registered;
        only a registered email gets a stored reset token and an email.

        Returns:
            The generic confirmation message

        Raises:
            RateLimitedError: Too many requests from this client
        """
        limit, window = self.RESET_RATE_LIMIT
        self.rate_limiter.check(ip_address or 'unknown', 'password_reset', limit, window)

        user = self.store.find_by_email(email) if email else None
        if user is None:
            logger.info("Password reset requested for unknown email")
            return RESET_REQUESTED_MESSAGE

        token = self.tokens.generate_reset_token(user)
        expires_at = timezone.now() + settings.JWT_SETTINGS['RESET_TOKEN_LIFETIME']
        self.store.set_reset_token(user, token, expires_at)

        reset_url = f"{settings.APP_URL.rstrip('/')}/reset-password?token={token}"

        try:
            self.notifier.send_reset_link(user, reset_url)
        except NotificationDeliveryError:
            logger.exception(f"Could not deliver reset email for user {user.id}")

        logger.info(f"Password reset requested: {user.id}")
        return RESET_REQUESTED_MESSAGE

    @transaction.atomic
    def reset_password(self, token: str, new_password: str) -> User:
        """
        Reset password using reset token.

        The token must match the value stored on the user and the stored
        expiry must not have passed. It works once; all sessions are ended.

        Raises:
            InvalidTokenError: If token is invalid, expired or already used
            PasswordPolicyError: If password doesn't meet requirements
        """
        self._require_fields(token=token, password=new_password)

        payload = self.tokens.verify(token, TokenKind.RESET)

        user = self.store.find_by_id(payload['sub'])
        if user is None or user.reset_token != token or not user.has_pending_reset:
            raise InvalidTokenError("Password reset token is invalid or has already been used")

        self._validate_password_policy(new_password)

        if not self.store.consume_reset_token(user.id, token):
            raise InvalidTokenError("Password reset token is invalid or has already been used")

        self.store.set_password_hash(user, hash_password(new_password))
        ended = self.store.delete_all_sessions(user)

        logger.info(f"Password reset completed: {user.id} ({ended} sessions ended)")
        return user

    def _validate_password_policy(self, password: str) -> None:
        """
        Validate password against security policy.

        Raises PasswordPolicyError if password doesn't meet requirements.
        """
        violations = password_policy_violations(password, self.PASSWORD_MIN_LENGTH)
        if violations:
            raise PasswordPolicyError(violations)

    # ==================== TWO-FACTOR AUTHENTICATION ====================

    def setup_2fa(self, actor: User, user_id) -> Dict:
        """
        Generate a TOTP secret for a user and store it, not yet enabled.

        Args:
            actor: The authenticated caller
            user_id: Account to enroll; the caller's own unless admin

        Returns:
            Dict with 'qr_code' (PNG data URL), 'secret' and 'provisioning_uri'

        Raises:
            InvalidInputError: If user_id is missing or not a UUID
            PermissionDeniedError: Enrolling someone else without admin role
            UserNotFoundError: Unknown user id
            TwoFactorError: 2FA is already active for the user
        """
        self._require_fields(userId=user_id)

        try:
            user_id = uuid.UUID(str(user_id))
        except ValueError:
            raise InvalidInputError("Invalid user id", {'userId': ["Must be a valid UUID."]})

        if user_id != actor.id and not Role.is_admin(actor.role):
            raise PermissionDeniedError("You can only set up two-factor authentication for your own account")

        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        if user.two_factor_enabled:
            raise TwoFactorError(
                "Two-factor authentication is already enabled",
                'two_factor_already_enabled'
            )

        secret = pyotp.random_base32()
        provisioning_uri = pyotp.TOTP(secret).provisioning_uri(
            name=user.email,
            issuer_name=self.TOTP_ISSUER
        )
        qr_code = self._render_qr_code(provisioning_uri)

        self.store.set_two_factor(user, secret, enabled=False)

        logger.info(f"2FA enrollment started for user {user.id}")

        return {
            'qr_code': qr_code,
            'secret': secret,
            'provisioning_uri': provisioning_uri,
        }

    def verify_2fa_setup(self, user: User, code: str) -> Dict:
        """
        Activate 2FA once the user proves the authenticator works.

        Raises:
            TwoFactorError: No pending secret, already enabled, or wrong code
        """
        self._require_fields(code=code)

        if not user.two_factor_secret:
            raise TwoFactorError(
                "Two-factor authentication has not been set up",
                'two_factor_not_configured'
            )

        if user.two_factor_enabled:
            raise TwoFactorError(
                "Two-factor authentication is already enabled",
                'two_factor_already_enabled'
            )

        if not self._verify_totp(user.two_factor_secret, code):
            logger.warning(f"Invalid 2FA setup code for user {user.id}")
            raise TwoFactorError()

        self.store.set_two_factor(user, user.two_factor_secret, enabled=True)

        logger.info(f"2FA enabled for user: {user.id}")
        return {'enabled': True}

    def disable_2fa(self, user: User, password: str) -> None:
        """
        Disable 2FA for user (requires password confirmation).

        Raises:
            InvalidCredentialsError: Wrong password
            TwoFactorError: 2FA was never set up
        """
        self._require_fields(password=password)

        if not verify_password(password, user.password):
            raise InvalidCredentialsError()

        if not user.two_factor_enabled and not user.two_factor_secret:
            raise TwoFactorError(
                "Two-factor authentication has not been set up",
                'two_factor_not_configured'
            )

        self.store.set_two_factor(user, None, enabled=False)
        logger.info(f"2FA disabled for user: {user.id}")

    def _verify_totp(self, secret: str, code: str) -> bool:
        """Verify TOTP code, accepting one step of clock drift."""
        return pyotp.TOTP(secret).verify(str(code).strip(), valid_window=1)

    def _render_qr_code(self, data: str) -> str:
        """Render data as a PNG QR code data URL."""
        img = qrcode.make(data)
        buffer = BytesIO()
        img.save(buffer, format='PNG')
        encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
        return f"data:image/png;base64,{encoded}"

    # ==================== HELPER METHODS ====================

    def _require_fields(self, **fields) -> None:
        """Raise InvalidInputError naming every empty field."""
        missing: List[str] = [name for name, value in fields.items() if value in (None, '')]
        if missing:
            raise InvalidInputError(
                "Missing required fields",
                {name: ["This field is required."] for name in missing}
            )

    def _generate_temp_token(self, user_id, ip_address: str = None) -> str:
        """Generate temporary token for 2FA flow."""
        token = secrets.token_urlsafe(32)
        cache.set(f"temp_token:{token}", {
            'user_id': str(user_id),
            'ip_address': ip_address,
            'created_at': timezone.now().isoformat()
        }, timeout=self.TEMP_TOKEN_TTL)
        return token

    def _validate_temp_token(self, token: str) -> Optional[str]:
        """Validate temporary token and return user_id."""
        data = cache.get(f"temp_token:{token}")
        if not data:
            return None
        return data.get('user_id')

    def _clear_temp_token(self, token: str) -> None:
        """Clear temporary token from cache."""
        cache.delete(f"temp_token:{token}")

    def _serialize_user(self, user: User) -> Dict:
        """Public user summary."""
        return {
            'id': str(user.id),
            'name': user.name,
            'email': user.email,
            'role': user.role,
        }

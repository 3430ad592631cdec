# apps/core/services/credential_store.py
"""
Credential Store - persistence boundary for users and their sessions.

Database connectivity failures surface as StoreUnavailableError and a lost
race on the unique email index surfaces as EmailTakenError, so callers only
deal with the auth error taxonomy.
"""

import functools
import logging
from datetime import datetime
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.utils import timezone

from apps.core.exceptions import EmailTakenError, StoreUnavailableError
from apps.core.models import Role, User, UserSession

logger = logging.getLogger(__name__)


def store_operation(func):
    """Translate database connectivity errors into StoreUnavailableError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Credential store unavailable in {func.__name__}: {e}")
            raise StoreUnavailableError() from e
    return wrapper


class CredentialStore:
    """
    Users, password hashes, 2FA secrets, reset tokens and sessions.
    """

    # ==================== USERS ====================

    @store_operation
    def email_exists(self, email: str) -> bool:
        return User.objects.filter(email=email).exists()

    @store_operation
    def create_user(self, email: str, name: str, password_hash: str, role: Role) -> User:
        """
        Persist a new user with an already hashed password.

        Raises:
            EmailTakenError: If the email is already registered
        """
        user = User(email=email, name=name, role=role, password=password_hash)
        try:
            with transaction.atomic():
                user.save(force_insert=True)
        except IntegrityError:
            raise EmailTakenError()
        return user

    @store_operation
    def find_by_email(self, email: str) -> Optional[User]:
        return User.objects.filter(email=email).first()

    @store_operation
    def find_by_id(self, user_id) -> Optional[User]:
        try:
            return User.objects.filter(id=user_id).first()
        except (ValidationError, ValueError):
            return None

    @store_operation
    def set_password_hash(self, user: User, password_hash: str) -> None:
        user.password = password_hash
        user.reset_token = None
        user.reset_token_expires_at = None
        user.save(update_fields=['password', 'reset_token', 'reset_token_expires_at', 'updated_at'])

    # ==================== PASSWORD RESET ====================

    @store_operation
    def set_reset_token(self, user: User, token: str, expires_at: datetime) -> None:
        user.reset_token = token
        user.reset_token_expires_at = expires_at
        user.save(update_fields=['reset_token', 'reset_token_expires_at', 'updated_at'])

    @store_operation
    def consume_reset_token(self, user_id, token: str) -> bool:
        """
        Clear the stored reset token if it still matches and has not expired.
        Returns False when another request already used it.
        """
        updated = User.objects.filter(
            id=user_id,
            reset_token=token,
            reset_token_expires_at__gt=timezone.now()
        ).update(reset_token=None, reset_token_expires_at=None, updated_at=timezone.now())
        return updated == 1

    # ==================== TWO-FACTOR ====================

    @store_operation
    def set_two_factor(self, user: User, secret: Optional[str], enabled: bool) -> None:
        user.two_factor_secret = secret
        user.two_factor_enabled = enabled
        user.save(update_fields=['two_factor_secret', 'two_factor_enabled', 'updated_at'])

    # ==================== SESSIONS ====================

    @store_operation
    def add_session(
        self,
        user: User,
        refresh_token: str,
        ip_address: str = None,
        user_agent: str = ''
    ) -> UserSession:
        return UserSession.objects.create(
            user=user,
            refresh_token=refresh_token,
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else '',
        )

    @store_operation
    def rotate_session(self, user_id, old_token: str, new_token: str) -> bool:
        """
        Replace a session's refresh token in one filtered update.

        Matching on the exact old value makes the swap a compare-and-set:
        of two callers holding the same token, only one updates a row.
        """
        updated = UserSession.objects.filter(
            user_id=user_id,
            refresh_token=old_token
        ).update(refresh_token=new_token, last_used_at=timezone.now())
        return updated == 1

    @store_operation
    def delete_session(self, refresh_token: str) -> int:
        deleted, _ = UserSession.objects.filter(refresh_token=refresh_token).delete()
        return deleted

    @store_operation
    def delete_all_sessions(self, user: User) -> int:
        deleted, _ = UserSession.objects.filter(user=user).delete()
        return deleted

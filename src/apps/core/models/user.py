# apps/core/models/user.py
"""
User and UserSession models for the Laundry Service.
A user owns its refresh-token sessions; sessions are never stored on their own.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.utils import timezone


class Role(models.TextChoices):
    """The two account roles. Every authorization branch goes through these helpers."""

    USER = 'user', 'User'
    ADMIN = 'admin', 'Admin'

    @classmethod
    def is_admin(cls, role) -> bool:
        role = cls(role)
        if role is cls.ADMIN:
            return True
        if role is cls.USER:
            return False
        raise ValueError(f"Unhandled role: {role}")


class UserManager(BaseUserManager):
    """Custom user manager keyed on email"""

    def create_user(self, email, name, password=None, role=Role.USER, **extra_fields):
        """Create and return a user; the stored email keeps its case"""
        if not email:
            raise ValueError('Email address is required')
        if not password:
            raise ValueError('Password is required')

        user = self.model(email=email.strip(), name=name, role=role, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None, **extra_fields):
        """Create and return an admin"""
        return self.create_user(email, name, password, role=Role.ADMIN, **extra_fields)


class User(AbstractBaseUser):
    """
    Account record. Password hash, TOTP secret and password-reset token
    live on the row; refresh-token grants live in UserSession.
    """

    # Primary Key
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Authentication
    email = models.CharField(
        max_length=255,
        unique=True,
        help_text='Login identifier, compared exactly as stored'
    )
    # Password is inherited from AbstractBaseUser

    name = models.CharField(max_length=255)
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.USER
    )

    # =========================================================================
    # TWO-FACTOR AUTHENTICATION
    # =========================================================================

    two_factor_enabled = models.BooleanField(default=False)
    two_factor_secret = models.CharField(max_length=64, blank=True, null=True)

    # =========================================================================
    # PASSWORD RESET
    # =========================================================================

    reset_token = models.TextField(blank=True, null=True)
    reset_token_expires_at = models.DateTimeField(blank=True, null=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['created_at']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=['user', 'admin']),
                name='valid_user_role'
            ),
            models.CheckConstraint(
                condition=~models.Q(password=''),
                name='user_password_not_empty'
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def has_pending_reset(self) -> bool:
        return bool(
            self.reset_token and
            self.reset_token_expires_at and
            self.reset_token_expires_at > timezone.now()
        )


class UserSession(models.Model):
    """
    One outstanding refresh-token grant of a user.
    Rotation replaces refresh_token in place.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='sessions'
    )

    refresh_token = models.TextField(unique=True)

    # Client info
    ip_address = models.GenericIPAddressField(blank=True, null=True)
    user_agent = models.TextField(blank=True, default='')

    last_used_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_sessions'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['user', 'last_used_at']),
        ]

    def __str__(self):
        return f"Session for {self.user.email}"

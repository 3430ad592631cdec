# apps/core/serializers/__init__.py
from .auth import (
    RegisterSerializer,
    LoginSerializer,
    TwoFactorChallengeSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
    TwoFactorSetupSerializer,
    TwoFactorCodeSerializer,
    TwoFactorDisableSerializer,
)
from .user import UserSerializer

__all__ = [
    'RegisterSerializer',
    'LoginSerializer',
    'TwoFactorChallengeSerializer',
    'PasswordResetRequestSerializer',
    'PasswordResetConfirmSerializer',
    'TwoFactorSetupSerializer',
    'TwoFactorCodeSerializer',
    'TwoFactorDisableSerializer',
    'UserSerializer',
]

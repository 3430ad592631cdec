# apps/core/serializers/auth.py
"""
Authentication Serializers

Request bodies use the camelCase keys of the public API. Presence and type
are checked here; email syntax, role and password policy are checked by
AuthService so every entry point enforces the same rules.
"""

from rest_framework import serializers

from apps.core.models import Role


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration.
    """

    name = serializers.CharField(required=True, max_length=255)
    email = serializers.CharField(required=True, max_length=255)
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, required=True)

    def validate_email(self, value):
        """Strip surrounding whitespace; case is kept as given."""
        return value.strip()


class LoginSerializer(serializers.Serializer):
    """
    Serializer for user login request.
    """

    email = serializers.CharField(required=True, max_length=255)
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )

    def validate_email(self, value):
        return value.strip()


class TwoFactorChallengeSerializer(serializers.Serializer):
    """
    Serializer for 2FA verification during login.
    """

    tempToken = serializers.CharField(required=True)
    code = serializers.CharField(required=True, min_length=6, max_length=10)


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.CharField(required=True, max_length=255)

    def validate_email(self, value):
        return value.strip()


class PasswordResetConfirmSerializer(serializers.Serializer):
    """
    Serializer for password reset with token.
    """

    token = serializers.CharField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )


class TwoFactorSetupSerializer(serializers.Serializer):
    """
    Serializer for starting 2FA enrollment.
    """

    userId = serializers.CharField(required=True)


class TwoFactorCodeSerializer(serializers.Serializer):
    """
    Serializer for confirming 2FA setup with a code from the authenticator.
    """

    code = serializers.CharField(required=True, min_length=6, max_length=10)


class TwoFactorDisableSerializer(serializers.Serializer):
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )

# apps/core/serializers/user.py
"""
User Serializers
"""

from rest_framework import serializers

from apps.core.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public account fields. Password hash, TOTP secret and reset token
    are never serialized.
    """

    twoFactorEnabled = serializers.BooleanField(source='two_factor_enabled', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'twoFactorEnabled', 'createdAt']
        read_only_fields = fields

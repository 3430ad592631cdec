# apps/core/views/user.py
"""
User ViewSet - account listing for administrators
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, viewsets
from rest_framework.permissions import IsAuthenticated

from apps.core.models import User
from apps.core.permissions import IsAdminRole
from apps.core.serializers import UserSerializer

logger = logging.getLogger(__name__)


class UserViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for User listing.

    Endpoints:
    - GET /users - List all users (admin)
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['role', 'two_factor_enabled']
    search_fields = ['email', 'name']
    ordering_fields = ['created_at', 'email', 'name']
    ordering = ['-created_at']

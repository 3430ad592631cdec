# apps/core/urls.py
"""
URL configuration for users and authentication

Endpoints:
    /api/auth/...   - Authentication (login, register, refresh, reset, 2FA)
    /api/users      - User listing (admin)
"""

from django.urls import path, include
from rest_framework.routers import SimpleRouter

from apps.core.views import AuthViewSet, UserViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'auth', AuthViewSet, basename='auth')
router.register(r'users', UserViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
]

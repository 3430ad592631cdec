# apps/core/views/auth.py
"""
Authentication ViewSet

Provides endpoints for:
- Registration and login (with TOTP challenge)
- Refresh-token rotation through an httpOnly cookie, and logout
- Password reset request and confirmation
- 2FA setup, activation and removal
- Access-token verification
"""

import logging

from django.conf import settings
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.core.authentication import JWTAuthentication, get_bearer_token
from apps.core.exceptions import AuthenticationError, RateLimitedError
from apps.core.serializers import (
    LoginSerializer,
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    RegisterSerializer,
    TwoFactorChallengeSerializer,
    TwoFactorCodeSerializer,
    TwoFactorDisableSerializer,
    TwoFactorSetupSerializer,
)
from apps.core.services import AuthService
from common.middleware import get_client_ip

logger = logging.getLogger(__name__)


class AuthViewSet(viewsets.ViewSet):
    """
    ViewSet for authentication operations.

    Endpoints:
    - POST /auth/register - Register new user
    - POST /auth/login - Login
    - POST /auth/2fa/challenge - Answer the login 2FA challenge
    - POST /auth/refresh - Rotate refresh cookie, new access token
    - POST /auth/logout - End the cookie's session
    - POST /auth/reset-password/request - Request password reset
    - POST /auth/reset-password/confirm - Set new password with reset token
    - POST /auth/2fa/setup - Start 2FA enrollment (authenticated)
    - POST /auth/2fa/verify-setup - Activate 2FA (authenticated)
    - POST /auth/2fa/disable - Disable 2FA (authenticated)
    - GET  /auth/verify - Verify bearer token
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.auth_service = AuthService()

    def _get_user_agent(self, request) -> str:
        """Extract user agent from request."""
        return request.META.get('HTTP_USER_AGENT', '')[:500]

    def _error_response(self, error: AuthenticationError) -> Response:
        """Create standardized error response."""
        response = Response({
            'success': False,
            'error': {
                'code': error.code,
                'message': error.message,
                'details': error.details,
                'request_id': getattr(self.request, 'request_id', None),
            }
        }, status=error.status_code)

        if isinstance(error, RateLimitedError):
            response['Retry-After'] = str(error.retry_after)

        return response

    # ==================== REFRESH COOKIE ====================

    def _set_refresh_cookie(self, response: Response, refresh_token: str) -> None:
        cookie = settings.REFRESH_COOKIE
        lifetime = settings.JWT_SETTINGS['REFRESH_TOKEN_LIFETIME']
        response.set_cookie(
            cookie['NAME'],
            refresh_token,
            max_age=int(lifetime.total_seconds()),
            path=cookie['PATH'],
            secure=cookie['SECURE'],
            httponly=True,
            samesite=cookie['SAMESITE'],
        )

    def _clear_refresh_cookie(self, response: Response) -> None:
        cookie = settings.REFRESH_COOKIE
        response.delete_cookie(
            cookie['NAME'],
            path=cookie['PATH'],
            samesite=cookie['SAMESITE'],
        )

    def _get_refresh_cookie(self, request):
        return request.COOKIES.get(settings.REFRESH_COOKIE['NAME'])

    def _login_response(self, result: dict) -> Response:
        """Body of a completed login plus the refresh cookie."""
        response = Response({
            'success': True,
            'token': result['access_token'],
            'user': result['user'],
        })
        self._set_refresh_cookie(response, result['refresh_token'])
        return response

    # ==================== REGISTRATION ====================

    @action(detail=False, methods=['post'])
    def register(self, request):
        """
        Register a new user account.
        """
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            data = serializer.validated_data
            user_id = self.auth_service.register(
                name=data['name'],
                email=data['email'],
                password=data['password'],
                role=data['role'],
                ip_address=get_client_ip(request),
            )

            return Response({
                'success': True,
                'message': 'User created successfully',
                'userId': user_id,
            })

        except AuthenticationError as e:
            return self._error_response(e)

    # ==================== LOGIN ====================

    @action(detail=False, methods=['post'])
    def login(self, request):
        """
        User login endpoint.

        Returns an access token and sets the refresh cookie, or answers
        with a 2FA challenge.
        """
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = self.auth_service.login(
                email=serializer.validated_data['email'],
                password=serializer.validated_data['password'],
                ip_address=get_client_ip(request),
                user_agent=self._get_user_agent(request),
            )

        except AuthenticationError as e:
            return self._error_response(e)

        if result.get('requires_2fa'):
            return Response({
                'success': True,
                'requires2FA': True,
                'tempToken': result['temp_token'],
                'methods': result['methods'],
                'message': 'Two-factor authentication required',
            })

        return self._login_response(result)

    @action(detail=False, methods=['post'], url_path='2fa/challenge')
    def two_factor_challenge(self, request):
        """
        Verify 2FA code during login.
        """
        serializer = TwoFactorChallengeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = self.auth_service.complete_two_factor_login(
                temp_token=serializer.validated_data['tempToken'],
                code=serializer.validated_data['code'],
                ip_address=get_client_ip(request),
                user_agent=self._get_user_agent(request),
            )

        except AuthenticationError as e:
            return self._error_response(e)

        return self._login_response(result)

    # ==================== TOKEN MANAGEMENT ====================

    @action(detail=False, methods=['post'])
    def refresh(self, request):
        """
        Rotate the refresh cookie and return a new access token.
        """
        try:
            result = self.auth_service.refresh_tokens(self._get_refresh_cookie(request))

        except AuthenticationError as e:
            response = self._error_response(e)
            self._clear_refresh_cookie(response)
            return response

        response = Response({
            'success': True,
            'accessToken': result['access_token'],
        })
        self._set_refresh_cookie(response, result['refresh_token'])
        return response

    @action(detail=False, methods=['post'])
    def logout(self, request):
        """
        End the session of the refresh cookie and clear it.
        """
        self.auth_service.logout(self._get_refresh_cookie(request))

        response = Response({
            'success': True,
            'message': 'Logged out successfully',
        })
        self._clear_refresh_cookie(response)
        return response

    @action(detail=False, methods=['get'])
    def verify(self, request):
        """
        Resolve the bearer token to its user.
        """
        try:
            user = self.auth_service.verify_access_token(get_bearer_token(request))

            return Response({
                'success': True,
                'user': user,
            })

        except AuthenticationError as e:
            return self._error_response(e)

    # ==================== PASSWORD MANAGEMENT ====================

    @action(detail=False, methods=['post'], url_path='reset-password/request')
    def reset_password_request(self, request):
        """
        Request password reset. Same answer whether or not the email exists.
        """
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            message = self.auth_service.request_password_reset(
                email=serializer.validated_data['email'],
                ip_address=get_client_ip(request),
            )

            return Response({
                'success': True,
                'message': message,
            })

        except AuthenticationError as e:
            return self._error_response(e)

    @action(detail=False, methods=['post'], url_path='reset-password/confirm')
    def reset_password_confirm(self, request):
        """
        Reset password with token.
        """
        serializer = PasswordResetConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self.auth_service.reset_password(
                token=serializer.validated_data['token'],
                new_password=serializer.validated_data['password'],
            )

            return Response({
                'success': True,
                'message': 'Password has been reset. Please log in with your new password.',
            })

        except AuthenticationError as e:
            return self._error_response(e)

    # ==================== 2FA MANAGEMENT ====================

    @action(detail=False, methods=['post'], url_path='2fa/setup', authentication_classes=[JWTAuthentication], permission_classes=[IsAuthenticated])
    def setup_2fa(self, request):
        """
        Initiate 2FA setup.
        """
        serializer = TwoFactorSetupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = self.auth_service.setup_2fa(
                actor=request.user,
                user_id=serializer.validated_data['userId'],
            )

            return Response({
                'success': True,
                'qrCode': result['qr_code'],
                'secret': result['secret'],
                'message': 'Scan the QR code with your authenticator app',
            })

        except AuthenticationError as e:
            return self._error_response(e)

    @action(detail=False, methods=['post'], url_path='2fa/verify-setup', authentication_classes=[JWTAuthentication], permission_classes=[IsAuthenticated])
    def verify_2fa_setup(self, request):
        """
        Confirm 2FA setup with verification code.
        """
        serializer = TwoFactorCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self.auth_service.verify_2fa_setup(
                user=request.user,
                code=serializer.validated_data['code'],
            )

            return Response({
                'success': True,
                'twoFactorEnabled': True,
                'message': 'Two-factor authentication enabled',
            })

        except AuthenticationError as e:
            return self._error_response(e)

    @action(detail=False, methods=['post'], url_path='2fa/disable', authentication_classes=[JWTAuthentication], permission_classes=[IsAuthenticated])
    def disable_2fa(self, request):
        """
        Disable 2FA.
        """
        serializer = TwoFactorDisableSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            self.auth_service.disable_2fa(
                user=request.user,
                password=serializer.validated_data['password'],
            )

            return Response({
                'success': True,
                'twoFactorEnabled': False,
                'message': 'Two-factor authentication disabled',
            })

        except AuthenticationError as e:
            return self._error_response(e)

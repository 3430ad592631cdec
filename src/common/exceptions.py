# common/exceptions.py
"""
Custom Exception Classes and Exception Handler
"""

import logging
import traceback
from typing import Optional

from django.conf import settings
from django.db import InterfaceError, OperationalError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTIONS
# =============================================================================

class BaseAPIException(APIException):
    """Base exception class for all custom API exceptions"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'internal_error'

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(detail=detail, code=code)
        self.error_code = error_code or self.error_code


class NotFoundException(BaseAPIException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'not_found'


# DRF's own exceptions, and the Http404 it converts, carry no error_code
DRF_ERROR_CODES = {
    drf_exceptions.ValidationError: 'validation_error',
    drf_exceptions.ParseError: 'validation_error',
    drf_exceptions.NotAuthenticated: 'unauthorized',
    drf_exceptions.AuthenticationFailed: 'unauthorized',
    drf_exceptions.PermissionDenied: 'forbidden',
    drf_exceptions.NotFound: 'not_found',
    Http404: 'not_found',
    drf_exceptions.MethodNotAllowed: 'method_not_allowed',
    drf_exceptions.Throttled: 'rate_limited',
}


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    Custom exception handler for DRF.
    Every error leaves the API as {"success": false, "error": {...}}.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    if isinstance(exc, AuthenticationError):
        return Response(
            {
                'success': False,
                'error': {
                    'code': exc.code,
                    'message': exc.message,
                    'details': exc.details,
                    'request_id': request_id,
                }
            },
            status=exc.status_code
        )

    response = exception_handler(exc, context)

    if response is not None:
        return format_error_response(exc, response, request_id)

    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error(f"Database unavailable: {exc}", extra={'request_id': request_id})
        return Response(
            {
                'success': False,
                'error': {
                    'code': 'store_unavailable',
                    'message': 'Unable to connect to database. Please try again later.',
                    'request_id': request_id,
                }
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={'request_id': request_id}
    )

    if settings.DEBUG:
        return Response(
            {
                'success': False,
                'error': {
                    'code': 'internal_error',
                    'message': str(exc),
                    'type': type(exc).__name__,
                    'traceback': traceback.format_exc().split('\n'),
                    'request_id': request_id,
                }
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response(
        {
            'success': False,
            'error': {
                'code': 'internal_error',
                'message': 'Internal server error',
                'request_id': request_id,
            }
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Format error response in consistent structure"""
    error_code = getattr(exc, 'error_code', None) or DRF_ERROR_CODES.get(type(exc), 'error')

    error_data = {
        'success': False,
        'error': {
            'code': error_code,
            'message': get_error_message(exc, response),
            'request_id': request_id,
        }
    }

    if isinstance(response.data, dict) and 'detail' not in response.data:
        # Field-level validation errors from DRF
        error_data['error']['details'] = response.data

    response.data = error_data
    return response


def get_error_message(exc, response: Response) -> str:
    """Extract error message from exception or response"""
    if isinstance(exc, drf_exceptions.ValidationError):
        return 'Validation error'

    if hasattr(exc, 'detail'):
        if isinstance(exc.detail, str):
            return exc.detail
        if isinstance(exc.detail, list) and exc.detail:
            return str(exc.detail[0])
        if isinstance(exc.detail, dict):
            return exc.detail.get('detail', str(exc.detail))

    if isinstance(response.data, dict):
        return response.data.get('detail', str(response.data))

    return str(response.data)

# common/middleware.py
"""
Request tracing and access logging middleware.
"""

import time
import uuid
import logging
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


def get_client_ip(request: HttpRequest) -> str:
    """
    Client address used for rate limiting.

    X-Forwarded-For is only read behind TRUSTED_PROXY_COUNT proxies; each
    of them appends one hop, so the client is that many entries from the
    right. Anything further left was written by the client.
    """
    remote_addr = request.META.get('REMOTE_ADDR', '') or 'unknown'
    proxy_count = getattr(settings, 'TRUSTED_PROXY_COUNT', 0)
    if not proxy_count:
        return remote_addr

    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    hops = [hop.strip() for hop in forwarded_for.split(',') if hop.strip()]
    if len(hops) < proxy_count:
        return remote_addr
    return hops[-proxy_count]


class RequestIDMiddleware:
    """
    Attaches a request ID to every request and echoes it in the
    X-Request-ID response header. An incoming X-Request-ID is reused.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.request_id = request_id

        response = self.get_response(request)
        response['X-Request-ID'] = request_id
        return response


class LoggingMiddleware:
    """
    Logs one line per request with method, path, status and duration.
    """

    SKIP_PATHS = ('/api/schema/', '/api/docs/')

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path.startswith(self.SKIP_PATHS):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = (time.monotonic() - started) * 1000

        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"{request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'status_code': response.status_code,
                'duration_ms': round(duration_ms, 2),
                'ip_address': get_client_ip(request),
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response

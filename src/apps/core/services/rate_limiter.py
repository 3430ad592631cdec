# apps/core/services/rate_limiter.py
"""
Per-identifier sliding-window rate limiting.

Attempt timestamps live in the `rate_limit` cache (Redis in deployment),
so every worker process shares the same windows.
"""

import logging
import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import caches

from apps.core.exceptions import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window counter keyed by (action, identifier).

    A request rejected by the limiter is not recorded, so hammering a
    closed window does not push its reopening further out.
    """

    def __init__(self, cache=None, clock: Callable[[], float] = time.time):
        self.cache = cache or self._get_cache()
        self.clock = clock

    def _get_cache(self):
        """Get cache backend for rate limiting."""
        if 'rate_limit' in settings.CACHES:
            return caches['rate_limit']
        return caches['default']

    @staticmethod
    def _cache_key(action: str, identifier: str) -> str:
        return f"ratelimit:{action}:{identifier}"

    def check(self, identifier: str, action: str, limit: int, window: int) -> int:
        """
        Record one attempt or reject it.

        Args:
            identifier: Client identifier, normally the client IP
            action: Name of the guarded operation
            limit: Attempts allowed per window
            window: Window length in seconds

        Returns:
            Attempts remaining in the current window

        Raises:
            RateLimitedError: If the window already holds `limit` attempts
        """
        if not getattr(settings, 'AUTH_SETTINGS', {}).get('RATE_LIMITING_ENABLED', True):
            return limit

        allowed, remaining, reset_at = self._check_rate_limit(
            self._cache_key(action, identifier), limit, window
        )

        if not allowed:
            retry_after = max(1, int(reset_at - self.clock()) + 1)
            logger.warning(f"Rate limit exceeded for {action} from {identifier}")
            raise RateLimitedError(retry_after)

        return remaining

    def _check_rate_limit(
        self,
        cache_key: str,
        limit: int,
        window: int
    ) -> Tuple[bool, int, float]:
        """
        Check if request is within rate limit using sliding window.

        Returns:
            Tuple of (allowed, remaining, reset_at)
        """
        now = self.clock()
        window_start = now - window

        try:
            request_times = self.cache.get(cache_key, [])
        except Exception as e:
            logger.warning(f"Rate limit check failed: {e}")
            return True, limit, now + window

        # Filter to only requests within window
        request_times = [t for t in request_times if t > window_start]

        if len(request_times) >= limit:
            return False, 0, min(request_times) + window

        request_times.append(now)
        try:
            self.cache.set(cache_key, request_times, timeout=window + 10)
        except Exception as e:
            logger.warning(f"Rate limit update failed: {e}")

        return True, limit - len(request_times), min(request_times) + window

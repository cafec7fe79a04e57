"""
Rate limiting middleware.

Implements fixed-window rate limiting per client address with limits
taken from settings.
"""

import hashlib
import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

from core.metrics import errors_total
from core.security_log import client_ip, log_security_event


class RateLimitMiddleware:
    """
    Rate limiting middleware per client IP.

    Counters are stored in cache.
    Default limits: 100 requests per 15 minutes per client.
    """

    DEFAULT_RATE_LIMIT = 100
    DEFAULT_WINDOW_SECONDS = 15 * 60
    EXEMPT_PATHS = ("/health", "/ready")

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response
        config = getattr(settings, "RATE_LIMIT", {})
        self.limit = int(config.get("MAX_REQUESTS", self.DEFAULT_RATE_LIMIT))
        self.window = max(1, int(config.get("WINDOW_SECONDS", self.DEFAULT_WINDOW_SECONDS)))
        self.enabled = bool(config.get("ENABLED", True))

    def _get_rate_limit_key(self, ip: str) -> str:
        """
        Generate cache key for rate limiting.

        Args:
            ip: Client address

        Returns:
            Cache key string
        """
        # Hash the address so raw IPs are not stored in cache keys
        ip_hash = hashlib.sha256(ip.encode()).hexdigest()[:16]
        return f"rate_limit:{ip_hash}"

    def _check_rate_limit(self, ip: str) -> Tuple[bool, int, int]:
        """
        Check if request is within rate limit.

        Args:
            ip: Client address

        Returns:
            Tuple of (is_allowed, remaining, reset_time)
        """
        window_start = int(time.time() / self.window)
        full_key = f"{self._get_rate_limit_key(ip)}:{window_start}"
        reset_time = (window_start + 1) * self.window

        current_count = cache.get(full_key, 0)
        if current_count >= self.limit:
            return False, 0, reset_time

        try:
            new_count = cache.incr(full_key, 1)
        except ValueError:
            # Key doesn't exist yet
            cache.set(full_key, 1, timeout=self.window)
            new_count = 1

        return True, max(0, self.limit - new_count), reset_time

    def _is_exempt(self, path: str) -> bool:
        return path == "/" or path.startswith(self.EXEMPT_PATHS)

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response with rate limit headers
        """
        if not self.enabled or self._is_exempt(request.path):
            return self.get_response(request)

        ip = client_ip(request)
        is_allowed, remaining, reset_time = self._check_rate_limit(ip)

        if not is_allowed:
            errors_total.labels(error_type="rate_limit_exceeded", endpoint=request.path).inc()
            log_security_event("rate_limit_exceeded", f"path={request.path}", ip)
            response = JsonResponse(
                {
                    "success": False,
                    "code": "RATE_LIMIT_EXCEEDED",
                    "message": "Too many requests from this IP, please try again later.",
                },
                status=429,
            )
        else:
            response = self.get_response(request)

        # Rate limit headers (RFC 6585)
        response["X-RateLimit-Limit"] = str(self.limit)
        response["X-RateLimit-Remaining"] = str(remaining)
        response["X-RateLimit-Reset"] = str(reset_time)
        if not is_allowed:
            response["Retry-After"] = str(max(0, reset_time - int(time.time())))

        return response

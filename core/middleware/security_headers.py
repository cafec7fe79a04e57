"""
Security headers middleware.

Adds the standard hardening headers to every response.
"""

from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

DEFAULT_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Content-Security-Policy": "default-src 'self'",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware:
    """
    Middleware that adds security headers to all HTTP responses.

    ``SECURITY_HEADERS`` in settings overrides individual values; a value
    of None drops that header.
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response
        headers = dict(DEFAULT_SECURITY_HEADERS)
        headers.update(getattr(settings, "SECURITY_HEADERS", {}))
        self.headers = {name: value for name, value in headers.items() if value is not None}

    def __call__(self, request: HttpRequest) -> HttpResponse:
        response = self.get_response(request)
        for name, value in self.headers.items():
            response[name] = value
        return response

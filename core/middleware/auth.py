"""
Request authentication middleware.

This middleware validates signed envelopes for client subscription APIs
and the admin secret for admin APIs.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from django.http import HttpRequest, HttpResponse, JsonResponse

from api.exceptions import domain_error, error_body
from authentication.domain.signing import SIGNATURE_FIELD, SUBJECT_FIELD, mask_signature
from core.domain.exceptions import (
    DomainException,
    InvalidAdminCredentialsError,
    InvalidSignatureError,
    ValidationError,
)
from core.metrics import authentication_failures_total
from core.security_log import client_ip, log_auth_attempt, log_security_event

logger = logging.getLogger(__name__)

CLIENT_API_PATH = re.compile(r"^/api/(?:v1/[\w-]+/)?(?:verify|subscribe|renew|cancel)/?$")
ADMIN_API_PATH = re.compile(r"^/api/(?:v1/[\w-]+/)?admin/")

ADMIN_SECRET_FIELD = "adminPassword"


class ServiceNotConfigured(Exception):
    """Raised when a request arrives before the service container exists."""


class RequestAuthenticationMiddleware:
    """
    Middleware for request authentication.

    This middleware:
    1. Validates the signed envelope and HMAC signature on client APIs
    2. Validates the admin secret on admin APIs
    3. Returns 400 for malformed envelopes and 401 for bad credentials,
       without saying which check failed
    """

    def __init__(self, get_response):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Authenticate subscription API requests."""
        if request.method != "POST":
            return self.get_response(request)

        try:
            if ADMIN_API_PATH.match(request.path):
                self._authenticate_admin_api(request)
            elif CLIENT_API_PATH.match(request.path):
                self._authenticate_client_api(request)
        except DomainException as e:
            body, status = domain_error(e, getattr(request, "correlation_id", None))
            return JsonResponse(body, status=status)
        except ServiceNotConfigured:
            return JsonResponse(error_body("INTERNAL_ERROR", "Service not configured"), status=503)

        return self.get_response(request)

    def _get_container(self):
        from subscriptions.container import get_container

        container = get_container()
        if container is None:
            raise ServiceNotConfigured()
        return container

    def _parse_body(self, request: HttpRequest) -> Dict[str, Any]:
        """
        Parse the JSON body.

        Raises:
            ValidationError: If the body is not a JSON object
        """
        try:
            payload = json.loads(request.body or b"{}")
        except (ValueError, UnicodeDecodeError) as e:
            raise ValidationError("Invalid JSON body") from e
        if not isinstance(payload, dict):
            raise ValidationError("JSON body must be an object")
        return payload

    def _authenticate_client_api(self, request: HttpRequest) -> None:
        """
        Authenticate a client API request with its signed envelope.

        Args:
            request: HTTP request

        Raises:
            ValidationError: If the envelope is malformed
            InvalidSignatureError: If the signature does not match
        """
        container = self._get_container()
        if not container.config.require_signed_requests:
            return

        payload = self._parse_body(request)
        ip = client_ip(request)
        signer = container.request_signer
        validation = signer.validate_envelope(payload)
        if not validation.valid:
            authentication_failures_total.labels(reason="invalid_envelope").inc()
            log_security_event("invalid_envelope", "; ".join(validation.errors), ip)
            raise ValidationError("Invalid request", errors=validation.errors)

        subject = payload[SUBJECT_FIELD]
        if not signer.verify(payload, payload[SIGNATURE_FIELD]):
            authentication_failures_total.labels(reason="invalid_signature").inc()
            log_auth_attempt(subject, ip, False)
            raise InvalidSignatureError(
                f"Signature mismatch for {subject} "
                f"(signature {mask_signature(payload[SIGNATURE_FIELD])})"
            )

        log_auth_attempt(subject, ip, True)
        request.authenticated_subject = subject  # type: ignore

    def _authenticate_admin_api(self, request: HttpRequest) -> None:
        """
        Authenticate an admin API request with the admin secret.

        Args:
            request: HTTP request

        Raises:
            ValidationError: If the admin secret is missing
            InvalidAdminCredentialsError: If the admin secret does not match
        """
        container = self._get_container()
        payload = self._parse_body(request)

        secret = payload.get(ADMIN_SECRET_FIELD)
        if not isinstance(secret, str) or not secret:
            raise ValidationError("Invalid request", errors=["Admin password is required"])

        if not container.credential_verifier.verify(secret):
            authentication_failures_total.labels(reason="invalid_admin_secret").inc()
            log_security_event(
                "invalid_admin_password",
                f"path={request.path}",
                client_ip(request),
                subject=_subject_hint(payload),
            )
            raise InvalidAdminCredentialsError()

        request.admin_authenticated = True  # type: ignore


def _subject_hint(payload: Dict[str, Any]) -> Optional[str]:
    subject = payload.get(SUBJECT_FIELD)
    if isinstance(subject, str) and subject.strip():
        return subject.strip()[:254]
    return None

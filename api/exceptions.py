"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error body has the same shape as a normal result:
``{"success": false, "code": ..., "message": ...}``.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticationError,
    DomainException,
    StoreError,
    SubscriptionNotFoundError,
    ValidationError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An internal error occurred"


def error_body(code: str, message: str, errors=None) -> Dict[str, Any]:
    """Build the standard failure body."""
    body: Dict[str, Any] = {"success": False, "code": code, "message": message}
    if errors:
        body["errors"] = errors
    return body


def flatten_errors(detail) -> list:
    """Flatten DRF serializer errors into a list of ``field: message`` strings."""
    if isinstance(detail, dict):
        flattened = []
        for field, messages in detail.items():
            for message in flatten_errors(messages):
                flattened.append(message if field == "non_field_errors" else f"{field}: {message}")
        return flattened
    if isinstance(detail, (list, tuple)):
        flattened = []
        for item in detail:
            flattened.extend(flatten_errors(item))
        return flattened
    return [str(detail)]


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, DRFValidationError):
        response = Response(
            error_body("VALIDATION_ERROR", "Invalid request", flatten_errors(exc.detail)),
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_") if exc.default_code else "API_ERROR"
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.default_detail)
        response.data = error_body(code, detail)
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def domain_error(
    exc: DomainException, trace_id: Optional[str] = None
) -> Tuple[Dict[str, Any], int]:
    """
    Map a domain exception to a public error body and HTTP status.

    Shared by the DRF exception handler and the authentication middleware,
    so both surfaces render failures the same way.

    Args:
        exc: Domain exception
        trace_id: Request trace id for log correlation

    Returns:
        Tuple of (body, status code)
    """
    if isinstance(exc, ValidationError):
        logger.info("Validation failed: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
        return error_body(exc.code, exc.message, exc.errors), status.HTTP_400_BAD_REQUEST

    if isinstance(exc, AuthenticationError):
        # The reason stays in the log only
        logger.warning("Authentication failed: %s", exc.message, extra={"trace_id": trace_id})
        return error_body("UNAUTHORIZED", "Unauthorized"), status.HTTP_401_UNAUTHORIZED

    if isinstance(exc, SubscriptionNotFoundError):
        return error_body(exc.code, exc.message), status.HTTP_200_OK

    if isinstance(exc, StoreError):
        logger.error("Store failure: %s", exc.message, extra={"trace_id": trace_id})
        errors_total.labels(error_type=exc.code.lower(), endpoint="api").inc()
        return error_body("ERROR", GENERIC_ERROR_MESSAGE), status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.error("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return error_body("ERROR", GENERIC_ERROR_MESSAGE), status.HTTP_500_INTERNAL_SERVER_ERROR


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    body, status_code = domain_error(exc, trace_id)
    return Response(body, status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type=type(exc).__name__, endpoint="api").inc()
    response = exception_handler(exc, context)
    if not response:
        response = Response(status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    response.data = error_body("INTERNAL_ERROR", GENERIC_ERROR_MESSAGE)
    return response

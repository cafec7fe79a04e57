"""
Client subscription API views.

These endpoints are used by client software to:
- Verify a subscription
- Subscribe to a plan
- Renew or cancel a subscription

Requests carry a signed envelope that RequestAuthenticationMiddleware has
already checked by the time a view runs.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.subscriptions.serializers import (
    CancelRequestSerializer,
    RenewRequestSerializer,
    SubscribeRequestSerializer,
    SubscriptionResultSerializer,
    VerifyRequestSerializer,
    subscription_plans,
)
from core.config import product_scopes
from core.domain.exceptions import UnknownProductScopeError
from core.domain.value_objects import ResultCode
from core.instrumentation import Status, StatusCode, get_tracer
from subscriptions.application.commands.cancel_subscription import CancelSubscriptionCommand
from subscriptions.application.commands.renew_subscription import RenewSubscriptionCommand
from subscriptions.application.commands.subscribe import SubscribeCommand
from subscriptions.application.handlers.subscription_handlers import (
    CancelSubscriptionHandler,
    RenewSubscriptionHandler,
    SubscribeHandler,
    VerifySubscriptionHandler,
)
from subscriptions.application.queries.verify_subscription import VerifySubscriptionQuery
from subscriptions.container import get_container

DEFAULT_PRODUCT_SCOPE = "default"

tracer = get_tracer(__name__)

SCOPE_PARAMETER = OpenApiParameter(
    name="product_scope",
    type=str,
    location=OpenApiParameter.PATH,
    description="Product scope slug (only on /api/v1/<scope>/ routes)",
)

RESULT_RESPONSES = {
    200: SubscriptionResultSerializer,
    400: {"description": "Bad Request - invalid envelope or fields"},
    401: {"description": "Unauthorized - invalid signature"},
    500: {"description": "Subscription store unavailable"},
}


def resolve_scope(product_scope=None) -> str:
    """
    Resolve the product scope of a request.

    Raises:
        UnknownProductScopeError: If the scope is not configured
    """
    scope = product_scope or DEFAULT_PRODUCT_SCOPE
    if scope not in product_scopes():
        raise UnknownProductScopeError(f"Unknown product scope: {scope}")
    return scope


def state_machine():
    """State machine from the startup container."""
    return get_container().state_machine


def result_response(result, span=None) -> Response:
    """
    Render a normalized result.

    Business failures are HTTP 200 with ``success: false``; only ERROR maps
    to a server error.
    """
    http_status = status.HTTP_200_OK
    if result.code == ResultCode.ERROR:
        http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    if span is not None:
        span.set_attribute("result.code", str(result.code))
        if result.code == ResultCode.ERROR:
            span.set_status(Status(StatusCode.ERROR, result.message))
        else:
            span.set_status(Status(StatusCode.OK))
    return Response(SubscriptionResultSerializer(result).data, status=http_status)


class VerifySubscriptionView(APIView):
    """View for verifying a subscription."""

    @extend_schema(
        operation_id="verify_subscription",
        summary="Verify Subscription",
        description=(
            "Check whether the user has an active subscription. "
            "Requires a signed request envelope (username, timestamp, signature)."
        ),
        tags=["Subscriptions"],
        parameters=[SCOPE_PARAMETER],
        request=VerifyRequestSerializer,
        responses=RESULT_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Verify a subscription."""
        return async_to_sync(self._handle_verify)(request, product_scope)

    async def _handle_verify(self, request: Request, product_scope) -> Response:
        """Async handler for verify."""
        with tracer.start_as_current_span("verify_subscription") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = VerifyRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = VerifySubscriptionHandler(state_machine())
            result = await handler.handle(
                VerifySubscriptionQuery(
                    product_scope=scope, subject_id=serializer.validated_data["username"]
                )
            )
            return result_response(result, span)


class SubscribeView(APIView):
    """View for subscribing to a plan."""

    @extend_schema(
        operation_id="subscribe",
        summary="Subscribe",
        description=(
            "Create (or overwrite) the user's subscription for the chosen plan. "
            "Plans map to durations in days (basic=30, premium=90)."
        ),
        tags=["Subscriptions"],
        parameters=[SCOPE_PARAMETER],
        request=SubscribeRequestSerializer,
        responses=RESULT_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Subscribe a user."""
        return async_to_sync(self._handle_subscribe)(request, product_scope)

    async def _handle_subscribe(self, request: Request, product_scope) -> Response:
        """Async handler for subscribe."""
        with tracer.start_as_current_span("subscribe") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = SubscribeRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            plan = serializer.validated_data["plan"]
            span.set_attribute("plan", plan)

            handler = SubscribeHandler(state_machine())
            result = await handler.handle(
                SubscribeCommand(
                    product_scope=scope,
                    subject_id=serializer.validated_data["username"],
                    duration_days=subscription_plans()[plan],
                )
            )
            return result_response(result, span)


class RenewSubscriptionView(APIView):
    """View for renewing a subscription."""

    @extend_schema(
        operation_id="renew_subscription",
        summary="Renew Subscription",
        description=(
            "Extend an existing subscription by the renewal period, counted "
            "from its current expiry date (also when already expired)."
        ),
        tags=["Subscriptions"],
        parameters=[SCOPE_PARAMETER],
        request=RenewRequestSerializer,
        responses=RESULT_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Renew a subscription."""
        return async_to_sync(self._handle_renew)(request, product_scope)

    async def _handle_renew(self, request: Request, product_scope) -> Response:
        """Async handler for renew."""
        with tracer.start_as_current_span("renew_subscription") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = RenewRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = RenewSubscriptionHandler(state_machine())
            result = await handler.handle(
                RenewSubscriptionCommand(
                    product_scope=scope,
                    subject_id=serializer.validated_data["username"],
                    duration_days=getattr(settings, "SUBSCRIPTION_RENEWAL_DAYS", 30),
                )
            )
            return result_response(result, span)


class CancelSubscriptionView(APIView):
    """View for cancelling a subscription."""

    @extend_schema(
        operation_id="cancel_subscription",
        summary="Cancel Subscription",
        description="Delete the user's subscription.",
        tags=["Subscriptions"],
        parameters=[SCOPE_PARAMETER],
        request=CancelRequestSerializer,
        responses=RESULT_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Cancel a subscription."""
        return async_to_sync(self._handle_cancel)(request, product_scope)

    async def _handle_cancel(self, request: Request, product_scope) -> Response:
        """Async handler for cancel."""
        with tracer.start_as_current_span("cancel_subscription") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = CancelRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CancelSubscriptionHandler(state_machine())
            result = await handler.handle(
                CancelSubscriptionCommand(
                    product_scope=scope, subject_id=serializer.validated_data["username"]
                )
            )
            return result_response(result, span)

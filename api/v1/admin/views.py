"""
Admin subscription API views.

These endpoints are used by operators to:
- Subscribe, renew or cancel a user with an explicit duration
- List subscriptions in a product scope
- Read subscription statistics

Every request carries ``adminPassword``, which RequestAuthenticationMiddleware
has already verified by the time a view runs.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.admin.serializers import (
    AdminCancelRequestSerializer,
    AdminRenewRequestSerializer,
    AdminRequestSerializer,
    AdminSubscribeRequestSerializer,
    SubscriptionListResponseSerializer,
    SubscriptionStatsResponseSerializer,
)
from api.v1.subscriptions.views import (
    RESULT_RESPONSES,
    SCOPE_PARAMETER,
    resolve_scope,
    result_response,
    state_machine,
)
from core.domain.value_objects import ResultCode
from core.instrumentation import Status, StatusCode, get_tracer
from core.security_log import client_ip, log_admin_action
from subscriptions.application.commands.cancel_subscription import CancelSubscriptionCommand
from subscriptions.application.commands.renew_subscription import RenewSubscriptionCommand
from subscriptions.application.commands.subscribe import SubscribeCommand
from subscriptions.application.handlers.subscription_handlers import (
    CancelSubscriptionHandler,
    ListSubscriptionsHandler,
    RenewSubscriptionHandler,
    SubscribeHandler,
    SubscriptionStatsHandler,
)
from subscriptions.application.queries.list_subscriptions import (
    ListSubscriptionsQuery,
    SubscriptionStatsQuery,
)

tracer = get_tracer(__name__)

ADMIN_RESPONSES = {
    **RESULT_RESPONSES,
    401: {"description": "Unauthorized - invalid admin password"},
}


def _scan_response(result, serializer_class, span) -> Response:
    span.set_attribute("result.code", str(result.code))
    if result.code == ResultCode.ERROR:
        span.set_status(Status(StatusCode.ERROR, result.message))
        return Response(
            {"success": False, "code": str(result.code), "message": result.message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    span.set_status(Status(StatusCode.OK))
    return Response(serializer_class(result).data, status=status.HTTP_200_OK)


class AdminSubscribeView(APIView):
    """View for creating a subscription with an explicit duration."""

    @extend_schema(
        operation_id="admin_subscribe",
        summary="Admin Subscribe",
        description="Create (or overwrite) a subscription for 1 to 3650 days.",
        tags=["Admin"],
        parameters=[SCOPE_PARAMETER],
        request=AdminSubscribeRequestSerializer,
        responses=ADMIN_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Subscribe a user."""
        return async_to_sync(self._handle_subscribe)(request, product_scope)

    async def _handle_subscribe(self, request: Request, product_scope) -> Response:
        """Async handler for admin subscribe."""
        with tracer.start_as_current_span("admin_subscribe") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = AdminSubscribeRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            username = serializer.validated_data["username"]
            duration = serializer.validated_data["duration"]
            span.set_attribute("duration_days", duration)

            log_admin_action("subscribe", username, client_ip(request))
            handler = SubscribeHandler(state_machine())
            result = await handler.handle(
                SubscribeCommand(product_scope=scope, subject_id=username, duration_days=duration)
            )
            return result_response(result, span)


class AdminRenewView(APIView):
    """View for renewing a subscription with an explicit duration."""

    @extend_schema(
        operation_id="admin_renew",
        summary="Admin Renew",
        description="Extend an existing subscription from its current expiry date.",
        tags=["Admin"],
        parameters=[SCOPE_PARAMETER],
        request=AdminRenewRequestSerializer,
        responses=ADMIN_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Renew a subscription."""
        return async_to_sync(self._handle_renew)(request, product_scope)

    async def _handle_renew(self, request: Request, product_scope) -> Response:
        """Async handler for admin renew."""
        with tracer.start_as_current_span("admin_renew") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = AdminRenewRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            username = serializer.validated_data["username"]
            duration = serializer.validated_data["duration"]
            span.set_attribute("duration_days", duration)

            log_admin_action("renew", username, client_ip(request))
            handler = RenewSubscriptionHandler(state_machine())
            result = await handler.handle(
                RenewSubscriptionCommand(
                    product_scope=scope, subject_id=username, duration_days=duration
                )
            )
            return result_response(result, span)


class AdminCancelView(APIView):
    """View for cancelling a subscription."""

    @extend_schema(
        operation_id="admin_cancel",
        summary="Admin Cancel",
        description="Delete a user's subscription.",
        tags=["Admin"],
        parameters=[SCOPE_PARAMETER],
        request=AdminCancelRequestSerializer,
        responses=ADMIN_RESPONSES,
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Cancel a subscription."""
        return async_to_sync(self._handle_cancel)(request, product_scope)

    async def _handle_cancel(self, request: Request, product_scope) -> Response:
        """Async handler for admin cancel."""
        with tracer.start_as_current_span("admin_cancel") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            serializer = AdminCancelRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            username = serializer.validated_data["username"]

            log_admin_action("cancel", username, client_ip(request))
            handler = CancelSubscriptionHandler(state_machine())
            result = await handler.handle(
                CancelSubscriptionCommand(product_scope=scope, subject_id=username)
            )
            return result_response(result, span)


class AdminListSubscriptionsView(APIView):
    """View for listing every subscription in a scope."""

    @extend_schema(
        operation_id="admin_list_subscriptions",
        summary="List Subscriptions",
        description="Full listing with derived status; today is evaluated once per listing.",
        tags=["Admin"],
        parameters=[SCOPE_PARAMETER],
        request=AdminRequestSerializer,
        responses={
            200: SubscriptionListResponseSerializer,
            401: {"description": "Unauthorized - invalid admin password"},
            500: {"description": "Subscription store unavailable"},
        },
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """List subscriptions."""
        return async_to_sync(self._handle_list)(request, product_scope)

    async def _handle_list(self, request: Request, product_scope) -> Response:
        """Async handler for listing."""
        with tracer.start_as_current_span("admin_list_subscriptions") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            log_admin_action("list", "*", client_ip(request))
            handler = ListSubscriptionsHandler(state_machine())
            result = await handler.handle(ListSubscriptionsQuery(product_scope=scope))
            span.set_attribute("subscriptions.count", len(result.subscriptions))
            return _scan_response(result, SubscriptionListResponseSerializer, span)


class AdminSubscriptionStatsView(APIView):
    """View for subscription statistics."""

    @extend_schema(
        operation_id="admin_subscription_stats",
        summary="Subscription Statistics",
        description="Total, active and expired counts from one scan of the scope.",
        tags=["Admin"],
        parameters=[SCOPE_PARAMETER],
        request=AdminRequestSerializer,
        responses={
            200: SubscriptionStatsResponseSerializer,
            401: {"description": "Unauthorized - invalid admin password"},
            500: {"description": "Subscription store unavailable"},
        },
    )
    def post(self, request: Request, product_scope: str = None) -> Response:
        """Return statistics."""
        return async_to_sync(self._handle_stats)(request, product_scope)

    async def _handle_stats(self, request: Request, product_scope) -> Response:
        """Async handler for statistics."""
        with tracer.start_as_current_span("admin_subscription_stats") as span:
            scope = resolve_scope(product_scope)
            span.set_attribute("product_scope", scope)

            log_admin_action("stats", "*", client_ip(request))
            handler = SubscriptionStatsHandler(state_machine())
            result = await handler.handle(SubscriptionStatsQuery(product_scope=scope))
            return _scan_response(result, SubscriptionStatsResponseSerializer, span)

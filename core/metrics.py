"""
Prometheus metrics for the subscription auth service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Subscription metrics
subscriptions_created_total = Counter(
    "subscriptions_created_total",
    "Total subscriptions created or overwritten",
    ["product_scope"],
)

subscriptions_renewed_total = Counter(
    "subscriptions_renewed_total",
    "Total subscriptions renewed",
    ["product_scope"],
)

subscriptions_cancelled_total = Counter(
    "subscriptions_cancelled_total",
    "Total subscriptions cancelled",
    ["product_scope"],
)

subscription_verifications_total = Counter(
    "subscription_verifications_total",
    "Total subscription verifications by result",
    ["product_scope", "result"],
)

# Security metrics
authentication_failures_total = Counter(
    "authentication_failures_total",
    "Total rejected requests by reason",
    ["reason"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)

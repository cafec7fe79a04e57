"""
URL configuration for admin subscription endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("subscribe", views.AdminSubscribeView.as_view(), name="admin-subscribe"),
    path("renew", views.AdminRenewView.as_view(), name="admin-renew"),
    path("cancel", views.AdminCancelView.as_view(), name="admin-cancel"),
    path(
        "subscriptions",
        views.AdminListSubscriptionsView.as_view(),
        name="admin-list-subscriptions",
    ),
    path("stats", views.AdminSubscriptionStatsView.as_view(), name="admin-stats"),
]

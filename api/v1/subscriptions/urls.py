"""
URL configuration for client subscription endpoints.

Included both at /api/ (default product scope) and at
/api/v1/<product_scope>/.
"""

from django.urls import path

from api.v1.subscriptions import views

urlpatterns = [
    path("verify", views.VerifySubscriptionView.as_view(), name="verify-subscription"),
    path("subscribe", views.SubscribeView.as_view(), name="subscribe"),
    path("renew", views.RenewSubscriptionView.as_view(), name="renew-subscription"),
    path("cancel", views.CancelSubscriptionView.as_view(), name="cancel-subscription"),
]

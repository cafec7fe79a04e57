"""
WSGI config for SubscriptionAuthService project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "SubscriptionAuthService.settings.prod")

application = get_wsgi_application()

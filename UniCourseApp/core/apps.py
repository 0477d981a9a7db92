"""Core app configuration and startup checks (like a production-safe secret key)."""

from django.apps import AppConfig
from django.conf import settings
from django.core.checks import register, Error

class CoreConfig(AppConfig):
    """AppConfig registering a system check for the secret key outside DEBUG."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "UniCourseApp.core"

    def ready(self):
        """Register a Django system check refusing the development secret key in production."""
        @register()
        def secret_key_check(app_configs, **kwargs):
            if not settings.DEBUG and settings.SECRET_KEY == settings.DEV_SECRET_KEY:
                return [Error("DJANGO_SECRET_KEY must be set when DJANGO_DEBUG is off", id="core.E001")]
            return []

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Accounts and seller applications"

    def ready(self):
        from infrastructure.tracing import configure_tracing

        try:
            configure_tracing(enabled=getattr(settings, "TRACING_ENABLED", False))
        except Exception as e:
            logger.warning(f"Tracing setup failed, continuing without spans: {e}")

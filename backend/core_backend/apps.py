from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        """
        Log the settlement configuration once at startup so misconfigured
        deployments are visible in the first lines of the log.
        """
        from django.conf import settings

        logger.info(
            f"POS core ready: currency={settings.POS_DEFAULT_CURRENCY}, "
            f"tax_rate={settings.POS_DEFAULT_TAX_RATE}, "
            f"settlement_retries={settings.POS_SETTLEMENT_MAX_RETRIES}"
        )

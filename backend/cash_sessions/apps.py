from django.apps import AppConfig


class CashSessionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cash_sessions"
    verbose_name = "Cash Sessions"

from django.contrib import admin

from core_backend.admin import ReadOnlyAdminMixin, TenantAdminMixin
from .models import CashSession


@admin.register(CashSession)
class CashSessionAdmin(ReadOnlyAdminMixin, TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "status",
        "opening_cash_cents",
        "expected_cash_cents",
        "closing_cash_cents",
        "variance_cents",
        "opened_at",
        "closed_at",
    )
    list_filter = ("status", "opened_at")
    date_hierarchy = "opened_at"

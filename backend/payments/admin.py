from django.contrib import admin

from core_backend.admin import ReadOnlyAdminMixin, TenantAdminMixin
from .models import Payment, Tip


class TipInline(admin.TabularInline):
    model = Tip
    extra = 0
    fields = ("amount_cents", "recorded_by", "created_at")
    readonly_fields = fields
    can_delete = False

    def get_queryset(self, request):
        """Use all_objects to bypass TenantManager, Django will filter by parent FK"""
        return Tip.all_objects.all()

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(ReadOnlyAdminMixin, TenantAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "order",
        "provider",
        "status",
        "amount_cents",
        "currency",
        "created_at",
    )
    list_filter = ("provider", "status", "created_at")
    search_fields = ("id", "order__order_number")
    readonly_fields = ("id", "created_at", "metadata")
    inlines = [TipInline]


@admin.register(Tip)
class TipAdmin(ReadOnlyAdminMixin, TenantAdminMixin, admin.ModelAdmin):
    list_display = ("id", "order", "payment", "amount_cents", "recorded_by", "created_at")
    search_fields = ("order__order_number",)

from django.contrib import admin

from core_backend.admin import TenantAdminMixin
from payments.money import format_money
from .models import DiningTable, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product_name", "quantity", "unit_price_cents", "discount_percent", "status", "get_line_item_total")
    readonly_fields = fields
    can_delete = False

    def get_line_item_total(self, obj):
        return format_money(obj.order.currency, obj.line_total_cents)

    get_line_item_total.short_description = "Line Item Total"

    def get_queryset(self, request):
        """Use all_objects to bypass TenantManager, Django will filter by parent FK"""
        return OrderItem.all_objects.select_related("order")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(TenantAdminMixin, admin.ModelAdmin):
    """
    Orders are changed through the API services only; the admin is a
    read-only view of their state and totals.
    """

    list_display = (
        "order_number",
        "status",
        "table",
        "cashier",
        "get_total_display",
        "tip_cents",
        "opened_at",
        "closed_at",
    )
    list_filter = ("status", "opened_at")
    search_fields = ("order_number", "id")
    ordering = ("-opened_at",)
    readonly_fields = (
        "id",
        "order_number",
        "status",
        "currency",
        "tax_rate",
        "subtotal_cents",
        "discount_cents",
        "tax_cents",
        "total_cents",
        "tip_cents",
        "opened_at",
        "sent_to_kitchen_at",
        "closed_at",
        "updated_at",
    )
    fieldsets = (
        ("Order", {"fields": ("id", "order_number", "status", "table", "cashier", "notes")}),
        (
            "Totals",
            {
                "fields": (
                    "currency",
                    "tax_rate",
                    "subtotal_cents",
                    "discount_cents",
                    "tax_cents",
                    "total_cents",
                    "tip_cents",
                )
            },
        ),
        ("Timestamps", {"fields": ("opened_at", "sent_to_kitchen_at", "closed_at", "updated_at")}),
    )
    inlines = [OrderItemInline]

    @admin.display(description="Total", ordering="total_cents")
    def get_total_display(self, obj):
        return format_money(obj.currency, obj.total_cents)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DiningTable)
class DiningTableAdmin(TenantAdminMixin, admin.ModelAdmin):
    list_display = ("name", "seats", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)

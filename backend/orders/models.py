import re
import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class DiningTable(models.Model):
    """A table an order can be seated at. Informational only."""

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='dining_tables'
    )
    name = models.CharField(max_length=50, help_text=_("e.g. 'T4' or 'Patio 2'"))
    seats = models.PositiveSmallIntegerField(default=4)
    is_active = models.BooleanField(default=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        default_manager_name = 'all_objects'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['tenant', 'name'], name='unique_table_name_per_tenant'),
        ]

    def __str__(self):
        return self.name


class Order(models.Model):
    """
    One sale or tab.

    Money fields are integers in the minor unit of `currency` and are always
    written by OrderCalculator from the current items; nothing edits them by hand.
    """

    class OrderStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")
        IN_KITCHEN = "IN_KITCHEN", _("In Kitchen")
        READY = "READY", _("Ready")
        FOR_PAYMENT = "FOR_PAYMENT", _("For Payment")
        PAID = "PAID", _("Paid")
        CANCELLED = "CANCELLED", _("Cancelled")

    TERMINAL_STATUSES = (OrderStatus.PAID, OrderStatus.CANCELLED)
    KITCHEN_FLOW_STATUSES = (OrderStatus.OPEN, OrderStatus.IN_KITCHEN, OrderStatus.READY)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='orders'
    )
    order_number = models.CharField(max_length=20, blank=True)
    status = models.CharField(
        max_length=12, choices=OrderStatus.choices, default=OrderStatus.OPEN
    )

    table = models.ForeignKey(
        DiningTable,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
    )
    cashier = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders_as_cashier',
    )

    # --- Snapshotted from the tenant at creation ---
    currency = models.CharField(max_length=3)
    tax_rate = models.DecimalField(max_digits=6, decimal_places=4, default=Decimal("0"))

    # --- Financial fields (minor units) ---
    subtotal_cents = models.BigIntegerField(default=0)
    discount_cents = models.BigIntegerField(default=0)
    tax_cents = models.BigIntegerField(default=0)
    total_cents = models.BigIntegerField(default=0)
    tip_cents = models.BigIntegerField(default=0)

    notes = models.TextField(blank=True)

    opened_at = models.DateTimeField(default=timezone.now, editable=False)
    sent_to_kitchen_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text=_("Set when the order becomes PAID or CANCELLED."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        default_manager_name = 'all_objects'
        ordering = ["-opened_at", "order_number"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=['tenant', 'status'], name='order_tenant_stat_idx'),
            models.Index(fields=['tenant', 'opened_at'], name='order_tenant_opened_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "order_number"],
                name="unique_order_number_per_tenant",
            ),
        ]

    def __str__(self):
        return f"Order {self.order_number or self.pk} - {self.status}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def amount_due_cents(self):
        """Total plus accumulated tips: what captured payments must reach."""
        return self.total_cents + self.tip_cents

    def save(self, *args, **kwargs):
        if self.order_number:
            super().save(*args, **kwargs)
            return

        max_retries = 5
        for _attempt in range(max_retries):
            self.order_number = self._generate_sequential_order_number()
            try:
                # Savepoint so a duplicate number does not poison an outer transaction
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError:
                # Another request took this number; try the next one
                self._state.adding = True
                continue
        raise IntegrityError(
            "Failed to generate a unique order number after multiple retries."
        )

    def _generate_sequential_order_number(self):
        """
        Next sequential number for this tenant: ORD-00001, ORD-00002, ...
        """
        prefix = "ORD-"
        last_order = (
            Order.all_objects.filter(
                tenant_id=self.tenant_id,
                order_number__startswith=prefix,
            )
            .order_by("-order_number")
            .first()
        )

        next_number = 1
        if last_order:
            match = re.match(rf"^{re.escape(prefix)}(\d+)$", last_order.order_number)
            if match:
                next_number = int(match.group(1)) + 1

        return f"{prefix}{next_number:05d}"


class OrderItem(models.Model):
    """
    One line within an order (a kitchen ticket).

    Name and unit price are copied from the catalog when the line is added;
    later catalog price changes never alter this line.
    """

    class ItemStatus(models.TextChoices):
        NEW = "NEW", _("New")
        SENT = "SENT", _("Sent to Kitchen")
        IN_PROGRESS = "IN_PROGRESS", _("In Progress")
        READY = "READY", _("Ready")
        SERVED = "SERVED", _("Served")
        VOID = "VOID", _("Void")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='order_items'
    )
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    # Price/name snapshot
    product_ref = models.CharField(
        max_length=64,
        blank=True,
        help_text=_("Catalog identifier at the time of sale. Informational only."),
    )
    product_name = models.CharField(max_length=200)
    unit_price_cents = models.PositiveIntegerField()
    quantity = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(99)],
    )
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )

    status = models.CharField(
        max_length=12, choices=ItemStatus.choices, default=ItemStatus.NEW
    )
    notes = models.TextField(
        blank=True, help_text=_("Customer notes, e.g., 'no onions'")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    status_changed_at = models.DateTimeField(null=True, blank=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        default_manager_name = 'all_objects'
        verbose_name = _("Order Item")
        verbose_name_plural = _("Order Items")
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['tenant', 'order'], name='item_tenant_order_idx'),
            models.Index(fields=['tenant', 'status'], name='item_tenant_stat_idx'),
        ]

    def __str__(self):
        return f"{self.quantity} of {self.product_name} in Order {self.order.order_number}"

    @property
    def line_total_cents(self):
        return self.unit_price_cents * self.quantity

    @property
    def is_billable(self):
        return self.status != self.ItemStatus.VOID

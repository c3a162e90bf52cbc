import uuid
from django.db import models
from django.db.models import Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class PaymentQuerySet(models.QuerySet):
    def captured(self):
        return self.filter(status=Payment.PaymentStatus.CAPTURED)

    def total_cents(self) -> int:
        return self.aggregate(total=Sum("amount_cents"))["total"] or 0


class Payment(models.Model):
    """
    Money captured against an order by one settlement action.

    Immutable once CAPTURED. `amount_cents` is the bill portion applied plus
    any tip that rode on the payment; the split is kept in `metadata`:

        {"split_index": 1, "applied_cents": 900, "tip_cents": 100,
         "received_cents": 1000, "change_due_cents": 0}
    """

    class Provider(models.TextChoices):
        CASH = "CASH", _("Cash")
        CARD = "CARD", _("Card")
        BANK = "BANK", _("Bank Transfer")
        WALLET = "WALLET", _("Wallet")

    class PaymentStatus(models.TextChoices):
        CAPTURED = "CAPTURED", _("Captured")
        FAILED = "FAILED", _("Failed")
        VOID = "VOID", _("Void")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    order = models.ForeignKey(
        'orders.Order', on_delete=models.PROTECT, related_name="payments"
    )
    provider = models.CharField(max_length=10, choices=Provider.choices)
    status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.CAPTURED,
    )
    amount_cents = models.BigIntegerField()
    currency = models.CharField(max_length=3)
    metadata = models.JSONField(default=dict, blank=True)

    processed_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_payments',
    )
    # Settable so cash session windows can be exercised deterministically
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = TenantManager.from_queryset(PaymentQuerySet)()
    all_objects = PaymentQuerySet.as_manager()

    class Meta:
        default_manager_name = 'all_objects'
        ordering = ["-created_at"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        indexes = [
            models.Index(fields=['tenant', 'order'], name='payment_tenant_order_idx'),
            models.Index(fields=['tenant', 'provider', 'status', 'created_at'], name='payment_ten_prov_st_dt_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount_cents__gte=0),
                name="payment_amount_non_negative",
            ),
        ]

    def __str__(self):
        return f"Payment {self.id} ({self.provider}) {self.amount_cents} {self.currency} - {self.status}"

    @property
    def tip_cents(self):
        return self.metadata.get("tip_cents", 0)

    @property
    def change_due_cents(self):
        return self.metadata.get("change_due_cents", 0)


class Tip(models.Model):
    """A tip recorded with a payment. Order.tip_cents is the running sum."""

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='tips'
    )
    order = models.ForeignKey(
        'orders.Order', on_delete=models.PROTECT, related_name="tips"
    )
    payment = models.ForeignKey(
        Payment, on_delete=models.PROTECT, related_name="tips"
    )
    amount_cents = models.PositiveIntegerField()
    recorded_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_tips',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        default_manager_name = 'all_objects'
        ordering = ["-created_at"]

    def __str__(self):
        return f"Tip {self.amount_cents} on {self.order_id}"

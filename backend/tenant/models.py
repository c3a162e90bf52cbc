import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


def default_currency():
    return settings.POS_DEFAULT_CURRENCY


def default_tax_rate():
    return settings.POS_DEFAULT_TAX_RATE


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each customer (restaurant, business) is a tenant.

    The currency and tax rate are copied onto every new order so later
    changes here never alter historical totals.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the tenant (e.g., Joe's Pizza)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier used in API paths (/api/tenants/<slug>/)"
    )

    currency = models.CharField(
        max_length=3,
        default=default_currency,
        help_text="ISO 4217 code; all money is stored in this currency's minor unit"
    )
    tax_rate = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=default_tax_rate,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Fraction applied to the discounted subtotal (0.0825 = 8.25%)"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot access the system"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_active'], name='tenants_is_active_idx'),
        ]

    def __str__(self):
        return self.name

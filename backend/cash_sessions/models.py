import uuid
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class CashSession(models.Model):
    """
    One cash-drawer shift.

    At most one OPEN session exists per tenant (enforced by a partial unique
    constraint). Closing is terminal: the counted amount, expected amount and
    variance are written once and never edited.
    """

    class SessionStatus(models.TextChoices):
        OPEN = "OPEN", _("Open")
        CLOSED = "CLOSED", _("Closed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='cash_sessions'
    )
    status = models.CharField(
        max_length=6, choices=SessionStatus.choices, default=SessionStatus.OPEN
    )
    currency = models.CharField(max_length=3)

    opening_cash_cents = models.PositiveBigIntegerField()
    closing_cash_cents = models.PositiveBigIntegerField(null=True, blank=True)
    expected_cash_cents = models.BigIntegerField(null=True, blank=True)
    variance_cents = models.BigIntegerField(
        null=True,
        blank=True,
        help_text=_("closing - expected; negative is a shortage"),
    )

    opened_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='opened_cash_sessions',
    )
    closed_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='closed_cash_sessions',
    )
    opened_at = models.DateTimeField(default=timezone.now)
    closed_at = models.DateTimeField(null=True, blank=True)

    notes = models.CharField(max_length=500, blank=True)
    closing_notes = models.CharField(max_length=500, blank=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        default_manager_name = 'all_objects'
        ordering = ['-opened_at']
        verbose_name = _("Cash Session")
        verbose_name_plural = _("Cash Sessions")
        indexes = [
            models.Index(fields=['tenant', 'status'], name='cash_sess_tenant_stat_idx'),
            models.Index(fields=['tenant', 'opened_at'], name='cash_sess_tenant_open_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['tenant'],
                condition=models.Q(status='OPEN'),
                name='unique_open_cash_session_per_tenant',
            ),
        ]

    def __str__(self):
        return f"Cash session {self.id} ({self.status}) opened {self.opened_at:%Y-%m-%d %H:%M}"

    @property
    def is_open(self):
        return self.status == self.SessionStatus.OPEN

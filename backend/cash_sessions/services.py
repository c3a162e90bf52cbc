from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
import logging

from core_backend.exceptions import ConflictError, NotFoundError
from core_backend.utils.db import atomic_with_retry
from payments.models import Payment
from payments.money import format_money
from .models import CashSession

logger = logging.getLogger(__name__)


class CashSessionService:
    """Opens and reconciles cash-drawer sessions."""

    @staticmethod
    def get_session(tenant, session_id, lock=False) -> CashSession:
        queryset = CashSession.all_objects.all()
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=session_id, tenant=tenant)
        except (CashSession.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError("Cash session not found.")

    @staticmethod
    def get_current_session(tenant):
        return (
            CashSession.all_objects.filter(tenant=tenant, status=CashSession.SessionStatus.OPEN)
            .order_by("-opened_at")
            .first()
        )

    @staticmethod
    def cash_captured_between(tenant, start, end) -> int:
        """Σ amount of CASH payments CAPTURED for the tenant in [start, end)."""
        return (
            Payment.all_objects.filter(
                tenant=tenant,
                provider=Payment.Provider.CASH,
                created_at__gte=start,
                created_at__lt=end,
            )
            .captured()
            .total_cents()
        )

    @staticmethod
    def open_session(tenant, opening_cash_cents: int, opened_by=None, notes="") -> CashSession:
        """
        Raises:
            ConflictError: the tenant already has an OPEN session
        """
        try:
            with transaction.atomic():
                if CashSession.all_objects.filter(
                    tenant=tenant, status=CashSession.SessionStatus.OPEN
                ).exists():
                    raise ConflictError(
                        "There is already an open cash session. Please close it before opening a new one."
                    )
                session = CashSession.all_objects.create(
                    tenant=tenant,
                    currency=tenant.currency,
                    opening_cash_cents=opening_cash_cents,
                    opened_by=opened_by,
                    notes=(notes or "").strip(),
                )
        except IntegrityError:
            # A concurrent open won the partial unique constraint
            raise ConflictError(
                "There is already an open cash session. Please close it before opening a new one."
            )

        logger.info(
            f"Cash session {session.id} opened for {tenant.slug} with "
            f"{format_money(session.currency, opening_cash_cents)}"
        )
        return session

    @staticmethod
    @atomic_with_retry
    def close_session(tenant, session_id, closing_cash_cents: int, closed_by=None, closing_notes="") -> CashSession:
        """
        expected = opening + Σ CASH payments captured in [opened_at, now)
        variance = closing − expected

        Raises:
            NotFoundError: unknown session or another tenant's
            ConflictError: session already closed
        """
        session = CashSessionService.get_session(tenant, session_id, lock=True)
        if not session.is_open:
            raise ConflictError("Session is already closed.")

        now = timezone.now()
        expected = session.opening_cash_cents + CashSessionService.cash_captured_between(
            tenant, session.opened_at, now
        )

        session.status = CashSession.SessionStatus.CLOSED
        session.closing_cash_cents = closing_cash_cents
        session.expected_cash_cents = expected
        session.variance_cents = closing_cash_cents - expected
        session.closing_notes = (closing_notes or "").strip()
        session.closed_by = closed_by
        session.closed_at = now
        session.save()

        log = logger.warning if session.variance_cents else logger.info
        log(
            f"Cash session {session.id} closed for {tenant.slug}: expected "
            f"{format_money(session.currency, expected)}, counted "
            f"{format_money(session.currency, closing_cash_cents)}, variance "
            f"{format_money(session.currency, session.variance_cents)}"
        )
        return session

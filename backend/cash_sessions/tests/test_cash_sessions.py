import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework import status

from core_backend.exceptions import ConflictError, NotFoundError
from cash_sessions.models import CashSession
from cash_sessions.services import CashSessionService
from orders.models import OrderItem
from payments.models import Payment
from payments.services import SettlementService


def record_payment(order, amount_cents, provider=Payment.Provider.CASH, at=None, **fields):
    return Payment.all_objects.create(
        tenant=order.tenant,
        order=order,
        provider=provider,
        amount_cents=amount_cents,
        currency=order.currency,
        created_at=at or timezone.now(),
        **fields,
    )


@pytest.fixture
def open_session(tenant_a, cashier_user_tenant_a):
    session = CashSessionService.open_session(tenant_a, 500, opened_by=cashier_user_tenant_a)
    # Start the shift an hour ago so payments can be placed inside and outside it
    CashSession.all_objects.filter(pk=session.pk).update(opened_at=timezone.now() - timedelta(hours=1))
    session.refresh_from_db()
    return session


@pytest.mark.django_db
class TestOpenSession:

    def test_open_snapshots_currency(self, tenant_b, cashier_user_tenant_b):
        session = CashSessionService.open_session(tenant_b, 10000, opened_by=cashier_user_tenant_b, notes="  float  ")

        assert session.status == CashSession.SessionStatus.OPEN
        assert session.currency == "EUR"
        assert session.notes == "float"
        assert session.closed_at is None

    def test_second_open_session_is_conflict(self, open_session, tenant_a):
        with pytest.raises(ConflictError):
            CashSessionService.open_session(tenant_a, 100)

        assert CashSession.all_objects.filter(tenant=tenant_a).count() == 1

    def test_open_sessions_are_per_tenant(self, open_session, tenant_b):
        session = CashSessionService.open_session(tenant_b, 0)
        assert session.is_open

    def test_current_session(self, open_session, tenant_a, tenant_b):
        assert CashSessionService.get_current_session(tenant_a) == open_session
        assert CashSessionService.get_current_session(tenant_b) is None


@pytest.mark.django_db
class TestCloseSession:

    def test_variance_from_cash_captured_during_session(self, open_session, tenant_a, served_order):
        inside = open_session.opened_at + timedelta(minutes=10)
        record_payment(served_order, 1500, at=inside)
        record_payment(served_order, 800, at=inside + timedelta(minutes=5))

        session = CashSessionService.close_session(tenant_a, open_session.id, 2750)

        assert session.status == CashSession.SessionStatus.CLOSED
        assert session.expected_cash_cents == 2800
        assert session.variance_cents == -50
        assert session.closed_at is not None

    def test_drawer_counts_applied_amount_and_tip_not_cash_tendered(self, open_session, tenant_a, order_factory):
        cash_order = order_factory([("Pizza", 1000, 1)], item_status=OrderItem.ItemStatus.SERVED)
        card_order = order_factory([("Salad", 800, 1)], item_status=OrderItem.ItemStatus.SERVED)

        # 1500 handed over for a 1000 bill plus a 200 tip: 500 goes back as change
        result = SettlementService.pay(
            tenant_a, cash_order.id, provider=Payment.Provider.CASH, amount_cents=1500, tip_cents=200
        )
        SettlementService.pay(tenant_a, card_order.id, provider=Payment.Provider.CARD)

        assert result["payment"]["change_due_cents"] == 500
        assert result["payment"]["amount_cents"] == 1200

        session = CashSessionService.close_session(tenant_a, open_session.id, 1700)

        assert session.expected_cash_cents == 500 + 1200
        assert session.variance_cents == 0

    def test_exact_count_has_zero_variance(self, open_session, tenant_a):
        session = CashSessionService.close_session(tenant_a, open_session.id, 500, closing_notes="all good")

        assert session.expected_cash_cents == 500
        assert session.variance_cents == 0
        assert session.closing_notes == "all good"

    def test_closing_twice_is_conflict(self, open_session, tenant_a):
        CashSessionService.close_session(tenant_a, open_session.id, 500)

        with pytest.raises(ConflictError):
            CashSessionService.close_session(tenant_a, open_session.id, 600)

        open_session.refresh_from_db()
        assert open_session.closing_cash_cents == 500

    def test_new_session_after_close(self, open_session, tenant_a):
        CashSessionService.close_session(tenant_a, open_session.id, 500)

        assert CashSessionService.open_session(tenant_a, 200).is_open

    def test_other_tenant_session_is_not_found(self, open_session, tenant_b):
        with pytest.raises(NotFoundError):
            CashSessionService.close_session(tenant_b, open_session.id, 500)


@pytest.mark.django_db
class TestCashCapturedBetween:

    def test_only_captured_cash_inside_window(self, tenant_a, served_order, order_tenant_b):
        start = timezone.now() - timedelta(hours=2)
        end = timezone.now()

        record_payment(served_order, 1000, at=start + timedelta(minutes=1))
        record_payment(served_order, 700, provider=Payment.Provider.CARD, at=start + timedelta(minutes=2))
        record_payment(served_order, 300, at=start - timedelta(minutes=1))
        record_payment(served_order, 400, at=end)
        record_payment(served_order, 250, at=start + timedelta(minutes=3), status=Payment.PaymentStatus.VOID)
        record_payment(order_tenant_b, 900, at=start + timedelta(minutes=4))

        assert CashSessionService.cash_captured_between(tenant_a, start, end) == 1000


@pytest.mark.django_db
class TestCashSessionApi:

    def url(self, tenant, *parts):
        path = "".join(f"{p}/" for p in parts)
        return f"/api/tenants/{tenant.slug}/cash-sessions/{path}"

    def test_open_current_close(self, authenticated_client_tenant_a, tenant_a):
        opened = authenticated_client_tenant_a.post(
            self.url(tenant_a), {"opening_cash_cents": 5000}, format="json"
        )
        assert opened.status_code == status.HTTP_201_CREATED
        assert opened.data["opened_by_name"] == "Cal Cashier"

        current = authenticated_client_tenant_a.get(self.url(tenant_a, "current"))
        assert current.data["id"] == opened.data["id"]

        closed = authenticated_client_tenant_a.patch(
            self.url(tenant_a, opened.data["id"]), {"closing_cash_cents": 5100}, format="json"
        )
        assert closed.status_code == status.HTTP_200_OK
        assert closed.data["status"] == CashSession.SessionStatus.CLOSED
        assert closed.data["variance_cents"] == 100
        assert closed.data["closed_by_name"] == "Cal Cashier"

        after = authenticated_client_tenant_a.get(self.url(tenant_a, "current"))
        assert after.data is None

    def test_duplicate_open_is_409(self, authenticated_client_tenant_a, tenant_a, open_session):
        response = authenticated_client_tenant_a.post(
            self.url(tenant_a), {"opening_cash_cents": 100}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["code"] == "conflict"

    def test_negative_float_is_400(self, authenticated_client_tenant_a, tenant_a):
        response = authenticated_client_tenant_a.post(
            self.url(tenant_a), {"opening_cash_cents": -1}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "opening_cash_cents" in response.data["details"]

    def test_list_filters_by_status(self, authenticated_client_tenant_a, tenant_a, open_session):
        CashSessionService.close_session(tenant_a, open_session.id, 500)
        CashSessionService.open_session(tenant_a, 0)

        response = authenticated_client_tenant_a.get(self.url(tenant_a), {"status": "CLOSED"})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data["results"]] == [str(open_session.id)]

    def test_other_tenant_sessions_hidden(self, authenticated_client_tenant_a, tenant_a, tenant_b):
        foreign = CashSessionService.open_session(tenant_b, 0)

        listing = authenticated_client_tenant_a.get(self.url(tenant_a))
        detail = authenticated_client_tenant_a.get(self.url(tenant_a, foreign.id))

        assert listing.data["count"] == 0
        assert detail.status_code == status.HTTP_404_NOT_FOUND

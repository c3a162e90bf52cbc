import pytest
from datetime import datetime, timedelta
from django.utils import timezone
from rest_framework import status

from core_backend.base import normalize_datetime_value
from payments.models import Payment
from payments.services import SettlementService


def payments_url(tenant, *parts):
    path = "".join(f"{p}/" for p in parts)
    return f"/api/tenants/{tenant.slug}/payments/{path}"


@pytest.mark.django_db
class TestPaymentLedger:

    def test_lists_tenant_payments(self, authenticated_client_tenant_a, tenant_a, served_order, order_tenant_b):
        SettlementService.pay(tenant_a, served_order.id, provider=Payment.Provider.CASH, amount_cents=1500)

        response = authenticated_client_tenant_a.get(payments_url(tenant_a))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["count"] == 1
        row = response.data["results"][0]
        assert row["order_number"] == served_order.order_number
        assert row["amount_cents"] == 1000
        assert row["change_due_cents"] == 500

    def test_filter_by_provider(self, authenticated_client_tenant_a, tenant_a, served_order):
        SettlementService.pay(tenant_a, served_order.id, provider=Payment.Provider.CARD, amount_cents=400)
        SettlementService.pay(tenant_a, served_order.id, provider=Payment.Provider.CASH)

        response = authenticated_client_tenant_a.get(payments_url(tenant_a), {"provider": "CARD"})

        assert [row["amount_cents"] for row in response.data["results"]] == [400]

    def test_date_only_upper_bound_includes_whole_day(self, authenticated_client_tenant_a, tenant_a, served_order):
        result = SettlementService.pay(tenant_a, served_order.id, provider=Payment.Provider.CARD)
        evening = timezone.make_aware(datetime(2025, 11, 11, 18, 0))
        Payment.all_objects.filter(pk=result["payment"]["id"]).update(created_at=evening)

        included = authenticated_client_tenant_a.get(payments_url(tenant_a), {"created_at__lte": "2025-11-11"})
        excluded = authenticated_client_tenant_a.get(payments_url(tenant_a), {"created_at__lte": "2025-11-10"})

        assert included.data["count"] == 1
        assert excluded.data["count"] == 0

    def test_ledger_is_read_only(self, authenticated_client_tenant_a, tenant_a, served_order):
        response = authenticated_client_tenant_a.post(
            payments_url(tenant_a), {"order": str(served_order.id), "amount_cents": 1}, format="json"
        )
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED

    def test_other_tenant_payment_is_404(self, authenticated_client_tenant_a, tenant_a, tenant_b, order_tenant_b):
        from orders.services import OrderItemService

        OrderItemService.add_item(tenant_b, order_tenant_b.id, "Fries", 300)
        result = SettlementService.pay(tenant_b, order_tenant_b.id, provider=Payment.Provider.CARD)

        response = authenticated_client_tenant_a.get(payments_url(tenant_a, result["payment"]["id"]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestNormalizeDatetimeValue:

    def test_date_bounds(self):
        start = normalize_datetime_value("2025-11-11")
        end = normalize_datetime_value("2025-11-11", is_end=True)

        assert start.hour == 0 and start.minute == 0
        assert end - start == timedelta(days=1, microseconds=-1)
        assert timezone.is_aware(start)

    def test_full_datetime_kept(self):
        value = normalize_datetime_value("2025-11-11T10:30:00Z")
        assert (value.hour, value.minute) == (10, 30)

    def test_garbage_is_none(self):
        assert normalize_datetime_value("not-a-date") is None

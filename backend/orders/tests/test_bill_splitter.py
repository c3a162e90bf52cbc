"""
Bill split previews are advisory: they read the order, compute shares and
write nothing.
"""
import pytest

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from orders.models import OrderItem
from orders.services import BillSplitService
from orders.services.split_service import split_by_amount, split_equally
from payments.models import Payment
from payments.services import SettlementService


def amounts(preview):
    return [share["amount_cents"] for share in preview["shares"]]


class TestSplitEquallyFunction:

    def test_first_share_absorbs_remainder(self):
        shares = split_equally(1000, 3)
        assert [s.amount_cents for s in shares] == [334, 333, 333]
        assert [s.index for s in shares] == [1, 2, 3]
        assert [s.label for s in shares] == ["Person 1", "Person 2", "Person 3"]
        assert not any(s.is_paid for s in shares)

    @pytest.mark.parametrize("outstanding", [1, 7, 999, 1001, 123457])
    @pytest.mark.parametrize("parts", [2, 3, 7, 50])
    def test_shares_sum_to_outstanding(self, outstanding, parts):
        assert sum(s.amount_cents for s in split_equally(outstanding, parts)) == outstanding

    @pytest.mark.parametrize("parts", [0, 1, 51])
    def test_split_count_bounds(self, parts):
        with pytest.raises(ValidationError):
            split_equally(1000, parts)

    def test_custom_labels(self):
        shares = split_equally(1000, 2, labels=["Ana"])
        assert [s.label for s in shares] == ["Ana", "Person 2"]


class TestSplitByAmountFunction:

    def test_sum_below_outstanding_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            split_by_amount(1000, [400, 500])
        assert exc_info.value.details["sum_cents"] == 900

    def test_exact_sum_accepted(self):
        assert [s.amount_cents for s in split_by_amount(1000, [400, 600])] == [400, 600]

    def test_overpayment_accepted(self):
        assert [s.amount_cents for s in split_by_amount(1000, [600, 600])] == [600, 600]

    @pytest.mark.parametrize("bad", [[], [1000, 0], [1200, -200]])
    def test_invalid_amounts(self, bad):
        with pytest.raises(ValidationError):
            split_by_amount(1000, bad)


@pytest.mark.django_db
class TestPreview:

    def test_equal_split_of_order(self, served_order):
        preview = BillSplitService.preview(served_order.tenant, served_order.id, "equally", number_of_splits=3)

        assert preview["outstanding_cents"] == 1000
        assert preview["split_type"] == "equally"
        assert amounts(preview) == [334, 333, 333]
        assert all(share["is_paid"] is False for share in preview["shares"])

    def test_split_uses_remaining_balance(self, served_order):
        SettlementService.pay(
            served_order.tenant, served_order.id, provider=Payment.Provider.CARD, amount_cents=400
        )

        preview = BillSplitService.preview(served_order.tenant, served_order.id, "equally", number_of_splits=2)

        assert preview["outstanding_cents"] == 600
        assert amounts(preview) == [300, 300]

    def test_preview_has_no_side_effects(self, served_order):
        first = BillSplitService.preview(served_order.tenant, served_order.id, "equally", number_of_splits=4)
        second = BillSplitService.preview(served_order.tenant, served_order.id, "equally", number_of_splits=4)

        assert first == second
        assert not Payment.all_objects.filter(order=served_order).exists()

    def test_by_amount_below_outstanding(self, served_order):
        with pytest.raises(ValidationError):
            BillSplitService.preview(served_order.tenant, served_order.id, "by_amount", amounts=[300, 300])

    def test_unknown_split_type(self, served_order):
        with pytest.raises(ValidationError):
            BillSplitService.preview(served_order.tenant, served_order.id, "by_mood")

    def test_paid_order_cannot_be_split(self, served_order):
        SettlementService.pay(served_order.tenant, served_order.id, provider=Payment.Provider.CARD)

        with pytest.raises(ConflictError):
            BillSplitService.preview(served_order.tenant, served_order.id, "equally", number_of_splits=2)

    def test_empty_order_cannot_be_split(self, order_factory):
        order = order_factory()

        with pytest.raises(ConflictError):
            BillSplitService.preview(order.tenant, order.id, "equally", number_of_splits=2)

    def test_other_tenant_order(self, tenant_a, order_tenant_b):
        with pytest.raises(NotFoundError):
            BillSplitService.preview(tenant_a, order_tenant_b.id, "equally", number_of_splits=2)


@pytest.mark.django_db
class TestSplitByItems:

    @pytest.fixture
    def tipped_order(self, order_factory):
        """Total 10000 with a 1000 tip already recorded."""
        return order_factory(
            [("Steak", 4000, 1), ("Wine", 3000, 2)],
            item_status=OrderItem.ItemStatus.SERVED,
            tip_cents=1000,
        )

    def item_ids(self, order, *names):
        return [order.items.get(product_name=name).id for name in names]

    def test_proportional_tip(self, tipped_order):
        steak, wine = self.item_ids(tipped_order, "Steak", "Wine")

        preview = BillSplitService.preview(
            tipped_order.tenant, tipped_order.id, "by_items", items=[[steak], [wine]]
        )

        assert tipped_order.total_cents == 10000
        # 4000 + 1000 * 4000 / 10000; 6000 + 1000 * 6000 / 10000
        assert amounts(preview) == [4400, 6600]
        assert preview["shares"][0]["item_ids"] == [steak]

    def test_tip_allocation_rounds_half_even(self, order_factory):
        order = order_factory(
            [("A", 300, 1), ("B", 700, 1)],
            item_status=OrderItem.ItemStatus.SERVED,
            tip_cents=5,
        )
        a, b = self.item_ids(order, "A", "B")

        preview = BillSplitService.preview(order.tenant, order.id, "by_items", items=[[a], [b]])

        # 5 * 300 / 1000 = 1.5 -> 2; 5 * 700 / 1000 = 3.5 -> 4
        assert amounts(preview) == [302, 704]

    def test_unknown_item_rejected(self, tipped_order):
        with pytest.raises(ValidationError):
            BillSplitService.preview(tipped_order.tenant, tipped_order.id, "by_items", items=[[987654]])

    def test_item_from_another_order_rejected(self, tipped_order, open_order):
        foreign = open_order.items.first().id

        with pytest.raises(ValidationError):
            BillSplitService.preview(tipped_order.tenant, tipped_order.id, "by_items", items=[[foreign]])

    def test_duplicate_item_rejected(self, tipped_order):
        steak, wine = self.item_ids(tipped_order, "Steak", "Wine")

        with pytest.raises(ValidationError):
            BillSplitService.preview(
                tipped_order.tenant, tipped_order.id, "by_items", items=[[steak, wine], [steak]]
            )

    def test_empty_group_rejected(self, tipped_order):
        steak, _wine = self.item_ids(tipped_order, "Steak", "Wine")

        with pytest.raises(ValidationError):
            BillSplitService.preview(tipped_order.tenant, tipped_order.id, "by_items", items=[[steak], []])

    def test_void_item_rejected(self, order_factory):
        order = order_factory([("Steak", 4000, 1)], item_status=OrderItem.ItemStatus.SERVED)
        void = OrderItem.all_objects.create(
            tenant=order.tenant,
            order=order,
            product_name="Soup",
            unit_price_cents=500,
            status=OrderItem.ItemStatus.VOID,
        )

        with pytest.raises(ValidationError):
            BillSplitService.preview(order.tenant, order.id, "by_items", items=[[void.id]])

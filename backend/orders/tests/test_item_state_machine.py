"""
Per-item kitchen lifecycle: NEW -> SENT -> IN_PROGRESS -> READY -> SERVED,
VOID from any non-terminal state. No skipping, no going back.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from orders.models import Order, OrderItem
from orders.services import OrderService, OrderItemService
from payments.models import Payment
from payments.services import SettlementService

OrderStatus = Order.OrderStatus
ItemStatus = OrderItem.ItemStatus


def set_status(order, item, status):
    return OrderItemService.update_item(order.tenant, order.id, item.id, status=status)


@pytest.fixture
def sent_order(open_order):
    return OrderService.send_to_kitchen(open_order.tenant, open_order.id)


@pytest.mark.django_db
class TestItemTransitions:

    def test_full_chain_drives_order_status(self, order_factory):
        order = order_factory([("Pizza", 1000, 1)])
        item = order.items.get()
        OrderService.send_to_kitchen(order.tenant, order.id)

        expected = [
            (ItemStatus.IN_PROGRESS, OrderStatus.IN_KITCHEN),
            (ItemStatus.READY, OrderStatus.READY),
            (ItemStatus.SERVED, OrderStatus.FOR_PAYMENT),
        ]
        for item_status, order_status in expected:
            item = set_status(order, item, item_status)
            order.refresh_from_db()
            assert item.status == item_status
            assert item.status_changed_at is not None
            assert order.status == order_status

    def test_skipping_steps_is_rejected(self, sent_order):
        item = sent_order.items.first()

        with pytest.raises(ValidationError):
            set_status(sent_order, item, ItemStatus.SERVED)

        item.refresh_from_db()
        assert item.status == ItemStatus.SENT

    def test_going_back_is_rejected(self, ready_order):
        item = ready_order.items.first()

        with pytest.raises(ValidationError):
            set_status(ready_order, item, ItemStatus.IN_PROGRESS)

    def test_same_status_is_a_no_op(self, sent_order):
        item = sent_order.items.first()

        item = set_status(sent_order, item, ItemStatus.SENT)

        assert item.status == ItemStatus.SENT
        assert item.status_changed_at is not None

    def test_unknown_status_is_rejected(self, sent_order):
        with pytest.raises(ValidationError):
            set_status(sent_order, sent_order.items.first(), "BURNT")

    def test_void_from_sent(self, sent_order):
        item = sent_order.items.get(product_name="Lasagna")

        set_status(sent_order, item, ItemStatus.VOID)

        sent_order.refresh_from_db()
        assert sent_order.total_cents == 1000

    def test_served_is_terminal(self, served_order):
        item = served_order.items.first()

        with pytest.raises(ValidationError):
            set_status(served_order, item, ItemStatus.VOID)

    def test_void_is_terminal(self, order_factory):
        order = order_factory([("Soup", 400, 1)], item_status=ItemStatus.VOID)

        with pytest.raises(ValidationError):
            set_status(order, order.items.first(), ItemStatus.SENT)

    def test_voiding_last_active_item_reopens_order(self, ready_order):
        for item in ready_order.items.all():
            set_status(ready_order, item, ItemStatus.VOID)

        ready_order.refresh_from_db()
        assert ready_order.status == OrderStatus.OPEN
        assert ready_order.total_cents == 0

    def test_unknown_item_is_not_found(self, open_order):
        with pytest.raises(NotFoundError):
            OrderItemService.update_item(open_order.tenant, open_order.id, 999999, status=ItemStatus.SENT)


@pytest.mark.django_db
class TestItemEdits:

    def test_new_item_quantity_edit_recomputes_totals(self, open_order):
        item = open_order.items.get(product_name="Margherita")

        OrderItemService.update_item(open_order.tenant, open_order.id, item.id, quantity=4)

        open_order.refresh_from_db()
        assert open_order.subtotal_cents == 4 * 500 + 1000

    def test_discount_edit(self, open_order):
        item = open_order.items.get(product_name="Lasagna")

        OrderItemService.update_item(
            open_order.tenant, open_order.id, item.id, discount_percent=Decimal("25")
        )

        open_order.refresh_from_db()
        assert open_order.discount_cents == 250
        assert open_order.total_cents == 1750

    def test_sent_item_cannot_be_edited(self, sent_order):
        item = sent_order.items.first()

        with pytest.raises(ConflictError):
            OrderItemService.update_item(sent_order.tenant, sent_order.id, item.id, quantity=3)

    def test_quantity_out_of_range(self, open_order):
        item = open_order.items.first()

        with pytest.raises(ValidationError):
            OrderItemService.update_item(open_order.tenant, open_order.id, item.id, quantity=100)


@pytest.mark.django_db
class TestAddItem:

    def test_add_snapshots_name_and_price(self, open_order):
        item = OrderItemService.add_item(
            open_order.tenant, open_order.id, "Tiramisu", 650, quantity=2, product_ref="SKU-42"
        )

        open_order.refresh_from_db()
        assert item.status == ItemStatus.NEW
        assert item.product_ref == "SKU-42"
        assert open_order.subtotal_cents == 2000 + 1300

    def test_add_to_ready_order_reopens_it(self, ready_order):
        OrderItemService.add_item(ready_order.tenant, ready_order.id, "Coffee", 300)

        ready_order.refresh_from_db()
        assert ready_order.status == OrderStatus.OPEN

    def test_add_to_for_payment_order_reopens_it(self, served_order):
        OrderItemService.add_item(served_order.tenant, served_order.id, "Coffee", 300)

        served_order.refresh_from_db()
        assert served_order.status == OrderStatus.OPEN
        assert served_order.total_cents == 1300

    def test_add_to_paid_order_rejected(self, served_order):
        SettlementService.pay(served_order.tenant, served_order.id, provider=Payment.Provider.CARD)

        with pytest.raises(ConflictError):
            OrderItemService.add_item(served_order.tenant, served_order.id, "Coffee", 300)

    @pytest.mark.parametrize("quantity,price", [(0, 100), (100, 100), (1, -1)])
    def test_add_rejects_out_of_range(self, open_order, quantity, price):
        with pytest.raises(ValidationError):
            OrderItemService.add_item(open_order.tenant, open_order.id, "Bad", price, quantity=quantity)

    def test_add_to_other_tenant_order(self, tenant_a, order_tenant_b):
        with pytest.raises(NotFoundError):
            OrderItemService.add_item(tenant_a, order_tenant_b.id, "Fries", 300)


@pytest.mark.django_db
class TestBulkAdvance:

    def test_mark_all_ready_leaves_new_and_later_items(self, order_factory):
        order = order_factory([("Pizza", 1000, 1)])
        OrderService.send_to_kitchen(order.tenant, order.id)
        tenant = order.tenant
        in_progress = OrderItemService.add_item(tenant, order.id, "Salad", 400)
        OrderService.send_to_kitchen(tenant, order.id)
        set_status(order, in_progress, ItemStatus.IN_PROGRESS)
        fresh = OrderItemService.add_item(tenant, order.id, "Soda", 200)

        moved = OrderItemService.advance_all(tenant, order.id, ItemStatus.READY)

        assert moved == 2
        statuses = dict(order.items.values_list("product_name", "status"))
        assert statuses == {
            "Pizza": ItemStatus.READY,
            "Salad": ItemStatus.READY,
            "Soda": ItemStatus.NEW,
        }
        fresh.refresh_from_db()
        assert fresh.status == ItemStatus.NEW

    def test_mark_all_served_moves_order_to_payment(self, sent_order):
        moved = OrderItemService.advance_all(sent_order.tenant, sent_order.id, ItemStatus.SERVED)

        sent_order.refresh_from_db()
        assert moved == 2
        assert sent_order.status == OrderStatus.FOR_PAYMENT
        assert set(sent_order.items.values_list("status", flat=True)) == {ItemStatus.SERVED}

    def test_mark_all_ready_is_idempotent(self, sent_order):
        OrderItemService.advance_all(sent_order.tenant, sent_order.id, ItemStatus.READY)

        assert OrderItemService.advance_all(sent_order.tenant, sent_order.id, ItemStatus.READY) == 0

    def test_served_items_not_pulled_back_to_ready(self, sent_order):
        item = sent_order.items.first()
        for status in (ItemStatus.IN_PROGRESS, ItemStatus.READY, ItemStatus.SERVED):
            set_status(sent_order, item, status)

        OrderItemService.advance_all(sent_order.tenant, sent_order.id, ItemStatus.READY)

        item.refresh_from_db()
        assert item.status == ItemStatus.SERVED

    def test_invalid_bulk_target(self, sent_order):
        with pytest.raises(ValidationError):
            OrderItemService.advance_all(sent_order.tenant, sent_order.id, ItemStatus.IN_PROGRESS)


@pytest.mark.django_db
class TestVoidAfterPartialPayment:

    def test_void_below_captured_amount_is_rolled_back(self, ready_order):
        SettlementService.pay(
            ready_order.tenant, ready_order.id, provider=Payment.Provider.CARD, amount_cents=800
        )
        pizza = ready_order.items.get(product_name="Pizza")

        with pytest.raises(ConflictError):
            set_status(ready_order, pizza, ItemStatus.VOID)

        pizza.refresh_from_db()
        ready_order.refresh_from_db()
        assert pizza.status == ItemStatus.READY
        assert ready_order.total_cents == 1000

    def test_void_that_keeps_bill_covered_is_allowed(self, ready_order):
        SettlementService.pay(
            ready_order.tenant, ready_order.id, provider=Payment.Provider.CARD, amount_cents=500
        )
        salad = ready_order.items.get(product_name="Salad")

        set_status(ready_order, salad, ItemStatus.VOID)

        summary = SettlementService.get_payment_summary(ready_order.tenant, ready_order.id)["summary"]
        assert summary["outstanding_cents"] == 100

    def test_void_down_to_captured_amount_settles_order(self, ready_order):
        SettlementService.pay(
            ready_order.tenant, ready_order.id, provider=Payment.Provider.CARD, amount_cents=600
        )
        salad = ready_order.items.get(product_name="Salad")

        set_status(ready_order, salad, ItemStatus.VOID)

        ready_order.refresh_from_db()
        assert ready_order.status == OrderStatus.PAID
        assert ready_order.total_cents == 600
        assert ready_order.closed_at is not None
        summary = SettlementService.get_payment_summary(ready_order.tenant, ready_order.id)["summary"]
        assert summary["outstanding_cents"] == 0
        assert summary["is_fully_paid"] is True

    def test_quantity_edit_down_to_captured_amount_settles_order(self, open_order):
        SettlementService.pay(
            open_order.tenant, open_order.id, provider=Payment.Provider.CASH, amount_cents=1500
        )
        margherita = open_order.items.get(product_name="Margherita")

        OrderItemService.update_item(open_order.tenant, open_order.id, margherita.id, quantity=1)

        open_order.refresh_from_db()
        assert open_order.status == OrderStatus.PAID
        assert open_order.total_cents == 1500

    def test_settled_order_takes_no_more_edits(self, ready_order):
        SettlementService.pay(
            ready_order.tenant, ready_order.id, provider=Payment.Provider.CARD, amount_cents=600
        )
        salad = ready_order.items.get(product_name="Salad")
        pizza = ready_order.items.get(product_name="Pizza")
        set_status(ready_order, salad, ItemStatus.VOID)

        with pytest.raises(ConflictError):
            set_status(ready_order, pizza, ItemStatus.SERVED)

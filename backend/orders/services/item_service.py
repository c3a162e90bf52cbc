from decimal import Decimal
from django.utils import timezone
import logging

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from core_backend.utils.db import atomic_with_retry
from orders.models import Order, OrderItem
from payments.models import Payment
from .order_service import OrderService

logger = logging.getLogger(__name__)

ItemStatus = OrderItem.ItemStatus
OrderStatus = Order.OrderStatus


class OrderItemService:
    """
    Line-item operations: adding snapshot lines, editing NEW lines and
    moving lines through the kitchen chain.

        NEW -> SENT -> IN_PROGRESS -> READY -> SERVED
        any non-terminal -> VOID
    """

    KITCHEN_CHAIN = [
        ItemStatus.NEW,
        ItemStatus.SENT,
        ItemStatus.IN_PROGRESS,
        ItemStatus.READY,
        ItemStatus.SERVED,
    ]

    VALID_STATUS_TRANSITIONS = {
        ItemStatus.NEW: [ItemStatus.SENT, ItemStatus.VOID],
        ItemStatus.SENT: [ItemStatus.IN_PROGRESS, ItemStatus.VOID],
        ItemStatus.IN_PROGRESS: [ItemStatus.READY, ItemStatus.VOID],
        ItemStatus.READY: [ItemStatus.SERVED, ItemStatus.VOID],
        ItemStatus.SERVED: [],
        ItemStatus.VOID: [],
    }

    MAX_QUANTITY = 99

    @staticmethod
    def get_item(order: Order, item_id) -> OrderItem:
        try:
            return order.items.get(id=item_id)
        except (OrderItem.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Order item not found.")

    @staticmethod
    def validate_transition(item: OrderItem, new_status: str) -> bool:
        """
        Check a single-step item transition.

        Returns False when new_status equals the current status (no-op),
        True when the step is allowed.

        Raises:
            ValidationError: unknown status, skipped step or reverse move
        """
        if new_status not in ItemStatus.values:
            raise ValidationError(
                f"'{new_status}' is not a valid item status.",
                details={"status": [f"Must be one of {', '.join(ItemStatus.values)}."]},
            )
        if new_status == item.status:
            return False
        allowed = OrderItemService.VALID_STATUS_TRANSITIONS[item.status]
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot move item from {item.status} to {new_status}.",
                details={"status": [f"Allowed from {item.status}: {', '.join(allowed) or 'none'}."]},
            )
        return True

    @staticmethod
    def _apply_status(item: OrderItem, new_status: str, now=None):
        item.status = new_status
        item.status_changed_at = now or timezone.now()
        item.save(update_fields=["status", "status_changed_at"])

    @staticmethod
    def _reconcile_with_payments(order: Order):
        """
        Re-check an edited bill against the payments already captured.

        Dropping the amount due below the captured total raises, which rolls
        the edit back. Dropping it to exactly the captured total settles the
        order, the same way a final payment would.
        """
        paid = Payment.all_objects.filter(order=order).captured().total_cents()
        if not paid:
            return
        if paid > order.amount_due_cents:
            raise ConflictError(
                "Change would reduce the bill below the amount already captured.",
                details={"paid_cents": paid, "amount_due_cents": order.amount_due_cents},
            )
        if paid == order.amount_due_cents and order.status not in Order.TERMINAL_STATUSES:
            if order.status in Order.KITCHEN_FLOW_STATUSES:
                OrderService.transition(order, OrderStatus.FOR_PAYMENT)
            OrderService.transition(order, OrderStatus.PAID)
            logger.info(
                f"Order {order.order_number}: bill reduced to the captured {paid}, marked PAID"
            )

    # ------------------------------------------------------------------
    # Adding and editing lines
    # ------------------------------------------------------------------

    @staticmethod
    @atomic_with_retry
    def add_item(
        tenant,
        order_id,
        product_name: str,
        unit_price_cents: int,
        quantity: int = 1,
        discount_percent=Decimal("0"),
        notes: str = "",
        product_ref: str = "",
    ) -> OrderItem:
        """
        Add a NEW line with a name/price snapshot.

        Adding to a READY or FOR_PAYMENT order reopens it.
        """
        order = OrderService.get_order(tenant, order_id, lock=True)
        OrderService.assert_not_terminal(order)

        if not 1 <= quantity <= OrderItemService.MAX_QUANTITY:
            raise ValidationError(
                "Quantity out of range.",
                details={"quantity": [f"Must be between 1 and {OrderItemService.MAX_QUANTITY}."]},
            )
        if unit_price_cents < 0:
            raise ValidationError(
                "Unit price cannot be negative.",
                details={"unit_price_cents": ["Must be zero or greater."]},
            )

        item = OrderItem.all_objects.create(
            tenant=tenant,
            order=order,
            product_ref=product_ref or "",
            product_name=product_name,
            unit_price_cents=unit_price_cents,
            quantity=quantity,
            discount_percent=discount_percent or Decimal("0"),
            notes=notes or "",
        )

        if order.status in (OrderStatus.READY, OrderStatus.FOR_PAYMENT):
            OrderService.transition(order, OrderStatus.OPEN)
        else:
            OrderService.sync_status_with_items(order)

        logger.info(
            f"Order {order.order_number}: added {quantity} x {product_name} @ {unit_price_cents}"
        )
        return item

    @staticmethod
    @atomic_with_retry
    def update_item(tenant, order_id, item_id, status=None, **changes) -> OrderItem:
        """
        Apply a status transition and/or edit quantity, notes or discount.

        Field edits are allowed only while the item is NEW.
        """
        order = OrderService.get_order(tenant, order_id, lock=True)
        OrderService.assert_not_terminal(order)
        item = OrderItemService.get_item(order, item_id)

        editable = {k: v for k, v in changes.items() if k in ("quantity", "notes", "discount_percent")}
        if editable:
            if item.status != ItemStatus.NEW:
                raise ConflictError(
                    "Only items that have not been sent to the kitchen can be edited.",
                    details={"status": item.status},
                )
            quantity = editable.get("quantity")
            if quantity is not None and not 1 <= quantity <= OrderItemService.MAX_QUANTITY:
                raise ValidationError(
                    "Quantity out of range.",
                    details={"quantity": [f"Must be between 1 and {OrderItemService.MAX_QUANTITY}."]},
                )
            for field, value in editable.items():
                setattr(item, field, value)
            item.save(update_fields=list(editable))

        if status is not None and OrderItemService.validate_transition(item, status):
            OrderItemService._apply_status(item, status)
            logger.info(
                f"Order {order.order_number}: item {item.id} -> {status}"
            )

        OrderService.sync_status_with_items(order)
        OrderItemService._reconcile_with_payments(order)
        return item

    @staticmethod
    @atomic_with_retry
    def advance_all(tenant, order_id, target_status: str) -> int:
        """
        Bulk "mark all ready" / "mark all served".

        Each eligible item walks the chain one step at a time up to
        `target_status`. NEW and VOID items, and items already at or past the
        target, are left alone. Returns the number of items moved.
        """
        if target_status not in (ItemStatus.READY, ItemStatus.SERVED):
            raise ValidationError("Bulk target must be READY or SERVED.")

        order = OrderService.get_order(tenant, order_id, lock=True)
        OrderService.assert_not_terminal(order)

        chain = OrderItemService.KITCHEN_CHAIN
        target_index = chain.index(target_status)
        now = timezone.now()
        moved = 0

        for item in order.items.filter(
            status__in=[ItemStatus.SENT, ItemStatus.IN_PROGRESS, ItemStatus.READY]
        ):
            current_index = chain.index(item.status)
            if current_index >= target_index:
                continue
            for next_status in chain[current_index + 1:target_index + 1]:
                OrderItemService.validate_transition(item, next_status)
                item.status = next_status
            item.status_changed_at = now
            item.save(update_fields=["status", "status_changed_at"])
            moved += 1

        OrderService.sync_status_with_items(order)
        logger.info(f"Order {order.order_number}: {moved} item(s) advanced to {target_status}")
        return moved

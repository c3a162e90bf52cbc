from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
import logging

from core_backend.exceptions import ConflictError, NotFoundError, ValidationError
from core_backend.utils.db import atomic_with_retry
from orders.calculators import OrderCalculator
from orders.models import Order, OrderItem
from orders.signals import order_status_changed
from payments.models import Payment

logger = logging.getLogger(__name__)

OrderStatus = Order.OrderStatus
ItemStatus = OrderItem.ItemStatus


def derive_status_from_items(item_statuses):
    """
    Kitchen-flow status implied by the item statuses of an order.

    VOID items are ignored. Only meaningful while the order is OPEN,
    IN_KITCHEN or READY.
    """
    active = [s for s in item_statuses if s != ItemStatus.VOID]
    if not active:
        return OrderStatus.OPEN
    if any(s in (ItemStatus.SENT, ItemStatus.IN_PROGRESS) for s in active):
        return OrderStatus.IN_KITCHEN
    if all(s == ItemStatus.SERVED for s in active):
        return OrderStatus.FOR_PAYMENT
    if all(s in (ItemStatus.READY, ItemStatus.SERVED) for s in active):
        return OrderStatus.READY
    return OrderStatus.OPEN


class OrderService:
    """Core service for order lifecycle management - creating, routing, cancelling orders."""

    # Valid status transitions for order state machine
    VALID_STATUS_TRANSITIONS = {
        OrderStatus.OPEN: [
            OrderStatus.IN_KITCHEN,
            OrderStatus.READY,
            OrderStatus.FOR_PAYMENT,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.IN_KITCHEN: [
            OrderStatus.OPEN,
            OrderStatus.READY,
            OrderStatus.FOR_PAYMENT,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.READY: [
            OrderStatus.OPEN,
            OrderStatus.IN_KITCHEN,
            OrderStatus.FOR_PAYMENT,
            OrderStatus.CANCELLED,
        ],
        OrderStatus.FOR_PAYMENT: [
            OrderStatus.OPEN,  # an item was added after the bill was requested
            OrderStatus.PAID,
        ],
        OrderStatus.PAID: [],
        OrderStatus.CANCELLED: [],
    }

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def get_order(tenant, order_id, lock=False) -> Order:
        """
        Fetch an order owned by `tenant`. With lock=True the row is locked
        until the surrounding transaction ends.

        Raises:
            NotFoundError: missing, malformed id, or another tenant's order
        """
        queryset = Order.all_objects.all()
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(id=order_id, tenant=tenant)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            # Malformed UUIDs raise DjangoValidationError
            raise NotFoundError("Order not found.")

    @staticmethod
    def assert_not_terminal(order: Order):
        if order.is_terminal:
            raise ConflictError(
                f"Order {order.order_number} is {order.status} and can no longer be changed.",
                details={"status": order.status},
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def create_order(tenant, cashier=None, table=None, notes="") -> Order:
        """
        Creates a new, empty OPEN order. Currency and tax rate are copied
        from the tenant so later tenant changes never touch this order.
        """
        if tenant is None:
            raise ValueError("tenant parameter is required for creating orders")

        order = Order.all_objects.create(
            tenant=tenant,
            cashier=cashier,
            table=table,
            notes=notes or "",
            currency=tenant.currency,
            tax_rate=tenant.tax_rate,
        )
        logger.info(f"Order {order.order_number} opened for tenant {tenant.slug}")
        return order

    @staticmethod
    def transition(order: Order, new_status: str) -> Order:
        """
        Move `order` to `new_status`, recomputing totals first.

        Must run inside a transaction holding the order row lock. The
        status-changed signal is sent only after commit.

        Raises:
            ConflictError: transition not allowed from the current status
        """
        if new_status not in OrderStatus.values:
            raise ValidationError(f"'{new_status}' is not a valid order status.")

        old_status = order.status
        OrderCalculator(order).update_totals(save=False)

        if new_status != old_status:
            if new_status not in OrderService.VALID_STATUS_TRANSITIONS[old_status]:
                raise ConflictError(
                    f"Cannot transition order from {old_status} to {new_status}.",
                    details={"status": old_status, "requested": new_status},
                )
            order.status = new_status
            if new_status in Order.TERMINAL_STATUSES:
                order.closed_at = timezone.now()

        order.save(
            update_fields=[
                "status",
                "closed_at",
                "subtotal_cents",
                "discount_cents",
                "tax_cents",
                "total_cents",
                "updated_at",
            ]
        )

        if new_status != old_status:
            transaction.on_commit(
                lambda: order_status_changed.send(
                    sender=Order, order=order, old_status=old_status, new_status=new_status
                )
            )
        return order

    @staticmethod
    def sync_status_with_items(order: Order) -> Order:
        """
        Recompute totals and, while the order is in the kitchen flow, move it
        to the status implied by its items. FOR_PAYMENT and terminal orders
        keep their status.
        """
        new_status = order.status
        if order.status in Order.KITCHEN_FLOW_STATUSES:
            statuses = list(order.items.values_list("status", flat=True))
            new_status = derive_status_from_items(statuses)
        return OrderService.transition(order, new_status)

    @staticmethod
    @atomic_with_retry
    def send_to_kitchen(tenant, order_id) -> Order:
        """
        Route every NEW item to the kitchen (NEW -> SENT).

        Raises:
            ConflictError: order terminal or awaiting payment, no billable
                items, or nothing new to send
        """
        order = OrderService.get_order(tenant, order_id, lock=True)
        OrderService.assert_not_terminal(order)
        if order.status == OrderStatus.FOR_PAYMENT:
            raise ConflictError("Order is awaiting payment.")

        items = order.items.exclude(status=ItemStatus.VOID)
        if not items.exists():
            raise ConflictError("Cannot send an order with no items to the kitchen.")

        now = timezone.now()
        sent = items.filter(status=ItemStatus.NEW).update(
            status=ItemStatus.SENT, status_changed_at=now
        )
        if not sent:
            raise ConflictError("All items have already been sent to the kitchen.")

        order.sent_to_kitchen_at = now
        order.save(update_fields=["sent_to_kitchen_at", "updated_at"])
        OrderService.sync_status_with_items(order)
        logger.info(f"Order {order.order_number}: {sent} item(s) sent to kitchen")
        return order

    @staticmethod
    @atomic_with_retry
    def request_bill(tenant, order_id) -> Order:
        """Explicit READY -> FOR_PAYMENT."""
        order = OrderService.get_order(tenant, order_id, lock=True)
        OrderService.assert_not_terminal(order)
        if order.status != OrderStatus.READY:
            raise ConflictError(
                f"Bill can only be requested for a READY order (current: {order.status}).",
                details={"status": order.status},
            )
        return OrderService.transition(order, OrderStatus.FOR_PAYMENT)

    @staticmethod
    @atomic_with_retry
    def cancel_order(tenant, order_id) -> Order:
        """
        Cancel an order that has not reached payment.

        Raises:
            ConflictError: FOR_PAYMENT, PAID, already CANCELLED, or money
                has already been captured against the order
        """
        order = OrderService.get_order(tenant, order_id, lock=True)
        if order.status not in Order.KITCHEN_FLOW_STATUSES:
            raise ConflictError(
                f"Cannot cancel an order that is {order.status}.",
                details={"status": order.status},
            )
        if Payment.all_objects.filter(order=order).captured().exists():
            raise ConflictError("Cannot cancel an order with captured payments.")

        OrderService.transition(order, OrderStatus.CANCELLED)
        logger.info(f"Order {order.order_number} cancelled")
        return order

from django.db import transaction
import logging
from typing import Optional

from core_backend.exceptions import ConflictError, ValidationError
from core_backend.utils.db import atomic_with_retry
from orders.calculators import OrderCalculator
from orders.models import Order
from orders.services import OrderService
from .models import Payment, Tip
from .money import format_money
from .signals import payment_completed

logger = logging.getLogger(__name__)


class SettlementService:
    """
    Applies captured payments to orders.

    A settlement reads the order under a row lock, recomputes its totals from
    the current items, applies at most the outstanding balance and moves the
    order to PAID once captured payments cover total + tips. The payment row,
    tip row and order update commit together or not at all.
    """

    @staticmethod
    def captured_cents(order: Order) -> int:
        return Payment.all_objects.filter(order=order).captured().total_cents()

    @staticmethod
    def summarize(order: Order, paid_cents: Optional[int] = None) -> dict:
        if paid_cents is None:
            paid_cents = SettlementService.captured_cents(order)
        outstanding = max(0, order.amount_due_cents - paid_cents)
        return {
            "paid_cents": paid_cents,
            "outstanding_cents": outstanding,
            "payment_count": Payment.all_objects.filter(order=order).captured().count(),
            "is_fully_paid": order.amount_due_cents > 0 and outstanding == 0,
        }

    @staticmethod
    def get_payment_summary(tenant, order_id) -> dict:
        """
        Non-locking read of an order, its captured payments and the summary.
        Advisory only; a concurrent settlement may make it stale.
        """
        order = OrderService.get_order(tenant, order_id)
        payments = list(
            Payment.all_objects.filter(order=order).captured().order_by("created_at")
        )
        paid = sum(p.amount_cents for p in payments)
        return {
            "order": order,
            "payments": payments,
            "summary": SettlementService.summarize(order, paid),
        }

    @staticmethod
    @atomic_with_retry
    def pay(
        tenant,
        order_id,
        provider: str,
        amount_cents: Optional[int] = None,
        tip_cents: int = 0,
        split_index: Optional[int] = None,
        processed_by=None,
    ) -> dict:
        """
        Capture one payment against an order.

        Args:
            provider: Payment.Provider value
            amount_cents: bill amount tendered; defaults to the full outstanding
                balance. CASH may tender more and receives change; other
                providers may not exceed the outstanding balance.
            tip_cents: tip added on top of the applied amount
            split_index: share index from a split preview, recorded in metadata

        Returns:
            {"payment": {...}, "remaining_cents": int, "is_fully_paid": bool}

        Raises:
            NotFoundError, ConflictError, ValidationError
        """
        if provider not in Payment.Provider.values:
            raise ValidationError(
                f"Unknown payment provider '{provider}'.",
                details={"provider": [f"Must be one of {', '.join(Payment.Provider.values)}."]},
            )
        tip_cents = tip_cents or 0
        if tip_cents < 0:
            raise ValidationError("Tip cannot be negative.", details={"tip_cents": ["Must be zero or greater."]})
        if amount_cents is not None and amount_cents <= 0:
            raise ValidationError("Amount must be positive.", details={"amount_cents": ["Must be greater than zero."]})

        # 1. Fresh read under lock
        order = OrderService.get_order(tenant, order_id, lock=True)

        # 2. Terminal orders take no money
        if order.status in Order.TERMINAL_STATUSES:
            logger.warning(f"Settlement rejected: order {order.order_number} is {order.status}")
            raise ConflictError(
                f"Cannot take payment for a {order.status} order.",
                details={"status": order.status},
            )

        # 3. Outstanding from recomputed totals, never from stored ones
        OrderCalculator(order).update_totals(save=False)
        paid_so_far = SettlementService.captured_cents(order)
        amount_due_before = order.amount_due_cents
        outstanding = amount_due_before - paid_so_far
        if outstanding <= 0:
            logger.warning(f"Settlement rejected: order {order.order_number} already fully paid")
            raise ConflictError("Order is already fully paid.")

        # 4-5. Apply at most the outstanding balance
        requested = outstanding if amount_cents is None else amount_cents
        applied = min(requested, outstanding)
        change_due = 0
        if requested > outstanding:
            if provider != Payment.Provider.CASH:
                raise ValidationError(
                    f"Amount {requested} exceeds the outstanding balance of {outstanding}.",
                    details={"amount_cents": [f"Must not exceed {outstanding} for {provider} payments."]},
                )
            change_due = requested - outstanding

        metadata = {
            "applied_cents": applied,
            "tip_cents": tip_cents,
            "change_due_cents": change_due,
        }
        if split_index is not None:
            metadata["split_index"] = split_index
        if provider == Payment.Provider.CASH:
            metadata["received_cents"] = requested + tip_cents

        # 6-7. Payment and tip rows
        payment = Payment.all_objects.create(
            tenant=tenant,
            order=order,
            provider=provider,
            status=Payment.PaymentStatus.CAPTURED,
            amount_cents=applied + tip_cents,
            currency=order.currency,
            metadata=metadata,
            processed_by=processed_by,
        )
        if tip_cents:
            order.tip_cents += tip_cents
            order.save(update_fields=["tip_cents", "updated_at"])
            Tip.all_objects.create(
                tenant=tenant,
                order=order,
                payment=payment,
                amount_cents=tip_cents,
                recorded_by=processed_by,
            )

        # 8-9. Status: paying from the kitchen flow implies the bill was requested
        if order.status in Order.KITCHEN_FLOW_STATUSES:
            OrderService.transition(order, Order.OrderStatus.FOR_PAYMENT)

        is_fully_paid = paid_so_far + applied >= amount_due_before
        OrderService.transition(
            order,
            Order.OrderStatus.PAID if is_fully_paid else Order.OrderStatus.FOR_PAYMENT,
        )

        remaining = max(0, order.amount_due_cents - (paid_so_far + payment.amount_cents))
        logger.info(
            f"Order {order.order_number}: captured "
            f"{format_money(order.currency, payment.amount_cents)} via {provider} "
            f"(tip {tip_cents}, change {change_due}), remaining {remaining}"
        )

        transaction.on_commit(
            lambda: payment_completed.send(
                sender=Payment, payment=payment, order=order, is_fully_paid=is_fully_paid
            )
        )

        return {
            "payment": {
                "id": str(payment.id),
                "amount_cents": payment.amount_cents,
                "applied_cents": applied,
                "provider": provider,
                "tip_cents": tip_cents,
                "change_due_cents": change_due,
                "split_index": split_index,
            },
            "remaining_cents": remaining,
            "is_fully_paid": is_fully_paid,
        }

"""
Bill splitting previews.

Every function here is advisory: it reads the order, computes shares and
returns them. Nothing is locked or written, so running the same preview twice
against an unchanged order yields the same shares.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import logging

from core_backend.exceptions import ConflictError, ValidationError
from orders.models import Order, OrderItem
from payments.models import Payment
from payments.money import proportion_of, split_evenly, validate_minor_sum
from .order_service import OrderService

logger = logging.getLogger(__name__)

MIN_EQUAL_SPLITS = 2
MAX_SPLITS = 50


@dataclass(frozen=True)
class SplitShare:
    index: int
    label: str
    amount_cents: int
    item_ids: Tuple[int, ...] = field(default_factory=tuple)
    is_paid: bool = False

    def as_dict(self):
        data = {
            "index": self.index,
            "label": self.label,
            "amount_cents": self.amount_cents,
            "is_paid": self.is_paid,
        }
        if self.item_ids:
            data["item_ids"] = list(self.item_ids)
        return data


def _label(labels: Optional[Sequence[str]], position: int) -> str:
    if labels and position < len(labels) and labels[position]:
        return labels[position]
    return f"Person {position + 1}"


def split_equally(outstanding_cents: int, parts: int, labels=None) -> List[SplitShare]:
    """
    Floor-divide the outstanding balance; the first share absorbs the remainder.

    >>> [s.amount_cents for s in split_equally(1000, 3)]
    [334, 333, 333]
    """
    if not MIN_EQUAL_SPLITS <= parts <= MAX_SPLITS:
        raise ValidationError(
            "Invalid number of splits.",
            details={"number_of_splits": [f"Must be between {MIN_EQUAL_SPLITS} and {MAX_SPLITS}."]},
        )
    amounts = split_evenly(outstanding_cents, parts)
    validate_minor_sum(amounts, outstanding_cents, context="equal split")
    return [
        SplitShare(index=i + 1, label=_label(labels, i), amount_cents=amount)
        for i, amount in enumerate(amounts)
    ]


def split_by_amount(outstanding_cents: int, amounts: Sequence[int], labels=None) -> List[SplitShare]:
    """
    Caller-chosen amounts. Their sum may exceed the outstanding balance
    (voluntary overpayment) but never fall short of it.
    """
    if not amounts:
        raise ValidationError("At least one amount is required.", details={"amounts": ["This list may not be empty."]})
    if len(amounts) > MAX_SPLITS:
        raise ValidationError("Too many splits.", details={"amounts": [f"At most {MAX_SPLITS} amounts."]})
    if any(amount <= 0 for amount in amounts):
        raise ValidationError("Amounts must be positive.", details={"amounts": ["Every amount must be greater than zero."]})

    total = sum(amounts)
    if total < outstanding_cents:
        raise ValidationError(
            f"Split amounts total {total} but {outstanding_cents} is outstanding.",
            details={
                "amounts": [f"Sum must be at least {outstanding_cents}."],
                "sum_cents": total,
                "outstanding_cents": outstanding_cents,
            },
        )
    return [
        SplitShare(index=i + 1, label=_label(labels, i), amount_cents=amount)
        for i, amount in enumerate(amounts)
    ]


def split_by_items(order: Order, items: Sequence[OrderItem], item_groups, labels=None) -> List[SplitShare]:
    """
    One share per group of item ids.

    share = Σ unit_price × quantity of its items
            + round_half_even(order.tip × items_subtotal / order.total)

    The tip proportion uses the tax-inclusive order total. Tax itself is
    not apportioned; settlement always clamps the last payer to the true
    outstanding balance.
    """
    if not item_groups:
        raise ValidationError("At least one item group is required.", details={"items": ["This list may not be empty."]})
    if len(item_groups) > MAX_SPLITS:
        raise ValidationError("Too many splits.", details={"items": [f"At most {MAX_SPLITS} groups."]})

    billable = {item.id: item for item in items if item.is_billable}
    seen = set()
    shares = []

    for position, group in enumerate(item_groups):
        if not group:
            raise ValidationError(
                "Item groups may not be empty.",
                details={"items": [f"Group {position + 1} has no items."]},
            )
        subtotal = 0
        for item_id in group:
            if item_id not in billable:
                raise ValidationError(
                    f"Item {item_id} does not belong to this order.",
                    details={"items": [f"Unknown or void item id {item_id}."]},
                )
            if item_id in seen:
                raise ValidationError(
                    f"Item {item_id} is assigned to more than one share.",
                    details={"items": [f"Duplicate item id {item_id}."]},
                )
            seen.add(item_id)
            subtotal += billable[item_id].line_total_cents

        tip_share = proportion_of(order.tip_cents, subtotal, order.total_cents)
        shares.append(
            SplitShare(
                index=position + 1,
                label=_label(labels, position),
                amount_cents=subtotal + tip_share,
                item_ids=tuple(group),
            )
        )
    return shares


class BillSplitService:
    """Reads an order and produces a split preview."""

    SPLIT_TYPES = ("equally", "by_amount", "by_items")

    @staticmethod
    def outstanding_cents(order: Order) -> int:
        paid = Payment.all_objects.filter(order=order).captured().total_cents()
        return max(0, order.amount_due_cents - paid)

    @staticmethod
    def preview(tenant, order_id, split_type, number_of_splits=None, amounts=None, items=None, labels=None):
        """
        Returns {"order_id", "split_type", "outstanding_cents", "shares": [...]}.

        Raises:
            NotFoundError: order missing or owned by another tenant
            ConflictError: order PAID/CANCELLED or nothing outstanding
            ValidationError: malformed split request
        """
        order = OrderService.get_order(tenant, order_id)
        if order.is_terminal:
            raise ConflictError(
                f"Cannot split a {order.status} order.", details={"status": order.status}
            )

        outstanding = BillSplitService.outstanding_cents(order)
        if outstanding <= 0:
            raise ConflictError("Order is already fully paid.")

        if split_type == "equally":
            shares = split_equally(outstanding, number_of_splits or 0, labels)
        elif split_type == "by_amount":
            shares = split_by_amount(outstanding, amounts or [], labels)
        elif split_type == "by_items":
            shares = split_by_items(order, list(order.items.all()), items or [], labels)
        else:
            raise ValidationError(
                f"Unknown split type '{split_type}'.",
                details={"type": [f"Must be one of {', '.join(BillSplitService.SPLIT_TYPES)}."]},
            )

        logger.debug(f"Order {order.order_number}: {split_type} split preview with {len(shares)} shares")
        return {
            "order_id": str(order.id),
            "split_type": split_type,
            "outstanding_cents": outstanding,
            "shares": [share.as_dict() for share in shares],
        }

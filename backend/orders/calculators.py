"""
Order financial calculator.

The arithmetic lives in `calculate_totals`, a pure function over line
snapshots, so it can be tested without a database and re-run at any time to
reproduce an order's stored totals.

Rules (all amounts in minor units):
    subtotal = Σ unit_price × quantity                 (non-void lines)
    discount = Σ round(line × discount_percent / 100)  (per line)
    tax      = round((subtotal − discount) × tax_rate)
    total    = subtotal − discount + tax

Usage:
    from orders.calculators import OrderCalculator
    totals = OrderCalculator(order).update_totals()
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Union

from payments.money import apply_rate, percentage_of


@dataclass(frozen=True)
class LineSnapshot:
    unit_price_cents: int
    quantity: int
    discount_percent: Decimal = Decimal("0")

    @property
    def gross_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    @property
    def discount_cents(self) -> int:
        if not self.discount_percent:
            return 0
        return percentage_of(self.gross_cents, self.discount_percent)


@dataclass(frozen=True)
class OrderTotals:
    subtotal_cents: int
    discount_cents: int
    tax_cents: int
    total_cents: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "subtotal_cents": self.subtotal_cents,
            "discount_cents": self.discount_cents,
            "tax_cents": self.tax_cents,
            "total_cents": self.total_cents,
        }


def calculate_totals(
    lines: Iterable[LineSnapshot], tax_rate: Union[Decimal, str, int]
) -> OrderTotals:
    """Derive order totals from billable line snapshots. No I/O."""
    subtotal = 0
    discount = 0
    for line in lines:
        subtotal += line.gross_cents
        discount += line.discount_cents

    tax = apply_rate(subtotal - discount, tax_rate)
    return OrderTotals(
        subtotal_cents=subtotal,
        discount_cents=discount,
        tax_cents=tax,
        total_cents=subtotal - discount + tax,
    )


class OrderCalculator:
    """
    Reads an order's current items and applies `calculate_totals` to it.

    The order's snapshotted tax_rate is used, never the tenant's live rate.
    """

    def __init__(self, order):
        self.order = order

    def billable_lines(self):
        return [
            LineSnapshot(
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                discount_percent=item.discount_percent,
            )
            for item in self.order.items.all()
            if item.is_billable
        ]

    def calculate_totals(self) -> OrderTotals:
        return calculate_totals(self.billable_lines(), self.order.tax_rate)

    def update_totals(self, save=True) -> OrderTotals:
        """
        Recompute and write the totals onto the order.

        Returns the OrderTotals so callers can log or compare them.
        """
        totals = self.calculate_totals()
        self.order.subtotal_cents = totals.subtotal_cents
        self.order.discount_cents = totals.discount_cents
        self.order.tax_cents = totals.tax_cents
        self.order.total_cents = totals.total_cents
        if save:
            self.order.save(
                update_fields=[
                    "subtotal_cents",
                    "discount_cents",
                    "tax_cents",
                    "total_cents",
                    "updated_at",
                ]
            )
        return totals

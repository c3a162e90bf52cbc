"""
Minor-unit money primitives for the settlement core.

Every amount in orders, payments and cash sessions is an integer count of the
currency's minor unit (cents for USD). Floats never touch money.

Key Principles:
1. Store and add integers only
2. When a fraction of a minor unit arises (tax, percentage discount,
   proportional tip), resolve it once with ROUND_HALF_EVEN
3. Divide with floor + explicit remainder, never by rounding each share
4. Every derived amount can be recomputed from its inputs
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import List, Union

Number = Union[Decimal, int, str]

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
    "MXN": 2,
    "PHP": 2,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "BHD": 3,
}

CURRENCY_SYMBOL = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "MXN": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "KRW": "₩",
    "PHP": "₱",
}


def currency_exponent(currency: str) -> int:
    """
    Number of decimal places of a currency's minor unit.

    >>> currency_exponent("USD")
    2
    >>> currency_exponent("JPY")
    0
    """
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def round_minor(value: Number) -> int:
    """
    Round an exact (Decimal) amount of minor units to an integer using
    banker's rounding.

    >>> round_minor(Decimal("12.5"))
    12
    >>> round_minor(Decimal("13.5"))
    14
    """
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_EVEN))


def apply_rate(amount_minor: int, rate: Number) -> int:
    """
    amount × rate, rounded half-even. Used for tax.

    >>> apply_rate(1000, Decimal("0.0825"))
    82
    """
    return round_minor(Decimal(amount_minor) * Decimal(rate))


def percentage_of(amount_minor: int, percent: Number) -> int:
    """
    percent% of amount, rounded half-even.

    >>> percentage_of(1999, 10)
    200
    """
    return round_minor(Decimal(amount_minor) * Decimal(percent) / Decimal(100))


def proportion_of(target_minor: int, part_minor: int, whole_minor: int) -> int:
    """
    target × part / whole, rounded half-even; 0 when whole is 0.

    >>> proportion_of(1000, 4000, 10000)
    400
    >>> proportion_of(5, 300, 1000)   # 1.5 rounds to even
    2
    """
    if whole_minor == 0:
        return 0
    return round_minor(Decimal(target_minor) * Decimal(part_minor) / Decimal(whole_minor))


def split_evenly(total_minor: int, parts: int) -> List[int]:
    """
    Divide total into `parts` shares with floor division.

    The remainder (total mod parts) goes entirely to the FIRST share, so the
    result is deterministic and always sums to exactly total.

    >>> split_evenly(1000, 3)
    [334, 333, 333]
    """
    if parts < 1:
        raise ValueError("parts must be at least 1")
    base, remainder = divmod(total_minor, parts)
    shares = [base] * parts
    shares[0] += remainder
    return shares


def validate_minor_sum(
    components: List[int],
    expected_total: int,
    context: str = "",
) -> None:
    """
    Raise ValueError unless sum(components) == expected_total exactly.

    Guards allocation code paths against off-by-one-cent drift.
    """
    actual = sum(components)
    if actual != expected_total:
        diff = actual - expected_total
        sign = "+" if diff > 0 else ""
        raise ValueError(
            f"Minor unit sum mismatch{' ' + context if context else ''}: "
            f"expected {expected_total}, got {actual} (diff: {sign}{diff})"
        )


def from_minor(currency: str, minor: int) -> Decimal:
    """
    Convert minor units to a Decimal amount for display.

    >>> from_minor("USD", 1013)
    Decimal('10.13')
    """
    exponent = currency_exponent(currency)
    return Decimal(minor).scaleb(-exponent)


def format_money(currency: str, minor: int) -> str:
    """
    Human-readable amount, e.g. format_money("USD", 1013) -> "$10.13".

    Negative amounts (cash shortages) keep their sign: "-$0.50".
    """
    exponent = currency_exponent(currency)
    symbol = CURRENCY_SYMBOL.get(currency.upper(), currency.upper() + " ")
    amount = from_minor(currency, abs(minor))
    sign = "-" if minor < 0 else ""
    return f"{sign}{symbol}{amount:,.{exponent}f}"

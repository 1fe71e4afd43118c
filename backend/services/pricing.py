"""
Order pricing steps.

These run explicitly inside the order placement workflow instead of living in
model save hooks, so the order of operations is visible and testable.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Tax is a fixed policy, not computed per line
TAX_AMOUNT = Decimal("0.00")


class PricedLine(Protocol):
    quantity: int
    unit_price: Number
    discount: Number


@dataclass(frozen=True)
class OrderTotals:
    total_amount: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    final_amount: Decimal


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps float literals like 24.99 exact
    return Decimal(str(value))


def line_gross(quantity: int, unit_price: Number) -> Decimal:
    return Decimal(quantity) * to_decimal(unit_price)


def line_discount(quantity: int, unit_price: Number, discount: Number = 0) -> Decimal:
    return line_gross(quantity, unit_price) * to_decimal(discount) / HUNDRED


def line_total(quantity: int, unit_price: Number, discount: Number = 0) -> Decimal:
    """quantity * unit_price * (1 - discount/100), unrounded."""
    return line_gross(quantity, unit_price) - line_discount(quantity, unit_price, discount)


def price_order(lines: Iterable[PricedLine]) -> OrderTotals:
    """
    Order-level aggregates straight from the request lines.

    The discount aggregate is rounded to cents before the final amount is
    derived, so final_amount == total_amount - discount_amount + tax_amount
    holds exactly on the stored values.
    """
    total = Decimal("0")
    discount = Decimal("0")
    for line in lines:
        total += line_gross(line.quantity, line.unit_price)
        discount += line_discount(line.quantity, line.unit_price, line.discount or 0)

    total = total.quantize(CENT, rounding=ROUND_HALF_UP)
    discount = discount.quantize(CENT, rounding=ROUND_HALF_UP)
    tax = TAX_AMOUNT
    return OrderTotals(
        total_amount=total,
        discount_amount=discount,
        tax_amount=tax,
        final_amount=total - discount + tax,
    )

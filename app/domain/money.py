# app/domain/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")


def to_decimal(value) -> Decimal:
    # przez str, zeby float 0.1 nie wniosl bledu binarnego
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def round_rating(value) -> Decimal:
    return to_decimal(value).quantize(TENTHS, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price) -> Decimal:
    return to_decimal(unit_price) * quantity


def order_total(lines: Iterable[Tuple[int, Decimal]]) -> Decimal:
    """Suma quantity * unit_price, zaokraglona half-up do groszy dopiero na koncu."""
    total = sum((line_total(qty, price) for qty, price in lines), Decimal("0.00"))
    return round_money(total)

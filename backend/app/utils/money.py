from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, str]


def to_money(value: Number) -> Decimal:
    """Coerce a price-like value to a two-place Decimal. Floats are refused."""
    if isinstance(value, float):
        raise TypeError("money values must not be floats")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: int, unit_price: Number) -> Decimal:
    return to_money(to_money(unit_price) * quantity)


def sum_money(values: Iterable[Number]) -> Decimal:
    total = Decimal("0.00")
    for v in values:
        total += to_money(v)
    return to_money(total)


def clamp_quantity(requested: int, available: int) -> int:
    """min(requested, available), never below zero."""
    return max(0, min(requested, available))


def format_money(value: Number) -> str:
    """Two-place string for responses; JSON floats would lose the cents."""
    return str(to_money(value))


# jsonable_encoder(..., custom_encoder=MONEY_ENCODER)
MONEY_ENCODER = {Decimal: format_money}

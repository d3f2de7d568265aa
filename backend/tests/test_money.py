from decimal import Decimal

import pytest

from app.utils.money import clamp_quantity, format_money, line_total, sum_money, to_money


def test_line_total_is_exact_decimal():
    assert line_total(3, Decimal("0.10")) == Decimal("0.30")
    assert line_total(5, "19.99") == Decimal("99.95")


def test_zero_quantity_line_is_zero():
    assert line_total(0, Decimal("12.34")) == Decimal("0.00")


def test_sum_money():
    assert sum_money([Decimal("0.10"), Decimal("0.20"), 1]) == Decimal("1.30")
    assert sum_money([]) == Decimal("0.00")


def test_floats_are_refused():
    with pytest.raises(TypeError):
        to_money(0.1)


@pytest.mark.parametrize(
    "requested,available,expected",
    [(8, 5, 5), (3, 10, 3), (4, 0, 0), (2, -1, 0)],
)
def test_clamp_quantity(requested, available, expected):
    assert clamp_quantity(requested, available) == expected


def test_format_money_keeps_cents():
    assert format_money(Decimal("0.1") * 3) == "0.30"
    assert format_money("12.5") == "12.50"
    assert format_money(7) == "7.00"

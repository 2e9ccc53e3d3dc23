from __future__ import annotations

import pytest

from src.common.number_format import format_price, format_quantity


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0.00005883, "0.00005883"),
        (0.5, "0.500000"),
        (42.1, "42.1000"),
        (2500.456, "2500.46"),
        (67250.7, "67251"),
    ],
)
def test_format_price_precision_ladder(value: float, expected: str) -> None:
    assert format_price(value) == expected


def test_format_quantity_groups_and_trims() -> None:
    assert format_quantity(1234.5678) == "1,234.57"
    assert format_quantity(3.0) == "3"
    assert format_quantity(0.10) == "0.1"
    assert format_quantity(0.123456, max_fraction=4) == "0.1235"
    assert format_quantity(1500) == "1,500"

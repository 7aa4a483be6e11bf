from decimal import Decimal

import pytest

from nova_client.models import amount_to_str


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.5", "1.5"),
        (3000, "3000"),
        (0.1, "0.1"),
        (1e-7, "0.0000001"),
        (Decimal("1E-8"), "0.00000001"),
        (Decimal("2.50"), "2.50"),
    ],
)
def test_amount_to_str_uses_plain_notation(value, expected):
    assert amount_to_str(value) == expected


@pytest.mark.parametrize("value", ["0", "-1", "abc", "NaN", float("inf")])
def test_amount_to_str_rejects_bad_amounts(value):
    with pytest.raises(ValueError):
        amount_to_str(value)

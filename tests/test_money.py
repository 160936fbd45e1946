from decimal import Decimal

import pytest

from cakestore.domain.errors import ValidationError
from cakestore.utils.money import format_vnd, format_vnd_with_label, percent_of, to_vnd


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.5, 1),
        (2.5, 3),
        ("1234.4", 1234),
        ("1234.5", 1235),
        (Decimal("99999.49"), 99999),
        (150000, 150000),
    ],
)
def test_to_vnd_rounds_half_up(value, expected):
    assert to_vnd(value) == expected


@pytest.mark.parametrize("value", ["abc", "", True, None, float("nan"), float("inf")])
def test_to_vnd_rejects_non_numbers(value):
    with pytest.raises(ValidationError):
        to_vnd(value)


def test_percent_of_rounds_once():
    assert percent_of(300000, Decimal("0.1")) == 30000
    assert percent_of(15, 0.1) == 2
    assert percent_of(499999, Decimal("0.1")) == 50000


def test_format_vnd():
    assert format_vnd(1234567) == "1.234.567₫"
    assert format_vnd(0) == "0₫"
    assert format_vnd("999.6") == "1.000₫"


def test_format_vnd_with_label():
    assert format_vnd_with_label(12345) == "12.345 VND"

from datetime import datetime, timezone

import pytest

from conftest import asset
from core.errors import ValidationError
from engine.validation import estimated_units, parse_decimal, parse_purchase, require_non_negative


@pytest.mark.parametrize("text,expected", [
    ("1,5", 1.5),
    ("1.5", 1.5),
    ("  250 ", 250.0),
    ("0,000001", 0.000001),
])
def test_parse_decimal_accepts_both_separators(text, expected):
    assert parse_decimal(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "0", "-3", "nan", "inf", None])
def test_parse_decimal_rejects(text):
    with pytest.raises(ValidationError):
        parse_decimal(text)


def test_parse_purchase_builds_candidate():
    when = datetime(2024, 2, 2, tzinfo=timezone.utc)
    c = parse_purchase(asset("1027", price=3000.0, symbol="ETH", name="Ethereum"), "100", "2500,5", when)

    assert (c.asset_id, c.asset_name, c.asset_symbol) == ("1027", "Ethereum", "ETH")
    assert c.invested_amount == 100.0
    assert c.unit_price == 2500.5
    assert c.acquired_at == when


def test_parse_purchase_defaults_to_now():
    c = parse_purchase(asset("1"), "1", "1")
    assert c.acquired_at.tzinfo is not None


def test_estimated_units():
    assert estimated_units(50.0, 25000.0) == pytest.approx(0.002)
    with pytest.raises(ValidationError):
        estimated_units(50.0, 0.0)


def test_require_non_negative_accepts_zero():
    assert require_non_negative(0, "amount") == 0.0
    assert require_non_negative(2.5, "amount") == 2.5


@pytest.mark.parametrize("bad", [-0.1, float("nan"), float("inf"), True, "1"])
def test_require_non_negative_rejects(bad):
    with pytest.raises(ValidationError):
        require_non_negative(bad, "amount")

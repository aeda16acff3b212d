from datetime import datetime, timezone

import pytest

from conftest import asset
from data.prices import PriceBook
from engine.portfolio import Position
from engine.valuation import ValuationEngine

WHEN = datetime(2024, 1, 1, tzinfo=timezone.utc)


def position(asset_id, amount, cost):
    return Position(asset_id, asset_id, asset_id, amount, cost, WHEN)


def test_position_valuation():
    engine = ValuationEngine(PriceBook([asset("1", price=130.0)]))
    v = engine.valuation(position("1", 2.0, 100.0))

    assert v.current_value == pytest.approx(260.0)
    assert v.gain_loss == pytest.approx(60.0)
    assert v.gain_loss_percent == pytest.approx(30.0)


def test_unknown_price_is_absent_not_zero():
    engine = ValuationEngine(PriceBook([asset("1", price=None)]))

    assert engine.current_price("1") is None
    assert engine.current_price("999") is None
    assert engine.valuation(position("1", 1.0, 10.0)) is None


def test_totals_with_missing_prices():
    engine = ValuationEngine(PriceBook([asset("1", price=130.0)]))
    positions = [position("1", 2.0, 100.0), position("2", 10.0, 30.0)]

    assert engine.total_portfolio_value(positions) == pytest.approx(260.0)
    assert engine.total_gain_loss(positions) == pytest.approx(60.0)
    # denominator: 200 invested in "1" plus 300 in the unpriced "2"
    assert engine.total_gain_loss_percent(positions) == pytest.approx(12.0)


def test_gain_loss_percent_zero_invested():
    engine = ValuationEngine(PriceBook([asset("1", price=5.0)]))

    assert engine.total_gain_loss_percent([]) == 0.0
    assert engine.total_gain_loss_percent([position("1", 0.0, 100.0)]) == 0.0
    assert position("1", 0.0, 100.0).gain_loss_percent(5.0) == 0.0


def test_summary_flags_partial_total():
    engine = ValuationEngine(PriceBook([asset("1", price=50.0)]))
    s = engine.summary([position("1", 1.0, 40.0), position("2", 1.0, 60.0)])

    assert s.total_value == pytest.approx(50.0)
    assert s.total_invested == pytest.approx(100.0)
    assert s.total_gain_loss == pytest.approx(10.0)
    assert s.total_gain_loss_percent == pytest.approx(10.0)
    assert (s.priced_positions, s.unpriced_positions) == (1, 1)
    assert s.is_partial


def test_losses_are_negative():
    engine = ValuationEngine(PriceBook([asset("1", price=75.0)]))
    v = engine.valuation(position("1", 4.0, 100.0))

    assert v.gain_loss == pytest.approx(-100.0)
    assert v.gain_loss_percent == pytest.approx(-25.0)


def test_refresh_without_refresher_is_noop():
    assert ValuationEngine(PriceBook()).refresh() is None

import logging

import pytest

import cryptofolio
from conftest import asset, buy
from core import config, logging_setup
from core.errors import ConfigError
from data.prices import PriceBook
from engine.valuation import ValuationEngine


def test_require_api_key(monkeypatch):
    monkeypatch.setattr(config, "CMC_API_KEY", None)
    with pytest.raises(ConfigError):
        config.require_api_key()

    monkeypatch.setattr(config, "CMC_API_KEY", "k")
    assert config.require_api_key() == "k"


def test_setup_logging_is_idempotent(tmp_path, monkeypatch):
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    monkeypatch.setattr(logging_setup, "_configured", False)
    try:
        logging_setup.setup_logging("WARNING", str(tmp_path / "logs"))
        added = [h for h in root.handlers if h not in before]
        logging_setup.setup_logging("WARNING", str(tmp_path / "logs"))

        assert len(added) == 2
        assert len(root.handlers) == len(before) + 2
        assert (tmp_path / "logs" / "cryptofolio.log").exists()
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
                h.close()
        root.setLevel(level)


def test_print_portfolio(store, capsys):
    store.add(buy(asset_id="1", invested=200.0, price=100.0, symbol="BTC"))
    store.add(buy(asset_id="2", invested=50.0, price=10.0, symbol="XRP"))
    engine = ValuationEngine(PriceBook([asset("1", price=130.0)]))

    cryptofolio.print_portfolio(store, engine)
    out = capsys.readouterr().out

    assert "value=260.00" in out and "+30.00%" in out
    assert "XRP    | amount=5.00000000 | avg=10.00 | price unknown" in out
    assert "partial: 1 unpriced" in out


def test_book_purchase_from_env_uses_live_price(store, monkeypatch):
    monkeypatch.setenv("BUY_ASSET_ID", "1")
    monkeypatch.setenv("BUY_INVESTED", "100")
    monkeypatch.delenv("BUY_PRICE", raising=False)
    prices = PriceBook([asset("1", price=50.0)])

    cryptofolio.book_purchase_from_env(store, prices, client=None)

    pos = store.find_by_asset("1")
    assert pos.amount == pytest.approx(2.0)
    assert pos.average_cost == 50.0


def test_book_purchase_fetches_unlisted_asset(store, monkeypatch):
    class DetailClient:
        def fetch_detail(self, asset_id):
            return asset(asset_id, price=4.0, symbol="DOGE")

    monkeypatch.setenv("BUY_ASSET_ID", "74")
    monkeypatch.setenv("BUY_INVESTED", "8")
    monkeypatch.setenv("BUY_PRICE", "2")
    prices = PriceBook()

    cryptofolio.book_purchase_from_env(store, prices, DetailClient())

    assert prices.price_of("74") == 4.0
    assert store.find_by_asset("74").amount == pytest.approx(4.0)

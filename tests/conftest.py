import time
from datetime import datetime, timezone

import pytest

from core.kv_store import PreferenceStore
from data.assets import Asset
from engine.portfolio import PurchaseCandidate
from engine.position_store import PositionStore


class FakeClient:
    """Stands in for MarketDataClient.list_assets; replays queued results in order."""

    def __init__(self, *results, delay: float = 0.0):
        self.results = list(results)
        self.delay = delay
        self.calls = 0

    def list_assets(self, limit: int = 100):
        self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


def buy(asset_id="1", invested=50.0, price=25000.0, when=None, name="Bitcoin", symbol="BTC"):
    return PurchaseCandidate(
        asset_id=asset_id,
        asset_name=name,
        asset_symbol=symbol,
        invested_amount=invested,
        unit_price=price,
        acquired_at=when or datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
    )


def asset(asset_id="1", price=None, symbol="BTC", **kw):
    return Asset(id=asset_id, name=kw.pop("name", symbol), symbol=symbol, price=price, **kw)


@pytest.fixture
def prefs(tmp_path):
    return PreferenceStore(str(tmp_path / "prefs.json"))


@pytest.fixture
def store(prefs):
    return PositionStore(prefs)

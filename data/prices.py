# data/prices.py
from typing import Dict, Iterable, List, Optional

from data.assets import Asset


class PriceBook:
    """Last known market snapshot, keyed by asset id. Replaced wholesale on each refresh."""

    def __init__(self, assets: Iterable[Asset] = ()):
        self._assets: Dict[str, Asset] = {}
        self.replace(assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._assets

    def replace(self, assets: Iterable[Asset]):
        self._assets = {a.id: a for a in assets}

    def upsert(self, asset: Asset):
        """Store a single freshly fetched asset (e.g. from a detail call)."""
        self._assets[asset.id] = asset

    def get(self, asset_id: str) -> Optional[Asset]:
        return self._assets.get(asset_id)

    def assets(self) -> List[Asset]:
        return list(self._assets.values())

    def price_of(self, asset_id: str) -> Optional[float]:
        """None means "not known right now", never zero."""
        asset = self._assets.get(asset_id)
        return asset.price if asset else None

    # ---------- rankings ----------
    def top_gainers(self, limit: int = 6) -> List[Asset]:
        return sorted(self._assets.values(), key=lambda a: a.percent_change_24h or 0.0, reverse=True)[:limit]

    def top_by_volume(self, limit: int = 6) -> List[Asset]:
        return sorted(self._assets.values(), key=lambda a: a.volume_24h or 0.0, reverse=True)[:limit]

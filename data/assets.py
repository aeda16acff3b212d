# data/assets.py
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.errors import DecodeError

log = logging.getLogger(__name__)


def _opt_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _opt_int(v: Any) -> Optional[int]:
    f = _opt_float(v)
    return None if f is None else int(f)


def _opt_str(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None


def normalize_id(raw: Any) -> str:
    """Asset ids arrive as 1 or "1"; we always key by the string form."""
    if isinstance(raw, bool) or raw is None:
        raise DecodeError(f"asset id is missing or not a string/int: {raw!r}")
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    raise DecodeError(f"asset id is missing or not a string/int: {raw!r}")


@dataclass
class Asset:
    """One listed cryptocurrency with its USD quote. Only ``id`` is guaranteed."""
    id: str
    name: str = ""
    symbol: str = ""
    price: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    market_cap: Optional[float] = None
    volume_24h: Optional[float] = None
    circulating_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None
    rank: Optional[int] = None
    date_added: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    platform: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Dict[str, Any]) -> "Asset":
        """
        Decode one CoinMarketCap listing/quote entry.
        Peripheral fields that are missing or mistyped become None instead of failing the decode.
        """
        if not isinstance(raw, dict):
            raise DecodeError(f"asset entry is not an object: {type(raw).__name__}")
        asset_id = normalize_id(raw.get("id"))

        quote = raw.get("quote")
        usd = quote.get("USD") if isinstance(quote, dict) else None
        usd = usd if isinstance(usd, dict) else {}

        platform = raw.get("platform")
        tags = raw.get("tags")

        return cls(
            id=asset_id,
            name=_opt_str(raw.get("name")) or "",
            symbol=_opt_str(raw.get("symbol")) or "",
            price=_opt_float(usd.get("price")),
            percent_change_1h=_opt_float(usd.get("percent_change_1h")),
            percent_change_24h=_opt_float(usd.get("percent_change_24h")),
            percent_change_7d=_opt_float(usd.get("percent_change_7d")),
            market_cap=_opt_float(usd.get("market_cap")),
            volume_24h=_opt_float(usd.get("volume_24h")),
            circulating_supply=_opt_float(raw.get("circulating_supply")),
            total_supply=_opt_float(raw.get("total_supply")),
            max_supply=_opt_float(raw.get("max_supply")),
            rank=_opt_int(raw.get("cmc_rank")),
            date_added=_opt_str(raw.get("date_added")),
            tags=[t for t in tags if isinstance(t, str)] if isinstance(tags, list) else [],
            platform=_opt_str(platform.get("name")) if isinstance(platform, dict) else None,
        )


def decode_assets(entries: Any) -> List[Asset]:
    """Decode a listing array, skipping (and logging) entries that have no usable id."""
    if not isinstance(entries, list):
        raise DecodeError(f"expected a list of assets, got {type(entries).__name__}")
    out: List[Asset] = []
    for raw in entries:
        try:
            out.append(Asset.from_payload(raw))
        except DecodeError as e:
            log.warning(f"Skipping undecodable asset: {e}")
    return out

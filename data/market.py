# data/market.py
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from core.errors import DecodeError, HTTPStatusError, NetworkError
from data.assets import Asset, decode_assets
from utils.price_stats import change_pct, sparkline

log = logging.getLogger(__name__)


class MarketDataClient:
    """
    CoinMarketCap Pro v1 client. Every failure surfaces as NetworkError,
    HTTPStatusError or DecodeError so callers can tell them apart.
    """

    def __init__(self, api_key: str, base_url: str = "https://pro-api.coinmarketcap.com",
                 timeout: float = 15.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "X-CMC_PRO_API_KEY": api_key,
            "Accept": "application/json",
            "User-Agent": "cryptofolio/1.0",
        })

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"GET {path} failed: {e}") from e
        if not 200 <= r.status_code < 300:
            raise HTTPStatusError(r.status_code, _error_message(r))
        try:
            body = r.json()
        except ValueError as e:
            raise DecodeError(f"GET {path} returned invalid JSON: {e}") from e
        if not isinstance(body, dict) or "data" not in body:
            raise DecodeError(f"GET {path} response has no 'data' field")
        return body["data"]

    def list_assets(self, limit: int = 100) -> List[Asset]:
        data = self._get("/v1/cryptocurrency/listings/latest", {"limit": limit, "convert": "USD"})
        assets = decode_assets(data)
        log.info(f"Fetched {len(assets)} listed assets")
        return assets

    def fetch_detail(self, asset_id: str) -> Asset:
        data = self._get("/v1/cryptocurrency/quotes/latest", {"id": asset_id})
        if not isinstance(data, dict) or not data:
            raise DecodeError(f"No quote returned for asset {asset_id}")
        return Asset.from_payload(next(iter(data.values())))

    def fetch_historical(self, asset_id: str, interval: str = "1h",
                         time_start: Optional[str] = None, time_end: Optional[str] = None) -> pd.DataFrame:
        """Historical USD quotes as a DataFrame with columns time (UTC) and price, oldest first."""
        params: Dict[str, Any] = {"id": asset_id, "interval": interval}
        if time_start:
            params["time_start"] = time_start
        if time_end:
            params["time_end"] = time_end
        data = self._get("/v1/cryptocurrency/quotes/historical", params)

        quotes = data.get("quotes") if isinstance(data, dict) else None
        if not isinstance(quotes, list):
            raise DecodeError(f"Historical response for {asset_id} has no quotes list")
        rows = []
        try:
            for q in quotes:
                rows.append({"time": q["timestamp"], "price": float(q["quote"]["USD"]["price"])})
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Malformed historical quote for {asset_id}: {e}") from e

        df = pd.DataFrame(rows, columns=["time", "price"])
        df["time"] = pd.to_datetime(df["time"], utc=True)
        return df.sort_values("time").reset_index(drop=True)

    def fetch_trend(self, asset_id: str, interval: str = "1h", points: int = 24) -> Dict[str, Any]:
        """Sparkline samples plus the period change for a mini chart."""
        df = self.fetch_historical(asset_id, interval=interval)
        prices = df["price"].to_numpy()
        return {"sparkline": sparkline(prices, points), "change_pct": change_pct(prices)}


def _error_message(r: requests.Response) -> str:
    try:
        status = r.json().get("status", {})
        return str(status.get("error_message") or r.reason or "")
    except (ValueError, AttributeError):
        return r.reason or ""

# cryptofolio.py
# Cryptofolio runner: loads .env, refreshes prices once, optionally books a buy, prints the portfolio.
# Uses CoinMarketCap Pro (CMC_API_KEY required). Positions live in a local JSON preference file.

from __future__ import annotations
import asyncio
import os
import sys

from core import config
from core.errors import CryptofolioError
from core.kv_store import PreferenceStore
from core.logging_setup import setup_logging
from data.market import MarketDataClient
from data.prices import PriceBook
from engine.position_store import PositionStore
from engine.refresh import PriceRefresher
from engine.validation import parse_purchase
from engine.valuation import ValuationEngine

# --------------------------------------------------------------------------------------
# Utils
# --------------------------------------------------------------------------------------
def fmt(x, nd=2):
    try:
        return f"{float(x):,.{nd}f}"
    except (TypeError, ValueError):
        return "—"


def fmt_pct(x):
    return "—" if x is None else f"{x:+.2f}%"


def book_purchase_from_env(store: PositionStore, prices: PriceBook, client: MarketDataClient) -> None:
    """BUY_ASSET_ID + BUY_INVESTED (+ optional BUY_PRICE, defaults to the live price)."""
    asset_id = os.getenv("BUY_ASSET_ID")
    if not asset_id:
        return
    asset = prices.get(asset_id)
    if asset is None:
        # not in the listing page, ask for it directly
        asset = client.fetch_detail(asset_id)
        prices.upsert(asset)
    price_text = os.getenv("BUY_PRICE") or (str(asset.price) if asset.price is not None else "")
    candidate = parse_purchase(asset, os.getenv("BUY_INVESTED", ""), price_text)
    pos = store.add(candidate)
    print(f"Booked {candidate.invested_amount} USD of {asset.symbol} @ {fmt(candidate.unit_price)} "
          f"-> {fmt(pos.amount, 8)} {asset.symbol}")


def print_portfolio(store: PositionStore, engine: ValuationEngine) -> None:
    positions = store.list()
    if not positions:
        print("Portfolio is empty.")
        return
    for p in positions:
        v = engine.valuation(p)
        if v is None:
            print(f"{p.asset_symbol:<6} | amount={fmt(p.amount, 8)} | avg={fmt(p.average_cost)} | price unknown")
            continue
        print(f"{p.asset_symbol:<6} | amount={fmt(p.amount, 8)} | avg={fmt(p.average_cost)} "
              f"| value={fmt(v.current_value)} | P/L={fmt(v.gain_loss)} ({fmt_pct(v.gain_loss_percent)})")

    s = engine.summary(positions)
    partial = f" (partial: {s.unpriced_positions} unpriced)" if s.is_partial else ""
    print(f"TOTAL  | value={fmt(s.total_value)}{partial} | invested={fmt(s.total_invested)} "
          f"| P/L={fmt(s.total_gain_loss)} ({fmt_pct(s.total_gain_loss_percent)})")


# --------------------------------------------------------------------------------------
# Main
# --------------------------------------------------------------------------------------
async def run() -> int:
    client = MarketDataClient(config.require_api_key(), config.CMC_BASE_URL, timeout=config.REQUEST_TIMEOUT)
    prices = PriceBook()
    refresher = PriceRefresher(client, prices, timeout=config.REQUEST_TIMEOUT, limit=config.LISTING_LIMIT)
    engine = ValuationEngine(prices, refresher)
    store = PositionStore(PreferenceStore(config.PREFERENCES_PATH), key=config.POSITIONS_KEY)

    print(f"Cryptofolio | positions={len(store.list())} | prefs={config.PREFERENCES_PATH}")

    status = await refresher.refresh()
    if status != "success":
        print(f"Price refresh {status}: {refresher.state.message}")

    book_purchase_from_env(store, prices, client)
    print_portfolio(store, engine)

    if len(prices):
        movers = ", ".join(f"{a.symbol} {fmt_pct(a.percent_change_24h)}" for a in prices.top_gainers())
        print(f"Top 24h: {movers}")
    return 0


def main():
    setup_logging()
    try:
        code = asyncio.run(run())
    except CryptofolioError as e:
        print(f"Error: {e}")
        code = 1
    except KeyboardInterrupt:
        print("\nStopping…")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()

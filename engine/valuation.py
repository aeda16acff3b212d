# engine/valuation.py

import asyncio
from typing import Iterable, Optional

from data.prices import PriceBook
from engine.portfolio import PortfolioSummary, Position, Valuation
from engine.refresh import PriceRefresher


class ValuationEngine:
    """
    Values positions against the last known prices.

    A position whose asset has no known price yet is valued at nothing:
    it adds 0 to total_portfolio_value and is left out of total_gain_loss,
    but its invested amount still counts in total_gain_loss_percent.
    While prices are loading the total is therefore understated;
    summary() reports how many positions were unpriced.
    """

    def __init__(self, price_book: PriceBook, refresher: Optional[PriceRefresher] = None):
        self.price_book = price_book
        self.refresher = refresher

    def current_price(self, asset_id: str) -> Optional[float]:
        return self.price_book.price_of(asset_id)

    def valuation(self, position: Position) -> Optional[Valuation]:
        price = self.current_price(position.asset_id)
        if price is None:
            return None
        return Valuation(
            current_value=position.current_value(price),
            gain_loss=position.gain_loss(price),
            gain_loss_percent=position.gain_loss_percent(price),
        )

    def total_portfolio_value(self, positions: Iterable[Position]) -> float:
        total = 0.0
        for p in positions:
            v = self.valuation(p)
            if v is not None:
                total += v.current_value
        return total

    def total_gain_loss(self, positions: Iterable[Position]) -> float:
        total = 0.0
        for p in positions:
            v = self.valuation(p)
            if v is not None:
                total += v.gain_loss
        return total

    def total_gain_loss_percent(self, positions: Iterable[Position]) -> float:
        positions = list(positions)
        invested = sum(p.total_invested for p in positions)
        if invested <= 0:
            return 0.0
        return self.total_gain_loss(positions) / invested * 100

    def summary(self, positions: Iterable[Position]) -> PortfolioSummary:
        positions = list(positions)
        priced = sum(1 for p in positions if self.current_price(p.asset_id) is not None)
        return PortfolioSummary(
            total_value=self.total_portfolio_value(positions),
            total_invested=sum(p.total_invested for p in positions),
            total_gain_loss=self.total_gain_loss(positions),
            total_gain_loss_percent=self.total_gain_loss_percent(positions),
            priced_positions=priced,
            unpriced_positions=len(positions) - priced,
        )

    def refresh(self) -> Optional[asyncio.Task]:
        """Fire-and-forget price refresh. Must be called from the owning event loop."""
        if self.refresher is None:
            return None
        return self.refresher.start()

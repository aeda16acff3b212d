# cryptofolio/engine/portfolio.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict


def _new_id() -> str:
    return str(uuid.uuid4())


def _utc(ts: datetime) -> datetime:
    # naive timestamps are taken as UTC
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Position:
    """
    One aggregated holding of an asset with a single weighted-average cost basis.
    Frozen: changes go through PositionStore, which swaps in a new value.
    """
    asset_id: str
    asset_name: str
    asset_symbol: str
    amount: float                   # units of the asset (e.g., BTC)
    average_cost: float             # USD paid per unit, averaged across merged buys
    acquired_at: datetime           # date of the earliest merged purchase
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        object.__setattr__(self, "acquired_at", _utc(self.acquired_at))

    @property
    def total_invested(self) -> float:
        return self.amount * self.average_cost

    def current_value(self, price: float) -> float:
        return self.amount * price

    def gain_loss(self, price: float) -> float:
        return self.current_value(price) - self.total_invested

    def gain_loss_percent(self, price: float) -> float:
        invested = self.total_invested
        if invested <= 0:
            return 0.0
        return self.gain_loss(price) / invested * 100

    # ---------- persistence ----------
    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "assetId": self.asset_id,
            "assetName": self.asset_name,
            "assetSymbol": self.asset_symbol,
            "amount": self.amount,
            "averageCost": self.average_cost,
            "acquiredAt": _utc(self.acquired_at).isoformat(),
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Position":
        """Inverse of to_record. Raises KeyError/TypeError/ValueError on malformed records."""
        return cls(
            id=str(rec["id"]),
            asset_id=str(rec["assetId"]),
            asset_name=str(rec["assetName"]),
            asset_symbol=str(rec["assetSymbol"]),
            amount=float(rec["amount"]),
            average_cost=float(rec["averageCost"]),
            acquired_at=_utc(datetime.fromisoformat(rec["acquiredAt"])),
        )


@dataclass
class PurchaseCandidate:
    asset_id: str
    asset_name: str
    asset_symbol: str
    invested_amount: float          # USD spent on this buy
    unit_price: float               # USD per unit paid
    acquired_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class Valuation:
    current_value: float
    gain_loss: float
    gain_loss_percent: float


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: float
    total_invested: float
    total_gain_loss: float
    total_gain_loss_percent: float
    priced_positions: int
    unpriced_positions: int

    @property
    def is_partial(self) -> bool:
        """True while some holdings have no known price, so total_value is understated."""
        return self.unpriced_positions > 0

# engine/position_store.py

import json
import logging
from dataclasses import replace
from typing import List, Optional

from core.errors import NotFoundError, PersistenceError, ValidationError
from core.kv_store import PreferenceStore
from engine.portfolio import Position, PurchaseCandidate
from engine.validation import require_non_negative, require_positive

log = logging.getLogger(__name__)


class PositionStore:
    """
    Owner of the portfolio's holdings:
      • one Position per asset; repeat buys merge into a weighted-average cost
      • loaded once on construction, persisted after every add/update/delete
      • persistence is best effort: a failed write is logged, memory stays authoritative
    """

    def __init__(self, preferences: PreferenceStore, key: str = "portfolio_positions"):
        self.preferences = preferences
        self.key = key
        self._positions: List[Position] = []
        self.load()

    # ---------- persistence ----------
    def load(self):
        try:
            raw = self.preferences.read(self.key)
        except PersistenceError as e:
            log.error(f"Could not read positions, starting empty: {e}")
            self._positions = []
            return
        if raw is None:
            self._positions = []
            return
        try:
            records = json.loads(raw.decode("utf-8"))
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            positions = [Position.from_record(r) for r in records]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            # never partially populated
            log.error(f"Discarding unreadable positions blob: {e!r}")
            positions = []
        self._positions = positions
        log.info(f"Loaded {len(self._positions)} positions")

    def save(self) -> bool:
        try:
            blob = json.dumps([p.to_record() for p in self._positions]).encode("utf-8")
            self.preferences.write(self.key, blob)
        except (PersistenceError, TypeError, ValueError) as e:
            log.error(f"Failed to persist {len(self._positions)} positions: {e}")
            return False
        return True

    # ---------- queries ----------
    def list(self) -> List[Position]:
        return list(self._positions)

    def get(self, position_id: str) -> Optional[Position]:
        return next((p for p in self._positions if p.id == position_id), None)

    def require(self, position_id: str) -> Position:
        position = self.get(position_id)
        if position is None:
            raise NotFoundError(position_id)
        return position

    def find_by_asset(self, asset_id: str) -> Optional[Position]:
        return next((p for p in self._positions if p.asset_id == asset_id), None)

    def _index_of(self, position_id: str) -> Optional[int]:
        for i, p in enumerate(self._positions):
            if p.id == position_id:
                return i
        return None

    # ---------- mutations ----------
    def add(self, candidate: PurchaseCandidate) -> Position:
        invested = require_positive(candidate.invested_amount, "invested amount")
        unit_price = require_positive(candidate.unit_price, "unit price")
        amount = invested / unit_price

        existing = self.find_by_asset(candidate.asset_id)
        if existing is not None:
            new_amount = existing.amount + amount
            if new_amount <= 0:
                raise ValidationError(f"Merged amount for {candidate.asset_id} is not positive: {new_amount}")
            new_cost = (existing.amount * existing.average_cost + amount * unit_price) / new_amount
            position = replace(
                existing,
                asset_name=candidate.asset_name,
                asset_symbol=candidate.asset_symbol,
                amount=new_amount,
                average_cost=new_cost,
            )
            self._positions[self._index_of(existing.id)] = position
            log.info(f"Merged buy into {position.asset_symbol}: amount={new_amount:.8f} avg_cost={new_cost:.2f}")
        else:
            position = Position(
                asset_id=candidate.asset_id,
                asset_name=candidate.asset_name,
                asset_symbol=candidate.asset_symbol,
                amount=amount,
                average_cost=unit_price,
                acquired_at=candidate.acquired_at,
            )
            self._positions.append(position)
            log.info(f"Opened position {position.asset_symbol}: amount={amount:.8f} cost={unit_price:.2f}")

        self.save()
        return position

    def update(self, position: Position) -> bool:
        """
        Replace the stored position with the same id. Unknown ids are a logged no-op.
        Raises ValidationError for a negative amount, a non-positive cost, or an
        asset that another position already holds.
        """
        idx = self._index_of(position.id)
        if idx is None:
            log.warning(f"update ignored: {NotFoundError(position.id)}")
            return False
        require_non_negative(position.amount, "amount")
        require_positive(position.average_cost, "average cost")
        holder = self.find_by_asset(position.asset_id)
        if holder is not None and holder.id != position.id:
            raise ValidationError(f"Asset {position.asset_id} is already held by position {holder.id}")
        self._positions[idx] = position
        self.save()
        return True

    def delete(self, position_id: str) -> bool:
        idx = self._index_of(position_id)
        if idx is None:
            log.warning(f"delete ignored: {NotFoundError(position_id)}")
            return False
        removed = self._positions.pop(idx)
        log.info(f"Deleted position {removed.asset_symbol} ({removed.id})")
        self.save()
        return True

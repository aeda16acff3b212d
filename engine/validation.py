# engine/validation.py
import math
from datetime import datetime, timezone
from typing import Optional

from core.errors import ValidationError
from data.assets import Asset
from engine.portfolio import PurchaseCandidate


def require_positive(value, name: str) -> float:
    """Accept only finite numbers > 0; bools and strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be greater than zero, got {value!r}")
    return value


def require_non_negative(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{name} must not be negative, got {value!r}")
    return value


def parse_decimal(text: str, name: str = "value") -> float:
    """Parse user input such as "0,5" or " 1.25 " into a positive float."""
    if text is None:
        raise ValidationError(f"{name} is required")
    cleaned = str(text).strip().replace(",", ".")
    if not cleaned:
        raise ValidationError(f"{name} is required")
    try:
        value = float(cleaned)
    except ValueError:
        raise ValidationError(f"{name} is not a number: {text!r}") from None
    return require_positive(value, name)


def estimated_units(invested: float, unit_price: float) -> float:
    """How many units a purchase buys; shown before the user confirms."""
    return require_positive(invested, "invested amount") / require_positive(unit_price, "unit price")


def parse_purchase(asset: Asset, invested_text: str, price_text: str,
                   acquired_at: Optional[datetime] = None) -> PurchaseCandidate:
    return PurchaseCandidate(
        asset_id=asset.id,
        asset_name=asset.name,
        asset_symbol=asset.symbol,
        invested_amount=parse_decimal(invested_text, "invested amount"),
        unit_price=parse_decimal(price_text, "unit price"),
        acquired_at=acquired_at or datetime.now(timezone.utc),
    )

# utils/price_stats.py
# Small statistics over historical price series for list/detail views.
# NumPy only. NaNs in the input are dropped before anything is computed.

from __future__ import annotations
import numpy as np


# ---------- helpers ----------

def _clean_1d(x) -> np.ndarray:
    a = np.asarray(x, dtype=float)
    if a.ndim != 1:
        a = a.reshape(-1)
    return a[np.isfinite(a)]


# ---------- series ----------

def sparkline(prices, points: int = 24) -> list[float]:
    """
    Downsample a price series to at most `points` evenly spaced samples.
    First and last samples are always kept so the line spans the whole period.
    """
    p = _clean_1d(prices)
    if points <= 0 or len(p) == 0:
        return []
    if len(p) <= points:
        return p.tolist()
    idx = np.linspace(0, len(p) - 1, num=points).round().astype(int)
    return p[idx].tolist()


def change_pct(prices) -> float | None:
    """Percent change from first to last sample; None when it cannot be computed."""
    p = _clean_1d(prices)
    if len(p) < 2 or p[0] == 0:
        return None
    return float((p[-1] - p[0]) / p[0] * 100.0)


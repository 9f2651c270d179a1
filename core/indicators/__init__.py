from __future__ import annotations

from .atr import compute_atr
from .ema import compute_ema
from .macd import compute_macd_histogram
from .obv import compute_obv, obv_change_pct
from .order_book import compute_depth_weighted_imbalance
from .stochastic import compute_stochastic_k
from .volume_pressure import compute_volume_pressure

__all__ = [
    "compute_atr",
    "compute_depth_weighted_imbalance",
    "compute_ema",
    "compute_macd_histogram",
    "compute_obv",
    "compute_stochastic_k",
    "compute_volume_pressure",
    "obv_change_pct",
]

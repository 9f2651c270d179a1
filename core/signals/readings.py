"""Indicator readings extraction for a single candle.

Usage:
    from core.signals.readings import extract_readings

    readings = extract_readings(candles, index=len(candles) - 2, obi_pct=62.5)
"""

from __future__ import annotations

from typing import Sequence

from core.indicators.macd import compute_macd_histogram
from core.indicators.obv import compute_obv, obv_change_pct
from core.indicators.order_book import NEUTRAL_IMBALANCE
from core.indicators.stochastic import compute_stochastic_k
from core.indicators.volume_pressure import compute_volume_pressure
from core.types import Candle, SignalReadings

OBV_CHANGE_WINDOW = 20


def extract_readings(
    candles: Sequence[Candle],
    index: int,
    obi_pct: float = NEUTRAL_IMBALANCE,
) -> SignalReadings:
    """Compute the five indicator readings at `index`.

    Only `candles[:index + 1]` is looked at, so nothing after the evaluated
    candle leaks into its readings.

    Args:
        candles: Candle history, oldest first
        index: Position of the evaluated candle
        obi_pct: Order book imbalance for the evaluated moment (default: neutral 50)

    Raises:
        IndexError: If index is outside the candle sequence
    """
    if not 0 <= index < len(candles):
        raise IndexError(f"index {index} out of range for {len(candles)} candles")

    history = candles[: index + 1]

    obv = compute_obv(history)
    histogram = compute_macd_histogram(history)
    stoch_k = compute_stochastic_k(history)

    return SignalReadings(
        obv_change_pct=obv_change_pct(obv, index, window=OBV_CHANGE_WINDOW),
        stoch_k=stoch_k[index],
        macd_hist=histogram[index],
        volume_pressure=compute_volume_pressure(history[index]),
        obi_pct=obi_pct,
    )

"""Intra-candle volume pressure (used as an open-interest proxy)."""

from __future__ import annotations

from core.types import Candle


def compute_volume_pressure(candle: Candle) -> float:
    """Map the close position inside the high-low range to -100..+100.

    A close at the high reads +100, at the low -100, mid-range 0. Candles with
    a range below 1e-6 read 0.
    """
    high = float(candle.high)
    low = float(candle.low)
    price_range = high - low
    if price_range < 1e-6:
        return 0.0

    close_position = (float(candle.close) - low) / price_range
    return (close_position * 2 - 1) * 100

"""
ATR (Average True Range) indicator module.

Usage:
    from core.indicators.atr import compute_atr
    from core.types import Candle

    atr_values = compute_atr(candles, period=14)
    current_atr = atr_values[-1]
"""

from __future__ import annotations

from typing import Sequence

from core.types import Candle


def compute_true_ranges(candles: Sequence[Candle]) -> list[float]:
    """True range for every candle after the first."""
    true_ranges = []

    for i in range(1, len(candles)):
        high = float(candles[i].high)
        low = float(candles[i].low)
        prev_close = float(candles[i - 1].close)

        # True Range = max(H-L, |H-PC|, |L-PC|)
        true_ranges.append(max(high - low, abs(high - prev_close), abs(low - prev_close)))

    return true_ranges


def compute_atr(candles: Sequence[Candle], period: int = 14) -> list[float]:
    """
    Calculate the ATR series from candle data.

    Formula:
        True Range = max(High - Low, |High - Previous Close|, |Low - Previous Close|)
        ATR[first] = sum(first `period` true ranges) / period
        ATR[next] = (ATR[prev] * (period - 1) + True Range) / period   (Wilder)

    The series is left-padded with the first ATR value so its length matches
    the candle count. With fewer than `period` true ranges the first value is
    still the partial sum divided by `period`.

    Args:
        candles: Sequence of OHLCV candles, oldest first
        period: Lookback period for ATR calculation (default: 14)

    Returns:
        ATR values, same length as candles (zeros when there is no true range)

    Raises:
        ValueError: If period < 1
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    true_ranges = compute_true_ranges(candles)
    if not true_ranges:
        return [0.0] * len(candles)

    atr = sum(true_ranges[:period]) / period
    atr_values = [atr]

    for i in range(period, len(true_ranges)):
        atr = (atr * (period - 1) + true_ranges[i]) / period
        atr_values.append(atr)

    padding = [atr_values[0]] * (len(candles) - len(atr_values))
    return padding + atr_values

"""
MACD (Moving Average Convergence Divergence) histogram module.

Usage:
    from core.indicators.macd import compute_macd_histogram
    from core.types import Candle

    histogram = compute_macd_histogram(candles)
    latest = histogram[-1]
"""

from __future__ import annotations

from typing import Sequence

from core.indicators.ema import compute_ema
from core.types import Candle


def compute_macd_line(
    candles: Sequence[Candle],
    fast_period: int = 12,
    slow_period: int = 26,
) -> list[float]:
    """MACD line (fast EMA minus slow EMA of closes) for every candle."""
    if fast_period >= slow_period:
        raise ValueError(f"fast_period ({fast_period}) must be < slow_period ({slow_period})")

    closes = [float(c.close) for c in candles]
    fast_ema = compute_ema(closes, fast_period)
    slow_ema = compute_ema(closes, slow_period)
    return [f - s for f, s in zip(fast_ema, slow_ema)]


def compute_macd_histogram(
    candles: Sequence[Candle],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> list[float]:
    """
    Calculate the MACD histogram series from candle data.

    Formula:
        MACD Line = EMA(fast_period) - EMA(slow_period)
        Signal[i] = last value of EMA(MACD Line[0..i], signal_period)
        Histogram[i] = MACD Line[i] - Signal[i]

    The signal at index i only ever sees the MACD prefix ending at i. Since the
    EMA is causal, the last value of the EMA over a prefix equals the EMA of
    the full line at that index, so one pass produces the same values as
    recomputing the signal over every growing prefix.

    Args:
        candles: Sequence of OHLCV candles, oldest first
        fast_period: Fast EMA period (default: 12)
        slow_period: Slow EMA period (default: 26)
        signal_period: Signal line EMA period (default: 9)

    Returns:
        Histogram values, same length as candles

    Raises:
        ValueError: If periods are invalid
    """
    if fast_period < 1 or slow_period < 1 or signal_period < 1:
        raise ValueError("All periods must be >= 1")

    macd_line = compute_macd_line(candles, fast_period=fast_period, slow_period=slow_period)
    signal_line = compute_ema(macd_line, signal_period)

    return [m - s for m, s in zip(macd_line, signal_line)]

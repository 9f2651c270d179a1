"""
Stochastic Oscillator (%K) indicator module.

Usage:
    from core.indicators.stochastic import compute_stochastic_k
    from core.types import Candle

    k_values = compute_stochastic_k(candles, k_period=14)
    current_k = k_values[-1]
"""

from __future__ import annotations

from typing import Sequence

from core.types import Candle

FLAT_RANGE_EPSILON = 1e-6
NEUTRAL_K = 50.0


def compute_stochastic_k(candles: Sequence[Candle], k_period: int = 14) -> list[float]:
    """
    Calculate the Stochastic %K series from candle data.

    Formula:
        %K = 100 * (Close - Lowest Low) / (Highest High - Lowest Low)

    Indices before the first full window, and windows whose high-low range is
    at or below 1e-6 (flat market), read as the neutral 50.

    Args:
        candles: Sequence of OHLCV candles, oldest first
        k_period: Lookback period for %K (default: 14)

    Returns:
        %K values (0-100), same length as candles

    Raises:
        ValueError: If k_period < 1
    """
    if k_period < 1:
        raise ValueError(f"k_period must be >= 1, got {k_period}")

    k_values = [NEUTRAL_K] * len(candles)

    for i in range(k_period - 1, len(candles)):
        window = candles[i - k_period + 1 : i + 1]

        lowest_low = min(float(c.low) for c in window)
        highest_high = max(float(c.high) for c in window)
        price_range = highest_high - lowest_low

        if price_range > FLAT_RANGE_EPSILON:
            k_values[i] = 100.0 * (float(candles[i].close) - lowest_low) / price_range

    return k_values

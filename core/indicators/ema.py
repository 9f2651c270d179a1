"""
EMA (Exponential Moving Average) indicator module.

Usage:
    from core.indicators.ema import compute_ema

    ema_values = compute_ema([float(c.close) for c in candles], period=12)
"""

from __future__ import annotations

from typing import Sequence


def compute_ema(values: Sequence[float], period: int) -> list[float]:
    """
    Calculate the EMA series for a sequence of values.

    The series is seeded with the first value; every later term follows the
    standard recurrence.

    Formula:
        alpha = 2 / (period + 1)
        EMA[i] = alpha * value[i] + (1 - alpha) * EMA[i-1]

    Args:
        values: Input values, oldest first
        period: Smoothing period

    Returns:
        EMA values, same length as the input

    Raises:
        ValueError: If period < 1
    """
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")

    alpha = 2.0 / (period + 1)
    ema: list[float] = []
    current: float | None = None

    for value in values:
        if current is None:
            current = float(value)
        else:
            current = alpha * value + (1 - alpha) * current
        ema.append(current)

    return ema

"""On-Balance Volume indicator module."""

from __future__ import annotations

from typing import Sequence

from core.types import Candle


def compute_obv(candles: Sequence[Candle]) -> list[float]:
    """
    Calculate the OBV series.

    The running total starts at the first candle's volume. Volume is added
    when the close rises versus the previous candle, subtracted when it
    falls, and the total is carried over unchanged on an equal close.

    Args:
        candles: Sequence of OHLCV candles, oldest first

    Returns:
        OBV values, same length as candles (empty for no candles)
    """
    if not candles:
        return []

    obv = [float(candles[0].volume)]
    for i in range(1, len(candles)):
        close = candles[i].close
        prev_close = candles[i - 1].close
        volume = float(candles[i].volume)

        if close > prev_close:
            obv.append(obv[-1] + volume)
        elif close < prev_close:
            obv.append(obv[-1] - volume)
        else:
            obv.append(obv[-1])

    return obv


def obv_change_pct(obv: Sequence[float], index: int, window: int = 20) -> float:
    """Percent change of OBV across the `window` values preceding `index`.

    The window is `obv[max(0, index - window):index]`, so the value at
    `index` itself is excluded. A zero starting value is replaced by 1e-6.
    """
    values = obv[max(0, index - window) : index]
    if not values:
        return 0.0

    initial = values[0]
    final = values[-1]
    return (final - initial) / abs(initial or 1e-6) * 100

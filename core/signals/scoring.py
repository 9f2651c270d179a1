"""Weighted directional scoring of indicator readings.

Each indicator maps its raw reading to a signed point value bounded by its
weight through a fixed threshold ladder. The signed values are summed into a
net score whose sign is the predicted direction.
"""

from __future__ import annotations

from core.signals.weights import OBI_WEIGHT, IndicatorWeights
from core.types import Direction, IndicatorCode, PredictionResult, SignalReadings

MAX_CONFIDENCE = 100.0


def score_obv(change_pct: float, weight: float) -> float:
    """Money flow: full weight beyond +/-1% OBV change."""
    if change_pct > 1:
        return weight
    if change_pct < -1:
        return -weight
    return 0.0


def score_stochastic(k: float, weight: float) -> float:
    """Mean reversion: oversold (< 25) is bullish, overbought (> 75) bearish."""
    if k < 25:
        return weight
    if k > 75:
        return -weight
    return 0.0


def score_volume_pressure(pressure: float, weight: float) -> float:
    """Candle pressure: full weight beyond +/-50, half beyond +/-10."""
    if pressure > 50:
        return weight
    if pressure < -50:
        return -weight
    if pressure > 10:
        return weight / 2
    if pressure < -10:
        return -weight / 2
    return 0.0


def score_macd(histogram: float, weight: float) -> float:
    """Trend confirmation: sign of the histogram."""
    if histogram > 0:
        return weight
    if histogram < 0:
        return -weight
    return 0.0


def score_order_book(obi_pct: float, weight: float = OBI_WEIGHT) -> float:
    """Liquidity skew: full weight beyond 65/35, half beyond 55/45."""
    if obi_pct > 65:
        return weight
    if obi_pct < 35:
        return -weight
    if obi_pct > 55:
        return weight / 2
    if obi_pct < 45:
        return -weight / 2
    return 0.0


def generate_prediction(
    readings: SignalReadings,
    weights: IndicatorWeights,
    obi_weight: float = OBI_WEIGHT,
) -> PredictionResult:
    """Combine indicator readings and weights into a directional call.

    Args:
        readings: Indicator readings at the evaluated candle
        weights: Adjustable indicator weights
        obi_weight: Static order book imbalance weight (default: 15)

    Returns:
        PredictionResult with direction, confidence (0-100), net score and the
        signed contribution of every indicator

    Note:
        A net score of exactly 0 resolves to UP. Ties are broken toward UP on
        purpose so that every evaluation yields a direction.
    """
    components: dict[IndicatorCode, float] = {
        "OBV": score_obv(readings.obv_change_pct, weights.obv),
        "STOCH": score_stochastic(readings.stoch_k, weights.stoch),
        "OI_PROXY": score_volume_pressure(readings.volume_pressure, weights.oi_proxy),
        "MACD": score_macd(readings.macd_hist, weights.macd),
        "OBI": score_order_book(readings.obi_pct, obi_weight),
    }

    score = sum(components.values())
    direction: Direction = "UP" if score >= 0 else "DOWN"
    confidence = min(MAX_CONFIDENCE, abs(score))

    return PredictionResult(
        direction=direction,
        confidence=confidence,
        score=score,
        components=components,
    )

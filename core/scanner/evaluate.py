"""Per-instrument scan evaluation.

Scores the most recently closed candle of one instrument with the current
weights and keeps it only when the call is both confident and backed by a
candle body that is large relative to the ATR.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from core.config import ScannerSettings
from core.errors import InsufficientDataError
from core.indicators.atr import compute_atr
from core.indicators.order_book import compute_depth_weighted_imbalance
from core.market_data.interfaces import MarketDataSource
from core.signals.readings import extract_readings
from core.signals.scoring import generate_prediction
from core.signals.weights import IndicatorWeights
from core.types import Candle, OrderBookSnapshot, ScanResult

logger = logging.getLogger(__name__)

ATR_PERIOD = 14


def volatility_ratio(candle: Candle, atr: float) -> float:
    """Candle body size in ATR units (0 when the ATR is ~0)."""
    if atr <= 1e-6:
        return 0.0
    return abs(float(candle.close) - float(candle.open)) / atr


def score_candles(
    symbol: str,
    candles: Sequence[Candle],
    book: OrderBookSnapshot | None,
    weights: IndicatorWeights,
    *,
    min_candles: int = 200,
    min_confidence: float = 50.0,
    min_volatility_ratio: float = 0.5,
) -> Optional[ScanResult]:
    """Evaluate the last closed candle (the one before the still-open candle).

    Args:
        symbol: Instrument symbol
        candles: Candle history, oldest first; the last candle is still forming
        book: Current order book, or None when unavailable
        weights: Weights to score with
        min_candles: Minimum history length (default: 200)
        min_confidence: Confidence gate, inclusive (default: 50)
        min_volatility_ratio: Body/ATR gate, exclusive (default: 0.5)

    Returns:
        ScanResult when both gates pass, otherwise None

    Raises:
        InsufficientDataError: If fewer than `min_candles` candles are given
    """
    if len(candles) < max(min_candles, 2):
        raise InsufficientDataError(symbol, max(min_candles, 2), len(candles))

    last_index = len(candles) - 2
    current = candles[last_index]
    previous = candles[last_index - 1]

    obi_pct = compute_depth_weighted_imbalance(book)
    readings = extract_readings(candles, last_index, obi_pct=obi_pct)
    prediction = generate_prediction(readings, weights)

    current_atr = compute_atr(candles, period=ATR_PERIOD)[last_index]
    ratio = volatility_ratio(current, current_atr)

    if prediction.confidence < min_confidence or ratio <= min_volatility_ratio:
        return None

    prev_close = float(previous.close)
    recent_change = (float(current.close) - prev_close) / prev_close * 100 if prev_close else 0.0

    return ScanResult(
        symbol=symbol,
        score=prediction.score,
        confidence=prediction.confidence,
        direction=prediction.direction,
        recent_change_pct=recent_change,
        atr=current_atr,
        obi_pct=obi_pct,
    )


async def evaluate_symbol(
    symbol: str,
    weights: IndicatorWeights,
    market: MarketDataSource,
    settings: ScannerSettings,
) -> Optional[ScanResult]:
    """Fetch data for one symbol and score it.

    Errors propagate; the scan pool turns them into "no result".
    """
    candles = await market.fetch_candles(symbol, timeframe=settings.interval, limit=settings.lookback_period)
    if len(candles) < settings.lookback_period:
        raise InsufficientDataError(symbol, settings.lookback_period, len(candles))

    book = await market.fetch_order_book(symbol, limit=settings.order_book_depth)

    return score_candles(
        symbol,
        candles,
        book,
        weights,
        min_candles=settings.lookback_period,
        min_confidence=settings.min_confidence,
        min_volatility_ratio=settings.min_volatility_ratio,
    )

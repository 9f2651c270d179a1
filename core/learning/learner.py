"""Backtest-driven adaptive weight learner.

Walks the most recent candles of one instrument as a series of simulated
predict/observe trials. Every trial predicts with the in-progress weights,
compares the call with what the price actually did `lookahead` candles later,
and nudges the weights of the indicators that voted with the call: up on a
hit, down on a miss.

Usage:
    from core.learning.learner import learn_weights

    outcome = learn_weights(candles, current_weights)
    outcome.weights, outcome.accuracy
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.signals.readings import extract_readings
from core.signals.scoring import generate_prediction
from core.signals.weights import (
    MAX_WEIGHT,
    MIN_WEIGHT,
    WEIGHT_KEYS,
    IndicatorWeights,
    clamp_weight,
    normalize_to_budget,
)
from core.types import Candle, Outcome

logger = logging.getLogger(__name__)

LEARNING_TRADE_COUNT = 50
LOOKAHEAD_CANDLES = 4
LEARNING_RATE = 0.5
# Slow EMA period of the MACD; earlier candles have no meaningful readings
MIN_WARMUP_CANDLES = 26
NEUTRAL_OBI = 50.0


@dataclass(frozen=True)
class LearningOutcome:
    """Result of one learning pass over one instrument.

    `accuracy` is a percentage, or None when the history was too short to
    learn from at all.
    """

    weights: IndicatorWeights
    accuracy: Optional[float]
    trials: int = 0
    hits: int = 0


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def actual_direction(entry_close: float, exit_close: float) -> Outcome:
    change = exit_close - entry_close
    if change > 0:
        return "UP"
    if change < 0:
        return "DOWN"
    return "FLAT"


def learn_weights(
    candles: Sequence[Candle],
    initial_weights: IndicatorWeights,
    *,
    trade_count: int = LEARNING_TRADE_COUNT,
    lookahead: int = LOOKAHEAD_CANDLES,
    learning_rate: float = LEARNING_RATE,
) -> LearningOutcome:
    """Run the predict/observe trials and return adjusted weights.

    Trial i (newest first) predicts at `len - lookahead - 1 - i` and observes
    the close at `len - 1 - i`. The loop stops early once the prediction
    point falls inside the indicator warm-up.

    The order book reading is held neutral during learning because there is
    no order book history to replay.

    Args:
        candles: Candle history, oldest first
        initial_weights: Weights to start from
        trade_count: Maximum number of trials (default: 50)
        lookahead: Candles between prediction and observation (default: 4)
        learning_rate: Points added on a hit / removed on a miss (default: 0.5)

    Returns:
        LearningOutcome with weights normalized to the learned budget and the
        hit rate in percent (0.0 when no trial ran). With fewer than
        `trade_count + lookahead` candles the initial weights come back
        unchanged with accuracy None.
    """
    if len(candles) < trade_count + lookahead:
        return LearningOutcome(weights=initial_weights, accuracy=None)

    adjusted = {code: float(initial_weights.get(code)) for code in WEIGHT_KEYS}
    hits = 0
    trials = 0

    for i in range(trade_count):
        predict_index = len(candles) - lookahead - 1 - i
        outcome_index = len(candles) - 1 - i

        if predict_index < MIN_WARMUP_CANDLES or outcome_index >= len(candles):
            break

        readings = extract_readings(candles, predict_index, obi_pct=NEUTRAL_OBI)
        prediction = generate_prediction(readings, IndicatorWeights.from_values([adjusted[c] for c in WEIGHT_KEYS]))

        actual = actual_direction(float(candles[predict_index].close), float(candles[outcome_index].close))
        trials += 1

        if actual == "FLAT":
            continue

        is_hit = prediction.direction == actual
        if is_hit:
            hits += 1
        delta = learning_rate if is_hit else -learning_rate

        score_sign = _sign(prediction.score)
        for code in WEIGHT_KEYS:
            if _sign(prediction.components[code]) == score_sign:
                adjusted[code] += delta
            adjusted[code] = clamp_weight(adjusted[code], MIN_WEIGHT, MAX_WEIGHT)

    weights = normalize_to_budget([adjusted[c] for c in WEIGHT_KEYS])
    accuracy = hits / trials * 100 if trials > 0 else 0.0

    logger.debug(f"Learning pass: {hits}/{trials} hits, weights={weights.as_dict()}")
    return LearningOutcome(weights=weights, accuracy=accuracy, trials=trials, hits=hits)

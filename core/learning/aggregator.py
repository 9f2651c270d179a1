"""Merge per-instrument learning outcomes into one global weight vector."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.learning.learner import LearningOutcome
from core.signals.weights import (
    LEARNED_BUDGET,
    MAX_WEIGHT,
    MIN_WEIGHT,
    WEIGHT_KEYS,
    IndicatorWeights,
    apply_remainder,
    clamp_weight,
    round_half_up,
    scale_to_budget,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateResult:
    weights: IndicatorWeights
    accuracy: Optional[float]
    contributors: int

    @property
    def changed(self) -> bool:
        return self.contributors > 0


def aggregate_outcomes(
    outcomes: Sequence[LearningOutcome],
    current: IndicatorWeights,
    budget: int = LEARNED_BUDGET,
) -> AggregateResult:
    """Average the panel's learned weights and renormalize to the budget.

    Outcomes without an accuracy (not enough history) are ignored for both
    the weight and the accuracy averages. When nothing is left, the current
    weights are returned unchanged.

    Normalization runs in two passes: the rounded means are scaled to the
    budget and floored at the minimum weight, then scaled again and finally
    corrected for any remaining rounding difference. Per-key rounding and
    flooring would otherwise leave the vector a few points off budget.

    Args:
        outcomes: Learning outcomes computed against the same starting weights
        current: Weights to fall back to
        budget: Target sum of the adjustable weights (default: 85)

    Returns:
        AggregateResult with the merged weights, mean accuracy (None when no
        outcome contributed) and the number of contributing outcomes
    """
    usable = [o for o in outcomes if o.accuracy is not None]
    if not usable:
        logger.info("No usable learning outcomes; keeping current weights")
        return AggregateResult(weights=current, accuracy=None, contributors=0)

    count = len(usable)
    means = [
        round_half_up(sum(o.weights.get(code) for o in usable) / count)
        for code in WEIGHT_KEYS
    ]

    floored = [clamp_weight(v, MIN_WEIGHT, MAX_WEIGHT) for v in scale_to_budget(means, budget)]
    final = apply_remainder(scale_to_budget(floored, budget), budget)

    accuracy = sum(o.accuracy for o in usable) / count  # type: ignore[misc]
    return AggregateResult(
        weights=IndicatorWeights.from_values(final),
        accuracy=accuracy,
        contributors=count,
    )

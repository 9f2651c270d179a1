"""Adaptive weight learning."""

from core.learning.aggregator import AggregateResult, aggregate_outcomes
from core.learning.learner import LearningOutcome, learn_weights

__all__ = [
    "AggregateResult",
    "LearningOutcome",
    "aggregate_outcomes",
    "learn_weights",
]

"""Indicator weights and directional scoring."""

from core.signals.readings import extract_readings
from core.signals.scoring import generate_prediction
from core.signals.weights import (
    DEFAULT_WEIGHTS,
    LEARNED_BUDGET,
    OBI_WEIGHT,
    IndicatorWeights,
    ModelState,
    normalize_to_budget,
)

__all__ = [
    "DEFAULT_WEIGHTS",
    "LEARNED_BUDGET",
    "OBI_WEIGHT",
    "IndicatorWeights",
    "ModelState",
    "extract_readings",
    "generate_prediction",
    "normalize_to_budget",
]

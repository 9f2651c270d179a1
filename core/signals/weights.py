"""Adaptive indicator weights with code defaults and budget normalization.

The four adjustable indicators share a fixed point budget (`LEARNED_BUDGET`).
The order book imbalance weight is static and sits on top of it, so a full
weight vector always adds up to 100 points.

Usage:
    from core.signals.weights import DEFAULT_WEIGHTS, normalize_to_budget

    weights = normalize_to_budget(DEFAULT_WEIGHTS.as_list())
    weights.total  # 85
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence


# Fixed iteration order; the first key absorbs rounding remainders
WEIGHT_KEYS: tuple[str, ...] = ("OBV", "STOCH", "OI_PROXY", "MACD")
_FIELDS: dict[str, str] = {
    "OBV": "obv",
    "STOCH": "stoch",
    "OI_PROXY": "oi_proxy",
    "MACD": "macd",
}

OBI_WEIGHT = 15
TOTAL_BUDGET = 100
LEARNED_BUDGET = TOTAL_BUDGET - OBI_WEIGHT
MIN_WEIGHT = 5
MAX_WEIGHT = 100


@dataclass(frozen=True)
class IndicatorWeights:
    """Points assigned to each adjustable indicator.

    Values are integers once normalized. The learner works on fractional
    values between normalizations, hence the float annotation.
    """

    obv: float
    stoch: float
    oi_proxy: float
    macd: float

    def get(self, code: str) -> float:
        return getattr(self, _FIELDS[code])

    def as_list(self) -> list[float]:
        return [self.get(code) for code in WEIGHT_KEYS]

    def as_dict(self) -> dict[str, float]:
        return {code: self.get(code) for code in WEIGHT_KEYS}

    @property
    def total(self) -> float:
        return sum(self.as_list())

    @classmethod
    def from_values(cls, values: Sequence[float]) -> "IndicatorWeights":
        if len(values) != len(WEIGHT_KEYS):
            raise ValueError(f"expected {len(WEIGHT_KEYS)} weights, got {len(values)}")
        return cls(**{_FIELDS[code]: value for code, value in zip(WEIGHT_KEYS, values)})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "IndicatorWeights":
        """Build from a {"OBV": .., "STOCH": .., ...} mapping.

        Raises:
            ValueError: If a key is missing or a value is not a non-negative number
        """
        values = []
        for code in WEIGHT_KEYS:
            if code not in data:
                raise ValueError(f"missing weight for {code}")
            value = data[code]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"weight for {code} must be a number, got {value!r}")
            if value < 0:
                raise ValueError(f"weight for {code} must be >= 0, got {value}")
            values.append(value)
        return cls.from_values(values)


DEFAULT_WEIGHTS = IndicatorWeights(obv=30, stoch=25, oi_proxy=20, macd=10)
DEFAULT_ACCURACY = "0.0"


@dataclass(frozen=True)
class ModelState:
    """Learned weights plus the accuracy they were derived with."""

    weights: IndicatorWeights = DEFAULT_WEIGHTS
    accuracy: str = DEFAULT_ACCURACY
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def format_accuracy(accuracy: float | None) -> str:
    """Render an accuracy percentage with one decimal, "N/A" when unknown."""
    if accuracy is None:
        return "N/A"
    return f"{accuracy:.1f}"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def clamp_weight(value: float, floor: float = MIN_WEIGHT, ceiling: float = MAX_WEIGHT) -> float:
    return max(floor, min(ceiling, value))


def scale_to_budget(values: Sequence[float], budget: int = LEARNED_BUDGET) -> list[int]:
    """Scale values proportionally to `budget` and round each one.

    The rounded values may miss the budget by a few points.

    Raises:
        ValueError: If the values do not add up to a positive total
    """
    total = sum(values)
    if total <= 0:
        raise ValueError("weights total must be > 0")
    factor = budget / total
    return [round_half_up(v * factor) for v in values]


def apply_remainder(
    values: Sequence[int],
    budget: int = LEARNED_BUDGET,
    floor: int = MIN_WEIGHT,
    ceiling: int = MAX_WEIGHT,
) -> list[int]:
    """Clamp values into bounds and push the remaining points onto the keys.

    The first key in `WEIGHT_KEYS` order takes the whole correction when its
    bounds allow it; any leftover moves on to the next key.
    """
    if not len(values) * floor <= budget <= len(values) * ceiling:
        raise ValueError(f"budget {budget} unreachable for {len(values)} weights in [{floor}, {ceiling}]")

    result = [int(clamp_weight(v, floor, ceiling)) for v in values]
    remainder = budget - sum(result)

    for i in range(len(result)):
        if remainder == 0:
            break
        if remainder > 0:
            step = min(remainder, ceiling - result[i])
        else:
            step = max(remainder, floor - result[i])
        result[i] += step
        remainder -= step

    return result


def normalize_to_budget(values: Sequence[float], budget: int = LEARNED_BUDGET) -> IndicatorWeights:
    """Scale, round and correct raw weights so they sum exactly to `budget`."""
    return IndicatorWeights.from_values(apply_remainder(scale_to_budget(values, budget), budget))


def is_normalized(weights: IndicatorWeights, budget: int = LEARNED_BUDGET) -> bool:
    values = weights.as_list()
    return (
        sum(values) == budget
        and all(float(v).is_integer() for v in values)
        and all(MIN_WEIGHT <= v <= MAX_WEIGHT for v in values)
    )

"""Scanner settings with code defaults and environment overrides.

Usage:
    from core.config import ScannerSettings

    settings = ScannerSettings.from_env()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.errors import ConfigurationError
from core.learning.learner import LEARNING_RATE, LEARNING_TRADE_COUNT, LOOKAHEAD_CANDLES
from core.types import LearningPanelMember, Timeframe

logger = logging.getLogger(__name__)

# One instrument per size/liquidity tier
DEFAULT_LEARNING_PANEL: tuple[LearningPanelMember, ...] = (
    LearningPanelMember(symbol="BTCUSDT", category="Large Cap"),
    LearningPanelMember(symbol="AVAXUSDT", category="Medium Cap"),
    LearningPanelMember(symbol="XVGUSDT", category="Small Cap 1"),
    LearningPanelMember(symbol="ROSEUSDT", category="Small Cap 2"),
    LearningPanelMember(symbol="PHBUSDT", category="Very Small Cap"),
)

_TIMEFRAMES = ("1m", "5m", "15m", "1h", "4h", "1d")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be >= 1, got {value}")
    return value


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def parse_learning_panel(raw: str) -> tuple[LearningPanelMember, ...]:
    """Parse "BTCUSDT:Large Cap,ETHUSDT:Medium Cap" into panel members.

    The category is optional and defaults to the symbol itself.
    """
    members = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        symbol, _, category = item.partition(":")
        symbol = symbol.strip().upper()
        members.append(LearningPanelMember(symbol=symbol, category=category.strip() or symbol))
    return tuple(members)


@dataclass(frozen=True)
class ScannerSettings:
    """Reference configuration of one scan cycle."""

    interval: Timeframe = "1h"
    lookback_period: int = 200
    scan_limit: int = 300
    learning_trade_count: int = LEARNING_TRADE_COUNT
    lookahead_candles: int = LOOKAHEAD_CANDLES
    learning_rate: float = LEARNING_RATE
    concurrency_limit: int = 10
    order_book_depth: int = 10
    quote_asset: str = "USDT"
    min_quote_volume: float = 1000.0
    min_confidence: float = 50.0
    min_volatility_ratio: float = 0.5
    learning_panel: tuple[LearningPanelMember, ...] = field(default=DEFAULT_LEARNING_PANEL)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ScannerSettings":
        """Build settings from SCANNER_* environment variables.

        Raises:
            ConfigurationError: If a variable is set to an invalid value
        """
        env = os.environ if env is None else env

        interval = env.get("SCANNER_INTERVAL", "").strip() or cls.interval
        if interval not in _TIMEFRAMES:
            raise ConfigurationError(f"SCANNER_INTERVAL must be one of {_TIMEFRAMES}, got {interval!r}")

        panel_raw = env.get("SCANNER_LEARNING_PANEL", "").strip()
        panel = parse_learning_panel(panel_raw) if panel_raw else DEFAULT_LEARNING_PANEL

        settings = cls(
            interval=interval,  # type: ignore[arg-type]
            lookback_period=_env_int(env, "SCANNER_LOOKBACK", cls.lookback_period),
            scan_limit=_env_int(env, "SCANNER_SCAN_LIMIT", cls.scan_limit),
            learning_trade_count=_env_int(env, "SCANNER_LEARNING_TRADES", cls.learning_trade_count),
            lookahead_candles=_env_int(env, "SCANNER_LOOKAHEAD", cls.lookahead_candles),
            learning_rate=_env_float(env, "SCANNER_LEARNING_RATE", cls.learning_rate),
            concurrency_limit=_env_int(env, "SCANNER_CONCURRENCY", cls.concurrency_limit),
            quote_asset=(env.get("SCANNER_QUOTE_ASSET", "").strip() or cls.quote_asset).upper(),
            min_quote_volume=_env_float(env, "SCANNER_MIN_QUOTE_VOLUME", cls.min_quote_volume),
            learning_panel=panel,
        )
        logger.debug(f"Scanner settings: interval={settings.interval} limit={settings.scan_limit}")
        return settings

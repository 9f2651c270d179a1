"""Tests for scanner settings."""

import pytest

from core.config import DEFAULT_LEARNING_PANEL, ScannerSettings, parse_learning_panel
from core.errors import ConfigurationError
from core.types import LearningPanelMember


def test_defaults() -> None:
    settings = ScannerSettings()

    assert settings.interval == "1h"
    assert settings.lookback_period == 200
    assert settings.scan_limit == 300
    assert settings.learning_trade_count == 50
    assert settings.lookahead_candles == 4
    assert settings.learning_rate == 0.5
    assert settings.concurrency_limit == 10
    assert settings.min_confidence == 50
    assert settings.min_volatility_ratio == 0.5
    assert [m.symbol for m in settings.learning_panel] == ["BTCUSDT", "AVAXUSDT", "XVGUSDT", "ROSEUSDT", "PHBUSDT"]


def test_from_env_empty_uses_defaults() -> None:
    assert ScannerSettings.from_env({}) == ScannerSettings()


def test_from_env_overrides() -> None:
    settings = ScannerSettings.from_env(
        {
            "SCANNER_INTERVAL": "4h",
            "SCANNER_SCAN_LIMIT": "50",
            "SCANNER_LEARNING_RATE": "0.25",
            "SCANNER_CONCURRENCY": "4",
            "SCANNER_QUOTE_ASSET": "fdusd",
            "SCANNER_LEARNING_PANEL": "ethusdt:Large Cap, SOLUSDT",
        }
    )

    assert settings.interval == "4h"
    assert settings.scan_limit == 50
    assert settings.learning_rate == 0.25
    assert settings.concurrency_limit == 4
    assert settings.quote_asset == "FDUSD"
    assert settings.learning_panel == (
        LearningPanelMember(symbol="ETHUSDT", category="Large Cap"),
        LearningPanelMember(symbol="SOLUSDT", category="SOLUSDT"),
    )


@pytest.mark.parametrize(
    "env",
    [
        {"SCANNER_INTERVAL": "2h"},
        {"SCANNER_SCAN_LIMIT": "many"},
        {"SCANNER_CONCURRENCY": "0"},
        {"SCANNER_LEARNING_RATE": "fast"},
    ],
)
def test_from_env_rejects_invalid_values(env) -> None:
    with pytest.raises(ConfigurationError):
        ScannerSettings.from_env(env)


def test_parse_learning_panel_skips_blanks() -> None:
    assert parse_learning_panel(" , BTCUSDT:Large Cap ,,") == (LearningPanelMember(symbol="BTCUSDT", category="Large Cap"),)


def test_default_panel_categories() -> None:
    assert DEFAULT_LEARNING_PANEL[0].category == "Large Cap"
    assert DEFAULT_LEARNING_PANEL[-1].category == "Very Small Cap"

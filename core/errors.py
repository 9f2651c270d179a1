"""Exception hierarchy for the scanner."""

from __future__ import annotations


class ScannerError(Exception):
    """Base class for scanner errors."""


class ConfigurationError(ScannerError):
    """Required configuration (e.g. DATABASE_URL) is missing or invalid."""


class MarketDataError(ScannerError):
    """Market data could not be fetched or parsed."""

    def __init__(self, message: str, *, symbol: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.symbol = symbol
        self.status_code = status_code


class InsufficientDataError(ScannerError):
    """Not enough candles to compute indicators."""

    def __init__(self, symbol: str, required: int, got: int) -> None:
        super().__init__(f"need at least {required} candles for {symbol}, got {got}")
        self.symbol = symbol
        self.required = required
        self.got = got

from __future__ import annotations

from typing import Protocol, Sequence

from core.types import Candle, OrderBookSnapshot, Timeframe


class MarketDataSource(Protocol):
    """Fetches the instrument universe, candles and order books.

    Every method raises `core.errors.MarketDataError` on transport or payload
    failures.
    """

    async def fetch_top_symbols(self, limit: int) -> Sequence[str]:
        """Most liquid symbols, sorted by quote volume (descending)."""

    async def fetch_candles(self, symbol: str, *, timeframe: Timeframe, limit: int) -> Sequence[Candle]:
        """The latest `limit` candles, oldest first."""

    async def fetch_order_book(self, symbol: str, *, limit: int = 10) -> OrderBookSnapshot:
        """Top-of-book depth with `limit` levels per side."""

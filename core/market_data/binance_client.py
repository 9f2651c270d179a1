"""Async Binance public REST client for the scanner.

Wraps three unauthenticated endpoints:
- /api/v3/ticker/24hr: instrument universe ranked by quote volume
- /api/v3/klines: OHLCV candles
- /api/v3/depth: order book levels

No retries: a failed call raises MarketDataError and the caller decides
whether to drop the instrument or abort the cycle.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

import httpx

from core.errors import MarketDataError
from core.types import Candle, OrderBookSnapshot, Timeframe

logger = logging.getLogger(__name__)

BINANCE_API_BASE = "https://api.binance.com"

_TIMEFRAME_DELTAS: dict[str, timedelta] = {
    "1m": timedelta(minutes=1),
    "5m": timedelta(minutes=5),
    "15m": timedelta(minutes=15),
    "1h": timedelta(hours=1),
    "4h": timedelta(hours=4),
    "1d": timedelta(days=1),
}

# Leveraged tokens end their base asset with these (BTCUPUSDT, ETHDOWNUSDT)
LEVERAGED_TOKEN_SUFFIXES = ("UP", "DOWN")


def filter_top_symbols(
    tickers: Sequence[dict[str, Any]],
    *,
    limit: int,
    quote_asset: str = "USDT",
    min_quote_volume: float = 1000.0,
) -> list[str]:
    """Select the most liquid spot symbols from 24h ticker rows.

    Keeps symbols quoted in `quote_asset`, drops leveraged tokens (base asset ending in
    UP or DOWN) and anything at or below `min_quote_volume`, then
    sorts by quote volume descending.
    """
    eligible: list[tuple[float, str]] = []

    for ticker in tickers:
        symbol = str(ticker.get("symbol", ""))
        if not symbol.endswith(quote_asset):
            continue
        if symbol[: -len(quote_asset)].endswith(LEVERAGED_TOKEN_SUFFIXES):
            continue
        try:
            quote_volume = float(ticker.get("quoteVolume", 0))
        except (TypeError, ValueError):
            continue
        if quote_volume > min_quote_volume:
            eligible.append((quote_volume, symbol))

    eligible.sort(key=lambda item: item[0], reverse=True)
    return [symbol for _, symbol in eligible[:limit]]


def parse_klines(symbol: str, timeframe: Timeframe, rows: Sequence[Sequence[Any]]) -> list[Candle]:
    """Convert kline rows into candles.

    Row format: [open_time, open, high, low, close, volume, close_time, ...]

    Raises:
        MarketDataError: If a row is malformed
    """
    delta = _TIMEFRAME_DELTAS[timeframe]
    candles = []

    try:
        for row in rows:
            open_time = datetime.fromtimestamp(int(row[0]) / 1000, tz=timezone.utc)
            candles.append(
                Candle(
                    symbol=symbol,
                    timeframe=timeframe,
                    open_time=open_time,
                    close_time=open_time + delta,
                    open=Decimal(str(row[1])),
                    high=Decimal(str(row[2])),
                    low=Decimal(str(row[3])),
                    close=Decimal(str(row[4])),
                    volume=Decimal(str(row[5])),
                )
            )
    except (TypeError, ValueError, IndexError, InvalidOperation) as exc:
        raise MarketDataError(f"Malformed kline row for {symbol}: {exc}", symbol=symbol) from exc

    return candles


class BinanceMarketData:
    """Binance market data source backed by httpx.AsyncClient."""

    def __init__(
        self,
        *,
        base_url: str = BINANCE_API_BASE,
        timeout: float = 20.0,
        quote_asset: str = "USDT",
        min_quote_volume: float = 1000.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.quote_asset = quote_asset
        self.min_quote_volume = min_quote_volume
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BinanceMarketData":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None, *, symbol: str | None = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise MarketDataError(f"Network error on {path}: {exc}", symbol=symbol) from exc

        if response.status_code != 200:
            raise MarketDataError(
                f"HTTP {response.status_code} on {path}",
                symbol=symbol,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise MarketDataError(f"Invalid JSON on {path}: {exc}", symbol=symbol) from exc

    async def fetch_top_symbols(self, limit: int) -> list[str]:
        tickers = await self._get_json("/api/v3/ticker/24hr")
        if not isinstance(tickers, list):
            raise MarketDataError(f"Unexpected ticker response type: {type(tickers).__name__}")

        symbols = filter_top_symbols(
            tickers,
            limit=limit,
            quote_asset=self.quote_asset,
            min_quote_volume=self.min_quote_volume,
        )
        logger.info(f"Fetched {len(symbols)} {self.quote_asset} symbols from Binance")
        return symbols

    async def fetch_candles(self, symbol: str, *, timeframe: Timeframe, limit: int) -> list[Candle]:
        if timeframe not in _TIMEFRAME_DELTAS:
            raise ValueError(f"Unsupported timeframe for Binance: {timeframe}")

        rows = await self._get_json(
            "/api/v3/klines",
            {"symbol": symbol, "interval": timeframe, "limit": limit},
            symbol=symbol,
        )
        if not isinstance(rows, list):
            raise MarketDataError(f"Unexpected klines response type for {symbol}", symbol=symbol)
        return parse_klines(symbol, timeframe, rows)

    async def fetch_order_book(self, symbol: str, *, limit: int = 10) -> OrderBookSnapshot:
        book = await self._get_json("/api/v3/depth", {"symbol": symbol, "limit": limit}, symbol=symbol)
        if not isinstance(book, dict):
            raise MarketDataError(f"Unexpected depth response type for {symbol}", symbol=symbol)
        return OrderBookSnapshot(
            symbol=symbol,
            bids=book.get("bids") or (),
            asks=book.get("asks") or (),
        )

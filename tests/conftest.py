"""Shared test fixtures for pytest.

Provides common test data, fakes, and utilities used across multiple test files.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional, Sequence

import pytest

from core.errors import MarketDataError
from core.signals.weights import ModelState
from core.types import Candle, OrderBookSnapshot

BASE_TIME = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def _dec(value: float) -> Decimal:
    return Decimal(str(round(value, 8)))


def build_candle(
    close: float,
    *,
    open: Optional[float] = None,
    high: Optional[float] = None,
    low: Optional[float] = None,
    volume: float = 1000.0,
    idx: int = 0,
    symbol: str = "BTCUSDT",
) -> Candle:
    """Build a 1h candle; open/high/low default to the close."""
    open_ = close if open is None else open
    return Candle(
        symbol=symbol,
        timeframe="1h",
        open_time=BASE_TIME + timedelta(hours=idx),
        close_time=BASE_TIME + timedelta(hours=idx + 1),
        open=_dec(open_),
        high=_dec(max(open_, close) if high is None else high),
        low=_dec(min(open_, close) if low is None else low),
        close=_dec(close),
        volume=_dec(volume),
    )


def build_series(closes: Sequence[float], *, volume: float = 1000.0, symbol: str = "BTCUSDT") -> list[Candle]:
    """Candles whose open is the previous close and whose range is the body."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        candles.append(build_candle(close, open=prev, volume=volume, idx=i, symbol=symbol))
        prev = close
    return candles


@pytest.fixture
def make_candle() -> Callable[..., Candle]:
    return build_candle


@pytest.fixture
def make_series() -> Callable[..., list[Candle]]:
    return build_series


@pytest.fixture
def sample_candles() -> list[Candle]:
    """Five consecutive 1h BTCUSDT candles."""
    return [
        build_candle(40200 + i * 100, open=40000 + i * 100, high=40500 + i * 100, low=39500 + i * 100, idx=i)
        for i in range(5)
    ]


@pytest.fixture
def uptrend_candles() -> list[Candle]:
    """210 candles with strictly increasing closes, ending in a strong breakout.

    Closes grow 1% per candle, the last closed candle (index 208) jumps 10%
    and closes at its high. Candle 195 carries a long upper wick so the
    stochastic window is not pinned at its top.
    """
    closes = [100 * 1.01**i for i in range(208)]
    closes.append(closes[-1] * 1.10)
    closes.append(closes[-1] * 1.01)

    candles = []
    prev = closes[0] * 0.99
    for i, close in enumerate(closes):
        high = close * 3 if i == 195 else close
        candles.append(build_candle(close, open=prev, high=high, low=prev, idx=i))
        prev = close
    return candles


@pytest.fixture
def bid_heavy_book() -> OrderBookSnapshot:
    return OrderBookSnapshot(
        symbol="BTCUSDT",
        bids=[["100.0", "50.0"]] * 10,
        asks=[["100.1", "1.0"]] * 10,
    )


class FakeMarketData:
    """In-memory MarketDataSource.

    Symbols listed in `failing` raise MarketDataError on every call.
    """

    def __init__(
        self,
        *,
        symbols: Sequence[str] = (),
        candles: Optional[dict[str, list[Candle]]] = None,
        books: Optional[dict[str, OrderBookSnapshot]] = None,
        failing: Sequence[str] = (),
        universe_error: Optional[Exception] = None,
    ):
        self.symbols = list(symbols)
        self.candles = candles or {}
        self.books = books or {}
        self.failing = set(failing)
        self.universe_error = universe_error
        self.candle_calls: list[str] = []
        self.closed = False

    async def fetch_top_symbols(self, limit: int) -> list[str]:
        if self.universe_error is not None:
            raise self.universe_error
        return self.symbols[:limit]

    async def fetch_candles(self, symbol: str, *, timeframe: str, limit: int) -> list[Candle]:
        self.candle_calls.append(symbol)
        if symbol in self.failing:
            raise MarketDataError("boom", symbol=symbol, status_code=500)
        return self.candles.get(symbol, [])[-limit:]

    async def fetch_order_book(self, symbol: str, *, limit: int = 10) -> OrderBookSnapshot:
        if symbol in self.failing:
            raise MarketDataError("boom", symbol=symbol)
        return self.books.get(symbol, OrderBookSnapshot(symbol=symbol))

    async def close(self) -> None:
        self.closed = True


class FakeWeightStore:
    def __init__(self, state: Optional[ModelState] = None, *, fail: bool = False):
        self.state = state
        self.fail = fail
        self.saved: list[ModelState] = []

    async def load(self) -> Optional[ModelState]:
        if self.fail:
            raise RuntimeError("database down")
        return self.state

    async def save(self, state: ModelState) -> None:
        if self.fail:
            raise RuntimeError("database down")
        self.saved.append(state)
        self.state = state


class FakeNotifier:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.messages: list[str] = []

    async def send_message(self, text: str) -> bool:
        if self.fail:
            raise RuntimeError("telegram down")
        self.messages.append(text)
        return True


@pytest.fixture
def fake_store() -> FakeWeightStore:
    return FakeWeightStore()


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fake_market() -> type[FakeMarketData]:
    """The FakeMarketData class; call it with the scenario's data."""
    return FakeMarketData


@pytest.fixture
def failing_store() -> FakeWeightStore:
    return FakeWeightStore(fail=True)


@pytest.fixture
def failing_notifier() -> FakeNotifier:
    return FakeNotifier(fail=True)

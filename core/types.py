from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal, Mapping, Optional, Sequence

Timeframe = Literal["1m", "5m", "15m", "1h", "4h", "1d"]
Direction = Literal["UP", "DOWN"]
Outcome = Literal["UP", "DOWN", "FLAT"]
IndicatorCode = Literal["OBV", "STOCH", "OI_PROXY", "MACD", "OBI"]

# Order book side: [[price, qty], ...] as returned by the exchange (strings or numbers)
BookSide = Sequence[Sequence[object]]


@dataclass(frozen=True)
class Candle:
    symbol: str
    timeframe: Timeframe
    open_time: datetime
    close_time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal


@dataclass(frozen=True)
class OrderBookSnapshot:
    symbol: str
    bids: BookSide = ()
    asks: BookSide = ()


@dataclass(frozen=True)
class SignalReadings:
    """Normalized indicator readings at one candle."""

    obv_change_pct: float
    stoch_k: float
    macd_hist: float
    volume_pressure: float
    obi_pct: float = 50.0


@dataclass(frozen=True)
class PredictionResult:
    direction: Direction
    confidence: float  # 0-100
    score: float
    components: Mapping[IndicatorCode, float]


@dataclass(frozen=True)
class ScanResult:
    symbol: str
    score: float
    confidence: float
    direction: Direction
    recent_change_pct: float
    atr: float
    obi_pct: float


@dataclass(frozen=True)
class LearningPanelMember:
    symbol: str
    category: str


@dataclass(frozen=True)
class CycleSummary:
    started_at: datetime
    finished_at: Optional[datetime] = None
    symbols_scanned: int = 0
    learned_from: int = 0
    accuracy: Optional[float] = None
    results: Sequence[ScanResult] = field(default_factory=tuple)
    aborted: bool = False
    reason: Optional[str] = None

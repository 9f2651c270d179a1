"""Background scan runner.

Triggers return immediately; the cycle runs in a background task. At most one
cycle runs at a time, a second trigger while one is in flight is refused.

Usage (from API, fire-and-forget):
    runner = ScanRunner(state, market_factory=BinanceMarketData, store=store, notifier=telegram)
    started = await runner.trigger()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from core.config import ScannerSettings
from core.market_data.interfaces import MarketDataSource
from core.persistence.interfaces import Notifier, WeightStore
from core.scanner.cycle import run_scan_cycle
from core.scanner.state import ScannerState
from core.types import CycleSummary

logger = logging.getLogger(__name__)


class RunnerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RunnerStatus:
    """Snapshot of the runner for the status endpoint."""

    state: RunnerState = RunnerState.IDLE
    started_at: datetime | None = None
    finished_at: datetime | None = None
    last_summary: CycleSummary | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        summary = self.last_summary
        return {
            "state": self.state.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "error": self.error,
            "last_cycle": None
            if summary is None
            else {
                "symbols_scanned": summary.symbols_scanned,
                "learned_from": summary.learned_from,
                "accuracy": summary.accuracy,
                "results": len(summary.results),
                "aborted": summary.aborted,
                "reason": summary.reason,
            },
        }


class ScanRunner:
    """Runs scan cycles in the background, one at a time."""

    def __init__(
        self,
        state: ScannerState,
        *,
        market_factory: Callable[[], Any],
        store: WeightStore,
        notifier: Optional[Notifier] = None,
        settings: Optional[ScannerSettings] = None,
    ):
        self.state = state
        self.store = store
        self.notifier = notifier
        self.settings = settings or ScannerSettings()
        self._market_factory = market_factory
        self._status = RunnerStatus()
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()

    @property
    def status(self) -> RunnerStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status.state == RunnerState.RUNNING

    async def trigger(self) -> bool:
        """Start a cycle in the background.

        Returns:
            True if a cycle was started, False if one is already running
        """
        async with self._lock:
            if self.is_running:
                logger.info("Scan already running, ignoring trigger")
                return False

            self._status = RunnerStatus(
                state=RunnerState.RUNNING,
                started_at=datetime.now(timezone.utc),
                last_summary=self._status.last_summary,
            )
            self._task = asyncio.create_task(self._run())
            return True

    async def run_once(self) -> CycleSummary:
        """Run one cycle in the foreground with a fresh market client."""
        market = self._market_factory()
        try:
            return await run_scan_cycle(
                self.state,
                market=market,
                store=self.store,
                notifier=self.notifier,
                settings=self.settings,
            )
        finally:
            await _close(market)

    async def wait(self) -> None:
        """Wait for the background cycle, if any, to finish."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _run(self) -> None:
        try:
            summary = await self.run_once()
            self._status.last_summary = summary
            self._status.state = RunnerState.FAILED if summary.aborted else RunnerState.COMPLETED
            self._status.error = summary.reason
        except asyncio.CancelledError:
            logger.info("Scan cancelled")
            self._status.state = RunnerState.FAILED
            raise
        except Exception as e:
            logger.exception(f"Scan crashed: {e}")
            self._status.state = RunnerState.FAILED
            self._status.error = str(e)
        finally:
            self._status.finished_at = datetime.now(timezone.utc)


async def _close(market: MarketDataSource) -> None:
    close = getattr(market, "close", None)
    if close is not None:
        await close()

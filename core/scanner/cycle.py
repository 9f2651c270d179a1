"""One adaptive scan cycle: learn, aggregate, persist, sweep, report.

Usage:
    from core.scanner.cycle import run_scan_cycle

    summary = await run_scan_cycle(state, market=market, store=store, notifier=telegram)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from core.config import ScannerSettings
from core.errors import InsufficientDataError, MarketDataError
from core.learning.aggregator import aggregate_outcomes
from core.learning.learner import LearningOutcome, learn_weights
from core.market_data.interfaces import MarketDataSource
from core.persistence.interfaces import Notifier, WeightStore
from core.scanner.evaluate import evaluate_symbol
from core.scanner.pool import run_bounded
from core.scanner.report import format_report
from core.scanner.state import ScannerState
from core.signals.weights import DEFAULT_ACCURACY, IndicatorWeights, ModelState, format_accuracy
from core.types import CycleSummary, LearningPanelMember, ScanResult

logger = logging.getLogger(__name__)


def select_learning_panel(
    universe: Sequence[str],
    panel: Sequence[LearningPanelMember],
) -> list[LearningPanelMember]:
    """Panel members present in the universe; the top symbol when none are."""
    available = set(universe)
    selected = []
    for member in panel:
        if member.symbol in available:
            selected.append(member)
        else:
            logger.warning(f"Learning symbol {member.symbol} not in the top {len(universe)} list, skipping")

    if not selected and universe:
        selected.append(LearningPanelMember(symbol=universe[0], category="Primary Fallback"))
    return selected


async def learn_on_panel(
    panel: Sequence[LearningPanelMember],
    snapshot: IndicatorWeights,
    market: MarketDataSource,
    settings: ScannerSettings,
) -> list[LearningOutcome]:
    """Run the learner on every panel member, sequentially, from one snapshot."""
    outcomes = []
    for member in panel:
        try:
            candles = await market.fetch_candles(
                member.symbol, timeframe=settings.interval, limit=settings.lookback_period
            )
        except MarketDataError as exc:
            logger.error(f"Failed learning cycle for {member.symbol}: {exc}")
            continue

        try:
            outcome = learn_weights(
                candles,
                snapshot,
                trade_count=settings.learning_trade_count,
                lookahead=settings.lookahead_candles,
                learning_rate=settings.learning_rate,
            )
        except Exception:
            logger.exception(f"Learning failed for {member.symbol}, leaving it out of the panel")
            continue

        if outcome.accuracy is None:
            logger.warning(f"Not enough data for {member.symbol} ({len(candles)} candles), skipping learning")
            continue

        logger.info(f"Learned on {member.category} ({member.symbol}): accuracy {format_accuracy(outcome.accuracy)}%")
        outcomes.append(outcome)
    return outcomes


async def sweep_universe(
    symbols: Sequence[str],
    weights: IndicatorWeights,
    market: MarketDataSource,
    settings: ScannerSettings,
) -> list[ScanResult]:
    async def _evaluate(symbol: str) -> Optional[ScanResult]:
        try:
            return await evaluate_symbol(symbol, weights, market, settings)
        except InsufficientDataError as exc:
            logger.debug(f"Skipping {symbol}: {exc}")
        except MarketDataError as exc:
            logger.warning(f"Skipping {symbol} due to API/network error: {exc}")
        return None

    factories = [lambda s=symbol: _evaluate(s) for symbol in symbols]
    return await run_bounded(factories, limit=settings.concurrency_limit)


async def run_scan_cycle(
    state: ScannerState,
    *,
    market: MarketDataSource,
    store: WeightStore,
    notifier: Optional[Notifier] = None,
    settings: Optional[ScannerSettings] = None,
    now: Optional[datetime] = None,
) -> CycleSummary:
    """Run one full cycle against the given collaborators.

    Only a failure to list the universe aborts the cycle. Every other
    collaborator failure is logged and the affected step is skipped.
    """
    settings = settings or ScannerSettings()
    started_at = now or datetime.now(timezone.utc)
    snapshot = state.model

    logger.info("Starting adaptive scan")

    try:
        symbols = list(await market.fetch_top_symbols(settings.scan_limit))
    except MarketDataError as exc:
        logger.error(f"Could not fetch symbol list, aborting scan: {exc}")
        return CycleSummary(started_at=started_at, aborted=True, reason=str(exc))

    logger.info(f"Scanning {len(symbols)} symbols on the {settings.interval} chart")

    panel = select_learning_panel(symbols, settings.learning_panel)
    outcomes = await learn_on_panel(panel, snapshot.weights, market, settings)
    aggregate = aggregate_outcomes(outcomes, snapshot.weights)

    if aggregate.changed:
        updated = ModelState(
            weights=aggregate.weights,
            accuracy=format_accuracy(aggregate.accuracy),
            updated_at=datetime.now(timezone.utc),
        )
        state.replace(updated)
        try:
            await store.save(updated)
        except Exception as exc:
            logger.error(f"Failed to save weights: {exc}")
        logger.info(
            f"Weights tuned across {aggregate.contributors} symbols, avg accuracy {updated.accuracy}%: "
            f"{updated.weights.as_dict()}"
        )
    else:
        logger.info("Not enough data for adaptive learning; keeping previous weights")

    model = state.model
    results = await sweep_universe(symbols, model.weights, market, settings)
    logger.info(f"Scan finished: {len(results)} symbols passed the confidence and volatility filters")

    if notifier is not None and (results or model.accuracy != DEFAULT_ACCURACY):
        report = format_report(
            results,
            model.accuracy,
            model.weights,
            now=started_at,
            interval=settings.interval,
            panel_size=aggregate.contributors or len(panel),
        )
        try:
            await notifier.send_message(report)
        except Exception as exc:
            logger.error(f"Failed to send scan report: {exc}")
    elif not results:
        logger.info("No symbols met the minimum confidence and volatility criteria")

    return CycleSummary(
        started_at=started_at,
        finished_at=datetime.now(timezone.utc),
        symbols_scanned=len(symbols),
        learned_from=aggregate.contributors,
        accuracy=aggregate.accuracy,
        results=tuple(results),
    )

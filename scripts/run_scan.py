#!/usr/bin/env python3
"""Run one adaptive scan cycle in the foreground.

Designed to be run via systemd timer (hourly) or manually.

Usage:
    python -m scripts.run_scan
    python -m scripts.run_scan --no-report   # log results, skip Telegram

Environment:
    DATABASE_URL - Required. SQLAlchemy connection string for the weights store.
    SCANNER_* - Optional scanner overrides (see core/config.py).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ScannerSettings  # noqa: E402
from core.errors import ConfigurationError  # noqa: E402
from core.market_data.binance_client import BinanceMarketData  # noqa: E402
from core.notifications.telegram import TelegramClient  # noqa: E402
from core.scanner.cycle import run_scan_cycle  # noqa: E402
from core.scanner.state import ScannerState  # noqa: E402
from core.storage.postgres.config import PostgresConfig  # noqa: E402
from core.storage.postgres.stores import PostgresWeightStore  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("adaptive-scan")


async def main() -> int:
    parser = argparse.ArgumentParser(description="Run one adaptive scan cycle")
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Do not send the Telegram report",
    )
    args = parser.parse_args()

    try:
        settings = ScannerSettings.from_env()
        store = PostgresWeightStore(config=PostgresConfig.from_env())
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    state = ScannerState()
    await state.load(store)

    notifier = None if args.no_report else TelegramClient()
    async with BinanceMarketData(
        quote_asset=settings.quote_asset,
        min_quote_volume=settings.min_quote_volume,
    ) as market:
        summary = await run_scan_cycle(state, market=market, store=store, notifier=notifier, settings=settings)
    store.dispose()

    if summary.aborted:
        logger.error(f"❌ Scan aborted: {summary.reason}")
        return 1

    for result in sorted(summary.results, key=lambda r: r.score, reverse=True):
        logger.info(f"  {result.symbol}: {result.direction} score={result.score:g} conf={result.confidence:g}%")
    logger.info(f"🏁 Scanned {summary.symbols_scanned} symbols, {len(summary.results)} candidates")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

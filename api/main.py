"""FastAPI application for the adaptive scanner.

This module provides a minimal HTTP API service for:
- GET /              - Liveness text
- GET|POST /scan     - Start a scan cycle in the background
- GET /scan/status   - Background runner status
- GET /weights       - Current learned weights and accuracy

Requirements:
- DATABASE_URL must be set in environment (weights persistence)
- TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID for scan reports (optional)
- No authentication (local network only)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from core.config import ScannerSettings
from core.errors import ConfigurationError
from core.market_data.binance_client import BinanceMarketData
from core.notifications.telegram import TelegramClient
from core.scanner.runner import ScanRunner
from core.scanner.state import ScannerState
from core.signals.weights import OBI_WEIGHT
from core.storage.postgres.config import PostgresConfig
from core.storage.postgres.stores import PostgresWeightStore

logger = logging.getLogger(__name__)

# Process-scoped model state, shared by every cycle
_state = ScannerState()

# Global instances (initialized lazily)
_settings: ScannerSettings | None = None
_store: PostgresWeightStore | None = None
_runner: ScanRunner | None = None


class ScanTriggerResponse(BaseModel):
    status: str
    message: str


class WeightsResponse(BaseModel):
    weights: dict[str, float]
    static_weights: dict[str, float]
    accuracy: str
    last_updated: Optional[str] = None


def _get_settings() -> ScannerSettings:
    global _settings
    if _settings is None:
        _settings = ScannerSettings.from_env()
    return _settings


def _get_store() -> PostgresWeightStore:
    """Get or initialize the weight store.

    Raises:
        ConfigurationError: If DATABASE_URL is missing or invalid
    """
    global _store
    if _store is None:
        _store = PostgresWeightStore(config=PostgresConfig.from_env())
    return _store


def _get_runner() -> ScanRunner:
    global _runner
    if _runner is None:
        settings = _get_settings()
        _runner = ScanRunner(
            _state,
            market_factory=lambda: BinanceMarketData(
                quote_asset=settings.quote_asset,
                min_quote_volume=settings.min_quote_volume,
            ),
            store=_get_store(),
            notifier=TelegramClient(),
            settings=settings,
        )
    return _runner


async def _load_state() -> None:
    try:
        store = _get_store()
    except ConfigurationError as exc:
        logger.warning(f"Weights persistence not configured, using defaults: {exc}")
        return
    await _state.load(store)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await _load_state()
    yield
    if _store is not None:
        _store.dispose()


app = FastAPI(
    title="Adaptive Scanner API",
    description="Adaptive multi-indicator scanner with weight learning and Telegram reports",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Adaptive scanner is running. Trigger a scan with /scan."


@app.api_route("/scan", methods=["GET", "POST"], response_model=ScanTriggerResponse)
async def trigger_scan() -> ScanTriggerResponse:
    """Start a scan cycle in the background.

    Returns immediately; the cycle's outcome is visible in the logs and via
    /scan/status.

    Raises:
        HTTPException: 503 if persistence is unavailable, 409 if a scan is running
    """
    try:
        store = _get_store()
        await store.check_available()
        runner = _get_runner()
    except ConfigurationError as exc:
        logger.error(f"Scan not started, configuration error: {exc}")
        raise HTTPException(status_code=503, detail=f"Service unavailable: {exc}") from exc
    except Exception as exc:
        logger.error(f"Scan not started, weights store unreachable: {exc}")
        raise HTTPException(status_code=503, detail="Service unavailable: weights store unreachable") from exc

    if not await runner.trigger():
        raise HTTPException(status_code=409, detail="A scan is already running")

    return ScanTriggerResponse(status="started", message="Adaptive scan initiated in the background")


@app.get("/scan/status")
async def scan_status() -> dict[str, Any]:
    if _runner is None:
        return {"state": "idle", "started_at": None, "finished_at": None, "error": None, "last_cycle": None}
    return _runner.status.to_dict()


@app.get("/weights", response_model=WeightsResponse)
async def get_weights() -> WeightsResponse:
    model = _state.model
    return WeightsResponse(
        weights=model.weights.as_dict(),
        static_weights={"OBI": OBI_WEIGHT},
        accuracy=model.accuracy,
        last_updated=model.updated_at.isoformat() if model.updated_at else None,
    )


@app.exception_handler(Exception)
async def global_exception_handler(_request, exc):
    """Global exception handler to ensure consistent error responses."""
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
        },
    )

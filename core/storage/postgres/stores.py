from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from core.signals.weights import IndicatorWeights, ModelState, is_normalized
from core.storage.postgres.config import PostgresConfig

logger = logging.getLogger(__name__)


class PostgresWeightStore:
    """SQLAlchemy-backed store for the learned model state.

    One row per weights key. Any SQLAlchemy URL works; PostgreSQL in
    production, SQLite in tests.
    """

    def __init__(self, *, config: PostgresConfig) -> None:
        self._config = config
        self._engine: Engine | None = None
        self._schema_ready = False

    def _get_engine(self) -> Engine:
        if self._engine is None:
            # Do not log the URL (it may contain secrets).
            self._engine = create_engine(self._config.database_url, echo=False, pool_pre_ping=True)
        return self._engine

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._schema_ready = False

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._get_engine().begin() as conn:
            conn.execute(
                text(
                    """
                    CREATE TABLE IF NOT EXISTS adaptive_weights (
                        key TEXT PRIMARY KEY,
                        weights_json TEXT NOT NULL,
                        accuracy TEXT NOT NULL,
                        last_updated TEXT NOT NULL
                    )
                    """
                )
            )
        self._schema_ready = True

    def ping(self) -> None:
        """Raise if the database cannot be reached."""
        with self._get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))

    def load_state(self) -> Optional[ModelState]:
        self.ensure_schema()

        with self._get_engine().begin() as conn:
            row = conn.execute(
                text(
                    """
                    SELECT weights_json, accuracy, last_updated
                    FROM adaptive_weights
                    WHERE key = :key
                    """
                ),
                {"key": self._config.weights_key},
            ).fetchone()

        if row is None:
            return None
        return _row_to_state(row[0], row[1], row[2])

    def save_state(self, state: ModelState) -> None:
        self.ensure_schema()

        params = {
            "key": self._config.weights_key,
            "weights_json": json.dumps(state.weights.as_dict()),
            "accuracy": state.accuracy,
            "last_updated": _as_utc(state.updated_at).isoformat(),
        }
        # Delete + insert keeps the upsert portable across PostgreSQL and SQLite
        with self._get_engine().begin() as conn:
            conn.execute(text("DELETE FROM adaptive_weights WHERE key = :key"), {"key": params["key"]})
            conn.execute(
                text(
                    """
                    INSERT INTO adaptive_weights (key, weights_json, accuracy, last_updated)
                    VALUES (:key, :weights_json, :accuracy, :last_updated)
                    """
                ),
                params,
            )

    async def load(self) -> Optional[ModelState]:
        return await asyncio.to_thread(self.load_state)

    async def save(self, state: ModelState) -> None:
        await asyncio.to_thread(self.save_state, state)
        logger.info(f"Saved weights {state.weights.as_dict()} (accuracy {state.accuracy}%)")

    async def check_available(self) -> None:
        await asyncio.to_thread(self.ping)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_state(weights_json: Any, accuracy: Any, last_updated: Any) -> Optional[ModelState]:
    try:
        weights = IndicatorWeights.from_mapping(json.loads(weights_json))
    except (TypeError, ValueError) as exc:
        logger.warning(f"Stored weights are invalid, ignoring them: {exc}")
        return None

    if not is_normalized(weights):
        logger.warning(f"Stored weights {weights.as_dict()} are outside the learned budget or bounds, ignoring them")
        return None

    try:
        updated_at = _as_utc(datetime.fromisoformat(str(last_updated)))
    except ValueError:
        updated_at = datetime.now(timezone.utc)

    return ModelState(weights=weights, accuracy=str(accuracy), updated_at=updated_at)

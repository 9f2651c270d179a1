"""Tests for the SQLAlchemy weight store (SQLite file database)."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from core.errors import ConfigurationError
from core.scanner.state import ScannerState
from core.signals.weights import DEFAULT_WEIGHTS, IndicatorWeights, ModelState
from core.storage.postgres.config import DEFAULT_WEIGHTS_KEY, PostgresConfig
from core.storage.postgres.stores import PostgresWeightStore


@pytest.fixture
def store(tmp_path):
    store = PostgresWeightStore(config=PostgresConfig(database_url=f"sqlite:///{tmp_path / 'weights.db'}"))
    yield store
    store.dispose()


def test_config_from_env() -> None:
    config = PostgresConfig.from_env({"DATABASE_URL": "postgresql://u:p@localhost/db"})

    assert config.database_url == "postgresql://u:p@localhost/db"
    assert config.weights_key == DEFAULT_WEIGHTS_KEY


def test_config_custom_weights_key() -> None:
    config = PostgresConfig.from_env({"DATABASE_URL": "sqlite:///x.db", "SCANNER_WEIGHTS_KEY": "staging/weights"})

    assert config.weights_key == "staging/weights"


@pytest.mark.parametrize("env", [{}, {"DATABASE_URL": "  "}, {"DATABASE_URL": "localhost:5432/db"}])
def test_config_rejects_missing_or_invalid_url(env) -> None:
    with pytest.raises(ConfigurationError):
        PostgresConfig.from_env(env)


def test_load_returns_none_when_nothing_saved(store) -> None:
    assert store.load_state() is None


def test_save_then_load(store) -> None:
    updated_at = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    state = ModelState(weights=IndicatorWeights(obv=40, stoch=20, oi_proxy=15, macd=10), accuracy="57.3", updated_at=updated_at)

    store.save_state(state)
    loaded = store.load_state()

    assert loaded == state


def test_save_replaces_previous_state(store) -> None:
    store.save_state(ModelState(accuracy="10.0"))
    store.save_state(ModelState(weights=IndicatorWeights(obv=25, stoch=25, oi_proxy=25, macd=10), accuracy="55.0"))

    loaded = store.load_state()

    assert loaded.accuracy == "55.0"
    with store._get_engine().begin() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM adaptive_weights")).scalar() == 1


def test_keys_are_isolated(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'shared.db'}"
    prod = PostgresWeightStore(config=PostgresConfig(database_url=url, weights_key="prod"))
    staging = PostgresWeightStore(config=PostgresConfig(database_url=url, weights_key="staging"))

    prod.save_state(ModelState(accuracy="60.0"))

    assert staging.load_state() is None
    assert prod.load_state().accuracy == "60.0"
    prod.dispose()
    staging.dispose()


def test_invalid_stored_weights_are_ignored(store) -> None:
    store.ensure_schema()
    with store._get_engine().begin() as conn:
        conn.execute(
            text("INSERT INTO adaptive_weights VALUES (:key, :w, :a, :t)"),
            {"key": DEFAULT_WEIGHTS_KEY, "w": '{"OBV": 30}', "a": "50.0", "t": "2024-01-01T00:00:00+00:00"},
        )

    assert store.load_state() is None


@pytest.mark.parametrize(
    "weights_json",
    [
        '{"OBV": 500, "STOCH": 0, "OI_PROXY": 0, "MACD": 0}',
        '{"OBV": 0, "STOCH": 0, "OI_PROXY": 0, "MACD": 0}',
        '{"OBV": 70, "STOCH": 5, "OI_PROXY": 6, "MACD": 4}',
        '{"OBV": 30.5, "STOCH": 24.5, "OI_PROXY": 20, "MACD": 10}',
    ],
)
def test_out_of_budget_stored_weights_are_ignored(store, weights_json) -> None:
    store.ensure_schema()
    with store._get_engine().begin() as conn:
        conn.execute(
            text("INSERT INTO adaptive_weights VALUES (:key, :w, :a, :t)"),
            {"key": DEFAULT_WEIGHTS_KEY, "w": weights_json, "a": "50.0", "t": "2024-01-01T00:00:00+00:00"},
        )

    assert store.load_state() is None


def test_naive_timestamp_is_read_as_utc(store) -> None:
    store.ensure_schema()
    with store._get_engine().begin() as conn:
        conn.execute(
            text("INSERT INTO adaptive_weights VALUES (:key, :w, :a, :t)"),
            {
                "key": DEFAULT_WEIGHTS_KEY,
                "w": '{"OBV": 30, "STOCH": 25, "OI_PROXY": 20, "MACD": 10}',
                "a": "0.0",
                "t": "2024-12-25T12:00:00",
            },
        )

    loaded = store.load_state()

    assert loaded.weights == DEFAULT_WEIGHTS
    assert loaded.updated_at == datetime(2024, 12, 25, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_async_interface(store) -> None:
    await store.check_available()
    assert await store.load() is None

    await store.save(ModelState())

    loaded = await store.load()
    assert loaded.weights == DEFAULT_WEIGHTS


@pytest.mark.asyncio
async def test_state_replaces_zeroed_stored_weights_with_defaults(store) -> None:
    store.ensure_schema()
    with store._get_engine().begin() as conn:
        conn.execute(
            text("INSERT INTO adaptive_weights VALUES (:key, :w, :a, :t)"),
            {
                "key": DEFAULT_WEIGHTS_KEY,
                "w": '{"OBV": 0, "STOCH": 0, "OI_PROXY": 0, "MACD": 0}',
                "a": "40.0",
                "t": "2024-01-01T00:00:00+00:00",
            },
        )
    state = ScannerState()

    await state.load(store)

    assert state.model.weights == DEFAULT_WEIGHTS
    assert store.load_state().weights == DEFAULT_WEIGHTS

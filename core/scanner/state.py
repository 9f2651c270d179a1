"""Process-scoped model state.

The learned weights are the only state that outlives a scan cycle. One
ScannerState object is created at startup, loaded from the weight store, and
handed to every cycle. A cycle replaces the state wholesale after learning
and before the sweep, so readers never see a half-updated vector.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.persistence.interfaces import WeightStore
from core.signals.weights import ModelState

logger = logging.getLogger(__name__)


class ScannerState:
    def __init__(self, model: Optional[ModelState] = None) -> None:
        self._model = model or ModelState()

    @property
    def model(self) -> ModelState:
        return self._model

    def replace(self, model: ModelState) -> None:
        self._model = model

    async def load(self, store: WeightStore) -> ModelState:
        """Load the persisted state, falling back to the code defaults.

        When nothing has been saved yet the defaults are written once so the
        store always holds a state after the first start. Store failures are
        logged; the in-memory state stays authoritative.
        """
        try:
            saved = await store.load()
        except Exception as exc:
            logger.error(f"Failed to load weights, using defaults: {exc}")
            return self._model

        if saved is None:
            logger.info("No weights found; starting with default values")
            try:
                await store.save(self._model)
            except Exception as exc:
                logger.error(f"Failed to save default weights: {exc}")
            return self._model

        self._model = saved
        logger.info(f"Weights loaded: {saved.weights.as_dict()} (accuracy {saved.accuracy}%)")
        return saved

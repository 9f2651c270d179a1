from __future__ import annotations

from typing import Optional, Protocol

from core.signals.weights import ModelState


class WeightStore(Protocol):
    async def load(self) -> Optional[ModelState]:
        """Return the last saved model state, or None if nothing was saved yet."""

    async def save(self, state: ModelState) -> None:
        """Persist the model state, replacing any previous one."""


class Notifier(Protocol):
    async def send_message(self, text: str) -> bool:
        """Deliver a formatted report. Returns False instead of raising on failure."""

"""Notifications module."""

from core.notifications.telegram import TelegramClient

__all__ = [
    "TelegramClient",
]

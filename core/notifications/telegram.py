"""Telegram delivery of scan reports.

Usage:
    from core.notifications.telegram import TelegramClient

    telegram = TelegramClient()  # TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID
    await telegram.send_message(report)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from telegram import Bot

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than this
MAX_MESSAGE_LENGTH = 4096


class TelegramClient:
    """Sends Markdown reports to one chat through python-telegram-bot.

    Delivery is best effort: failures are logged and reported as False,
    never raised, so a broken bot cannot take down a scan cycle.
    """

    def __init__(self, bot_token: Optional[str] = None, default_chat_id: Optional[str] = None):
        self.bot_token = bot_token or os.environ.get("TELEGRAM_BOT_TOKEN")
        self.default_chat_id = default_chat_id or os.environ.get("TELEGRAM_CHAT_ID")

        if not self.bot_token:
            logger.warning("TELEGRAM_BOT_TOKEN not set; scan reports will not be delivered")

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.default_chat_id)

    async def send_message(self, text: str, chat_id: Optional[str] = None, parse_mode: str = "Markdown") -> bool:
        """Deliver `text` to `chat_id` (default: TELEGRAM_CHAT_ID).

        Text over Telegram's length limit is cut and ends with "...".

        Returns:
            True once Telegram accepted the message, False otherwise
        """
        if not self.bot_token:
            logger.error("Telegram report skipped: no bot token")
            return False

        target = chat_id or self.default_chat_id
        if not target:
            logger.error("Telegram report skipped: no chat ID")
            return False

        if len(text) > MAX_MESSAGE_LENGTH:
            text = text[: MAX_MESSAGE_LENGTH - 3] + "..."

        try:
            async with Bot(token=self.bot_token) as bot:
                await bot.send_message(chat_id=target, text=text, parse_mode=parse_mode)
        except Exception as exc:
            logger.error(f"Telegram delivery failed: {exc}")
            return False

        logger.info(f"Scan report delivered to Telegram chat {target}")
        return True

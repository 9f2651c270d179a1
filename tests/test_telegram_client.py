"""Tests for Telegram client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.notifications.telegram import MAX_MESSAGE_LENGTH, TelegramClient


def _mock_bot() -> tuple[MagicMock, AsyncMock]:
    bot_class = MagicMock()
    bot = AsyncMock()
    bot_class.return_value.__aenter__.return_value = bot
    return bot_class, bot


def test_telegram_client_init():
    """Test TelegramClient initialization."""
    client = TelegramClient(bot_token="test_token", default_chat_id="123456")

    assert client.bot_token == "test_token"
    assert client.default_chat_id == "123456"
    assert client.configured


def test_telegram_client_reads_env():
    with patch.dict("os.environ", {"TELEGRAM_BOT_TOKEN": "env_token", "TELEGRAM_CHAT_ID": "42"}, clear=True):
        client = TelegramClient()

    assert client.bot_token == "env_token"
    assert client.default_chat_id == "42"


def test_telegram_client_no_token():
    """Test TelegramClient without token."""
    with patch.dict("os.environ", {}, clear=True):
        client = TelegramClient()

    assert client.bot_token is None
    assert not client.configured


@pytest.mark.asyncio
async def test_send_message_no_token():
    """Test sending message without token configured."""
    with patch.dict("os.environ", {}, clear=True):
        client = TelegramClient()
    result = await client.send_message("Test message", chat_id="123456")

    assert result is False


@pytest.mark.asyncio
async def test_send_message_no_chat_id():
    """Test sending message without chat ID."""
    with patch.dict("os.environ", {}, clear=True):
        client = TelegramClient(bot_token="test_token")
    result = await client.send_message("Test message")

    assert result is False


@pytest.mark.asyncio
async def test_send_message_success():
    client = TelegramClient(bot_token="test_token", default_chat_id="123456")
    bot_class, bot = _mock_bot()

    with patch("core.notifications.telegram.Bot", bot_class):
        result = await client.send_message("*Report*")

    assert result is True
    bot_class.assert_called_once_with(token="test_token")
    bot.send_message.assert_awaited_once_with(chat_id="123456", text="*Report*", parse_mode="Markdown")


@pytest.mark.asyncio
async def test_send_message_truncates_long_text():
    client = TelegramClient(bot_token="test_token", default_chat_id="123456")
    bot_class, bot = _mock_bot()

    with patch("core.notifications.telegram.Bot", bot_class):
        await client.send_message("x" * 5000)

    sent = bot.send_message.await_args.kwargs["text"]
    assert len(sent) == MAX_MESSAGE_LENGTH
    assert sent.endswith("...")


@pytest.mark.asyncio
async def test_send_message_failure_returns_false():
    client = TelegramClient(bot_token="test_token", default_chat_id="123456")
    bot_class, bot = _mock_bot()
    bot.send_message.side_effect = RuntimeError("Forbidden: bot was blocked by the user")

    with patch("core.notifications.telegram.Bot", bot_class):
        result = await client.send_message("hello")

    assert result is False

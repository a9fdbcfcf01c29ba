"""Shared handler helpers: auth guard, rate limit, error replies."""

from __future__ import annotations

import functools
import html
import logging
import time
from typing import TYPE_CHECKING, Callable

from telegram.constants import ParseMode

from .. import config
from ..state import BOT_STATE_KEY, BotState, DebugRecorder

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from telegram import Update
    from telegram.ext import ContextTypes


# Global rate limit (seconds) for all commands.
_last_command_ts = 0.0


def get_state(app) -> BotState:
    """Retrieve or initialize the bot state from application data.

    Args:
        app: The Telegram Application instance

    Returns:
        BotState object holding the Server-Eye session, cache and metrics.
    """
    return app.bot_data.setdefault(BOT_STATE_KEY, BotState())


def get_state_and_recorder(context) -> tuple[BotState, DebugRecorder]:
    state = get_state(context.application)
    return state, state.debug_recorder()


async def record_error(
    recorder: DebugRecorder,
    command: str,
    message: str,
    exc: Exception,
    reply,
    log: logging.Logger | None = None,
):
    (log or logger).exception(message)
    recorder.record_exception(command, message, exc)
    await reply(f"❌ Error: {html.escape(str(exc))}", parse_mode=ParseMode.HTML)


def allowed(update: "Update") -> bool:
    """Check if the update sender is authorized to use the bot.

    Args:
        update: Telegram Update object containing chat information

    Returns:
        True for a private chat with an allowlisted user, False otherwise.

    Note:
        Returns False if ALLOWED_CHAT_IDS is empty or update has no chat.
    """
    if not config.ALLOWED:
        return False
    if not update.effective_chat:
        return False
    chat_id = update.effective_chat.id
    effective_user = getattr(update, "effective_user", None)
    user_id = getattr(effective_user, "id", None)
    # Allow only private chats where chat_id == user_id and user is on the allowlist.
    if user_id is None:
        return chat_id in config.ALLOWED
    return chat_id == user_id and user_id in config.ALLOWED


async def guard(update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> bool:
    """Check authorization before executing a command.

    Sends a "Not authorized" notice and returns False for unknown chats.
    """
    if allowed(update):
        return True
    if update and update.effective_chat:
        await update.effective_chat.send_message("⛔ Not authorized")
    return False


def rate_limit(func: Callable, name: str | None = None) -> Callable:
    """Decorator to enforce global rate limiting on command handlers.

    Args:
        func: The async command handler function to wrap

    Returns:
        Wrapped function that enforces rate limiting based on config.RATE_LIMIT_S

    Note:
        Uses a global timestamp check. Rate limit applies across all commands.
        Each call's latency and outcome are recorded in the bot metrics.
    """

    command_name = name or func.__name__.removeprefix("cmd_")

    @functools.wraps(func)
    async def wrapper(
        update: "Update", context: "ContextTypes.DEFAULT_TYPE", *args, **kwargs
    ):
        global _last_command_ts
        now = time.monotonic()
        elapsed = now - _last_command_ts

        if elapsed < config.RATE_LIMIT_S:
            try:
                if update and getattr(update, "effective_message", None):
                    await update.effective_message.reply_text(
                        f"⏱ Rate limit: please wait {config.RATE_LIMIT_S - elapsed:.1f}s",
                    )
            except Exception as e:
                logger.debug("rate-limit notice failed to send: %s", e)
            get_state(context.application).record_rate_limited(command_name)
            return

        _last_command_ts = now
        start = time.perf_counter()
        state = get_state(context.application)
        try:
            result = await func(update, context, *args, **kwargs)
        except Exception as e:
            state.record_command(
                command_name, time.perf_counter() - start, ok=False, error_msg=str(e)
            )
            raise
        state.record_command(
            command_name, time.perf_counter() - start, ok=True, error_msg=None
        )
        return result

    return wrapper


async def reply_usage(update: "Update", usage: str) -> None:
    await update.message.reply_text(
        f"<i>Usage:</i> <code>{html.escape(usage)}</code>", parse_mode=ParseMode.HTML
    )

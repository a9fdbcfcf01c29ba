"""Entrypoint for running the Server-Eye Telegram bot from the package.

This module wires up the Application, registers handlers and runs polling.
"""

from __future__ import annotations

import logging

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from .logger import setup_logging
from . import config
from .commands import COMMANDS
from .handlers import dispatch
from .state import BOT_STATE_KEY, BotState
from .runtime import STARTUP_TIME

logger = logging.getLogger(__name__)


def build_application() -> Application:
    if config.TOKEN is None:
        raise RuntimeError("BOT_TOKEN environment variable is not set")

    app = Application.builder().token(config.TOKEN).build()

    app.bot_data.setdefault(BOT_STATE_KEY, BotState())

    for spec in COMMANDS:
        fn = getattr(dispatch, spec.handler)
        triggers = [spec.name, *spec.aliases]
        app.add_handler(CommandHandler(triggers, fn))

    return app


async def register_bot_commands(app: Application) -> None:
    """Register bot commands for Telegram autocomplete."""
    try:
        bot_commands = [BotCommand(spec.name, spec.description) for spec in COMMANDS]
        await app.bot.set_my_commands(bot_commands)
        logger.info("Registered %d commands for autocomplete", len(bot_commands))
    except Exception as e:
        logger.warning("Failed to register bot commands: %s", e)


async def send_startup_notification(app: Application) -> None:
    """Register commands and greet all allowed chat IDs."""
    await register_bot_commands(app)

    if not config.ALLOWED:
        logger.warning("No ALLOWED_CHAT_IDS configured, skipping startup notification")
        return

    startup_msg = f"🛰 Server-Eye bot started at {STARTUP_TIME.strftime('%Y-%m-%d %H:%M:%S')}"
    for chat_id in config.ALLOWED:
        try:
            await app.bot.send_message(chat_id=chat_id, text=startup_msg)
        except Exception as e:
            logger.warning(
                "Failed to send startup notification to chat_id %s: %s", chat_id, e
            )


def run() -> None:
    setup_logging()
    logger.info("Starting servereye_helper bot")
    app = build_application()

    app.post_init = send_startup_notification

    # stop_signals=None leaves signal handling to the host process
    app.run_polling(stop_signals=None)


if __name__ == "__main__":
    run()

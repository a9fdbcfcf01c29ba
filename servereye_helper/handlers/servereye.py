"""Server-Eye lookup commands: sensors, notifications, sensorhubs, customers."""

from __future__ import annotations

import asyncio
import html
import logging
from dataclasses import dataclass, field

from telegram.constants import ParseMode

from .. import services, view
from ..errors import ConfigError
from ..filters import MessageFilter, build_filter
from .common import get_state, get_state_and_recorder, guard, record_error, reply_usage

logger = logging.getLogger(__name__)

_VALUE_OPTIONS = {"--sensor", "--type", "--hub", "--customer"}


@dataclass
class LookupArgs:
    positional: list[str] = field(default_factory=list)
    options: dict[str, str] = field(default_factory=dict)
    show_free: bool = False
    line_filter: list[str] | None = None
    span_filter: list[str] | None = None

    def message_filter(self) -> MessageFilter:
        return build_filter(self.line_filter, self.span_filter)


def parse_lookup_args(args: list[str] | None) -> LookupArgs:
    """Parse ``/sensors``-style arguments.

    ``--line`` may repeat. ``--span`` takes the next two tokens verbatim, so
    markers such as ``-----BEGIN`` are accepted as delimiters.
    """
    parsed = LookupArgs()
    tokens = list(args or [])
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--free":
            parsed.show_free = True
            i += 1
        elif token == "--line":
            if i + 1 >= len(tokens):
                raise ConfigError("--line needs a value")
            parsed.line_filter = (parsed.line_filter or []) + [tokens[i + 1]]
            i += 2
        elif token == "--span":
            if i + 2 >= len(tokens):
                raise ConfigError("--span needs a start and an end marker")
            parsed.span_filter = (parsed.span_filter or []) + tokens[i + 1 : i + 3]
            i += 3
        elif token in _VALUE_OPTIONS:
            if i + 1 >= len(tokens):
                raise ConfigError(f"{token} needs a value")
            parsed.options[token[2:]] = tokens[i + 1]
            i += 2
        elif token.startswith("--"):
            raise ConfigError(f"unknown option {token}")
        else:
            parsed.positional.append(token)
            i += 1
    return parsed


async def _reply_chunks(update, text: str) -> None:
    for part in view.chunk(text):
        await update.message.reply_text(part, parse_mode=ParseMode.HTML)


async def _reply_config_error(update, exc: ConfigError, usage: str) -> None:
    await update.message.reply_text(
        f"❌ {html.escape(str(exc))}", parse_mode=ParseMode.HTML
    )
    await reply_usage(update, usage)


async def cmd_sensors(update, context) -> None:
    if not await guard(update, context):
        return
    usage = "/sensors [hubId] [--sensor id] [--type t] [--free] [--line text]... [--span start end]"
    try:
        parsed = parse_lookup_args(context.args)
        mode = parsed.message_filter()
    except ConfigError as e:
        await _reply_config_error(update, e, usage)
        return

    state, recorder = get_state_and_recorder(context)
    client, cache, credential = state.servereye()
    hub_id = parsed.positional[0] if parsed.positional else parsed.options.get("hub")
    try:
        records = await asyncio.to_thread(
            services.get_sensor,
            client,
            cache,
            sensorhub_id=hub_id,
            sensor_id=parsed.options.get("sensor"),
            sensor_type=parsed.options.get("type"),
            filter=mode,
            show_free=parsed.show_free,
            auth=credential,
        )
    except Exception as e:
        await record_error(
            recorder, "sensors", "sensor lookup failed", e, update.message.reply_text
        )
        return
    await _reply_chunks(update, view.render_sensor_list(records))


async def cmd_notifications(update, context) -> None:
    if not await guard(update, context):
        return
    usage = "/notifications [sensorId] [--hub id] [--line text]... [--span start end]"
    try:
        parsed = parse_lookup_args(context.args)
        mode = parsed.message_filter()
    except ConfigError as e:
        await _reply_config_error(update, e, usage)
        return

    state, recorder = get_state_and_recorder(context)
    client, cache, credential = state.servereye()
    sensor_id = parsed.positional[0] if parsed.positional else parsed.options.get("sensor")
    try:
        records = await asyncio.to_thread(
            services.get_notification,
            client,
            cache,
            sensor_id=sensor_id,
            sensorhub_id=parsed.options.get("hub"),
            filter=mode,
            auth=credential,
        )
    except Exception as e:
        await record_error(
            recorder,
            "notifications",
            "notification lookup failed",
            e,
            update.message.reply_text,
        )
        return
    await _reply_chunks(update, view.render_notification_list(records))


async def cmd_sensorhubs(update, context) -> None:
    if not await guard(update, context):
        return
    try:
        parsed = parse_lookup_args(context.args)
    except ConfigError as e:
        await _reply_config_error(update, e, "/sensorhubs [--customer id]")
        return

    state, recorder = get_state_and_recorder(context)
    client, cache, credential = state.servereye()
    try:
        records = await asyncio.to_thread(
            services.get_sensorhub,
            client,
            cache,
            sensorhub_id=parsed.positional[0] if parsed.positional else None,
            customer_id=parsed.options.get("customer"),
            auth=credential,
        )
    except Exception as e:
        await record_error(
            recorder,
            "sensorhubs",
            "sensorhub lookup failed",
            e,
            update.message.reply_text,
        )
        return
    await _reply_chunks(update, view.render_sensorhub_list(records))


async def cmd_customer(update, context) -> None:
    if not await guard(update, context):
        return
    if not context.args:
        await reply_usage(update, "/customer <id>")
        return

    state, recorder = get_state_and_recorder(context)
    _, cache, credential = state.servereye()
    customer_id = context.args[0]
    try:
        record = await asyncio.to_thread(
            services.get_customer, cache, customer_id, auth=credential
        )
    except Exception as e:
        await record_error(
            recorder,
            "customer",
            f"customer lookup failed for {customer_id}",
            e,
            update.message.reply_text,
        )
        return
    await update.message.reply_text(
        view.render_customer(record), parse_mode=ParseMode.HTML
    )


async def cmd_cache(update, context) -> None:
    if not await guard(update, context):
        return
    state = get_state(context.application)
    if context.args and context.args[0].lower() == "clear":
        dropped = state.reset_cache()
        await update.message.reply_text(f"🧹 Cleared {dropped} cached entities.")
        return
    _, cache, _ = state.servereye()
    await update.message.reply_text(
        view.render_cache_stats(cache.stats()), parse_mode=ParseMode.HTML
    )

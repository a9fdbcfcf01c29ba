"""Command registry (single source of truth for help + wiring)."""

from __future__ import annotations

from .models.command_spec import CommandSpec, Group


_INFO_COMMANDS = (
    CommandSpec("start", "Info", "/start", "show help", "cmd_start"),
    CommandSpec("help", "Info", "/help", "this menu", "cmd_help"),
    CommandSpec("whoami", "Info", "/whoami", "show chat and user info", "cmd_whoami"),
    CommandSpec(
        "metrics",
        "Info",
        "/metrics",
        "command metrics summary",
        "cmd_metrics",
    ),
    CommandSpec(
        "debug",
        "Info",
        "/debug [command]",
        "recent errors/debug info",
        "cmd_debug",
    ),
)

_SERVEREYE_COMMANDS = (
    CommandSpec(
        "sensors",
        "Server-Eye",
        "/sensors [hubId] [--sensor id] [--type t] [--free] "
        "[--line text]... [--span start end]",
        "sensors with state message (optionally filtered)",
        "cmd_sensors",
        aliases=("sensor",),
    ),
    CommandSpec(
        "notifications",
        "Server-Eye",
        "/notifications [sensorId] [--hub id] [--line text]... [--span start end]",
        "notification recipients of a sensor or sensorhub",
        "cmd_notifications",
        aliases=("notify",),
    ),
    CommandSpec(
        "sensorhubs",
        "Server-Eye",
        "/sensorhubs [--customer id]",
        "sensorhubs with connector and customer",
        "cmd_sensorhubs",
    ),
    CommandSpec(
        "customer",
        "Server-Eye",
        "/customer <id>",
        "customer name and number",
        "cmd_customer",
    ),
    CommandSpec(
        "cache",
        "Server-Eye",
        "/cache [clear]",
        "entity cache statistics (or clear it)",
        "cmd_cache",
    ),
)

COMMANDS: tuple[CommandSpec, ...] = _INFO_COMMANDS + _SERVEREYE_COMMANDS

GROUP_ORDER: tuple[Group, ...] = ("Server-Eye", "Info")

"""View layer for formatting Telegram messages (HTML)."""

from __future__ import annotations

import html
import math
import time

from .models.cache import CacheStats
from .models.debug import DebugEntry
from .models.records import (
    CustomerRecord,
    NotificationRecord,
    SensorhubRecord,
    SensorRecord,
)

_DEBUG_DETAILS_MAX = 1200


def bold(text: str) -> str:
    return f"<b>{html.escape(str(text))}</b>"


def code(text: str) -> str:
    return f"<code>{html.escape(str(text))}</code>"


def pre(text: str) -> str:
    return f"<pre>{html.escape(str(text))}</pre>"


def chunk(msg: str, size: int = 4000) -> list[str]:
    """Split message into chunks ensuring no chunk exceeds size limit."""
    if len(msg) <= size:
        return [msg]

    lines = msg.splitlines()
    chunks: list[str] = []
    current = ""
    for line in lines:
        if len(line) > size:
            if current:
                chunks.append(current)
                current = ""
            start = 0
            while start < len(line):
                chunks.append(line[start : start + size])
                start += size
            continue
        added_length = len(line) + (1 if current else 0)
        if len(current) + added_length > size and current:
            chunks.append(current)
            current = line
        else:
            current = f"{current}\n{line}" if current else line
    if current:
        chunks.append(current)
    return chunks


def _state_icon(error: bool | None) -> str:
    if error is None:
        return "⚪"
    return "🔴" if error else "🟢"


def _yes_no(value: bool | str) -> str:
    if isinstance(value, str):
        return f"<i>{html.escape(value)}</i>"
    return "yes" if value else "no"


def render_sensor_list(records: list[SensorRecord]) -> str:
    if not records:
        return "<i>No sensors found.</i>"

    lines = [bold(f"Sensors ({len(records)}):")]
    for r in records:
        lines.append(
            f"{_state_icon(r.error)} {bold(r.name)} {code(r.sensor_id)} "
            f"• {html.escape(r.sensor_type or '-')}"
        )
        lines.append(
            f"   {html.escape(r.customer)} › {html.escape(r.connector)} › "
            f"{html.escape(r.sensorhub)} • notify: {_yes_no(r.has_notification)}"
        )
        if r.message:
            lines.append(pre(r.message.rstrip("\n")))
    return "\n".join(lines)


def render_notification_list(records: list[NotificationRecord]) -> str:
    if not records:
        return "<i>No notifications found.</i>"

    lines = [bold(f"Notifications ({len(records)}):")]
    for r in records:
        channels = [
            label
            for label, on in (
                ("mail", r.via_mail),
                ("phone", r.via_phone),
                ("ticket", r.via_ticket),
            )
            if on
        ]
        defer = f" • defer {html.escape(r.defer_time)}" if r.defer_time else ""
        lines.append(
            f"• {bold(r.name)} &lt;{html.escape(r.email)}&gt; "
            f"[{', '.join(channels) or '-'}]{defer}"
        )
        lines.append(
            f"   {html.escape(r.node_kind)} {html.escape(r.node_name)} "
            f"({html.escape(r.customer)})"
        )
        if r.message:
            lines.append(pre(r.message.rstrip("\n")))
    return "\n".join(lines)


def render_sensorhub_list(records: list[SensorhubRecord]) -> str:
    if not records:
        return "<i>No sensorhubs found.</i>"

    lines = [bold(f"Sensorhubs ({len(records)}):")]
    for r in records:
        host = f" • {html.escape(r.hostname)}" if r.hostname else ""
        lines.append(
            f"• {bold(r.name)} {code(r.sensorhub_id)}{host} "
            f"• {html.escape(r.customer)} › {html.escape(r.connector)}"
        )
    return "\n".join(lines)


def render_customer(record: CustomerRecord) -> str:
    number = f" (#{html.escape(record.customer_number)})" if record.customer_number else ""
    return f"{bold(record.name)}{number}\n{code(record.customer_id)}"


def render_cache_stats(stats: CacheStats) -> str:
    lookups = stats.hits + stats.misses
    ratio = (stats.hits / lookups * 100.0) if lookups else 0.0
    return (
        f"{bold('Entity cache:')} {stats.entries} entries • "
        f"{stats.hits} hits / {stats.misses} misses ({ratio:.0f}% hit rate)"
    )


def _format_timestamp(ts: float | None) -> str:
    if not ts:
        return "never"
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(ts))


def _p95(samples: list[float]) -> float:
    if not samples:
        return 0.0
    ordered = sorted(samples)
    idx = max(0, math.ceil(0.95 * len(ordered)) - 1)
    return ordered[idx]


def render_command_metrics(metrics: dict) -> str:
    if not metrics:
        return "<i>No command metrics recorded yet.</i>"

    lines = [bold("Command Metrics:")]
    for name in sorted(metrics.keys()):
        entry = metrics[name]
        line = (
            f"{code(name)} runs {entry.count} ok {entry.success} err {entry.error} "
            f"rl {entry.rate_limited} avg {entry.avg_latency_s * 1000:.1f}ms "
            f"p95 {_p95(entry.latencies_s) * 1000:.1f}ms "
            f"max {entry.max_latency_s * 1000:.1f}ms "
            f"last {html.escape(_format_timestamp(entry.last_run_ts))}"
        )
        lines.append(line)
    return "\n".join(lines)


def render_debug(entries: dict[str, list[DebugEntry]]) -> str:
    if not entries:
        return "<i>No debug entries.</i>"

    lines = [bold("Debug:")]
    for command in sorted(entries.keys()):
        lines.append(code(command))
        for entry in entries[command][-5:]:
            kind = f" [{html.escape(entry.error_type)}]" if entry.error_type else ""
            lines.append(
                f"• {html.escape(_format_timestamp(entry.timestamp))}{kind} "
                f"{html.escape(entry.message)}"
            )
            if entry.details:
                lines.append(pre(entry.details[:_DEBUG_DETAILS_MAX]))
    return "\n".join(lines)

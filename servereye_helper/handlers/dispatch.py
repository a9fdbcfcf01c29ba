"""Dispatch layer: applies rate limiting then calls the real handlers."""

from __future__ import annotations

from .common import rate_limit
from . import meta, servereye


# Meta
cmd_start = rate_limit(meta.cmd_start, name="start")
cmd_help = rate_limit(meta.cmd_help, name="help")
cmd_whoami = rate_limit(meta.cmd_whoami, name="whoami")
cmd_metrics = rate_limit(meta.cmd_metrics, name="metrics")
cmd_debug = rate_limit(meta.cmd_debug, name="debug")

# Server-Eye
cmd_sensors = rate_limit(servereye.cmd_sensors, name="sensors")
cmd_notifications = rate_limit(servereye.cmd_notifications, name="notifications")
cmd_sensorhubs = rate_limit(servereye.cmd_sensorhubs, name="sensorhubs")
cmd_customer = rate_limit(servereye.cmd_customer, name="customer")
cmd_cache = rate_limit(servereye.cmd_cache, name="cache")

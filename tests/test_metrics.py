"""Metrics recorded by the rate-limited Server-Eye command dispatch."""

import time

import pytest

from servereye_helper import config
from servereye_helper.errors import ServerEyeError
from servereye_helper.handlers import common, dispatch, meta
from servereye_helper.handlers.common import get_state
from servereye_helper.models.bot_state import BotState

from conftest import DummyContext, DummyUpdate


@pytest.fixture
def unthrottled(monkeypatch):
    monkeypatch.setattr(config, "ALLOWED", {123})
    monkeypatch.setattr(config, "RATE_LIMIT_S", 0.0)
    monkeypatch.setattr(common, "_last_command_ts", 0.0)


def _context(args, client, cache, credential) -> DummyContext:
    context = DummyContext(args=args)
    state = get_state(context.application)
    state.client = client
    state.cache = cache
    state.credential = credential
    return context


@pytest.mark.asyncio
async def test_dispatched_customer_records_success(
    unthrottled, client, cache, credential
) -> None:
    update = DummyUpdate(chat_id=123, user_id=123)
    context = _context(["cu1"], client, cache, credential)

    await dispatch.cmd_customer(update, context)

    assert "Acme GmbH" in update.message.replies[0]
    metrics = get_state(context.application).command_metrics["customer"]
    assert metrics.count == 1
    assert metrics.success == 1
    assert metrics.error == 0
    assert metrics.last_run_ts is not None


@pytest.mark.asyncio
async def test_dispatched_sensors_records_unhandled_failure(
    unthrottled, monkeypatch
) -> None:
    def broken_session(self):
        raise ServerEyeError("session unavailable")

    monkeypatch.setattr(BotState, "servereye", broken_session)
    update = DummyUpdate(chat_id=123, user_id=123)
    context = DummyContext(args=["--sensor", "a1"])

    with pytest.raises(ServerEyeError):
        await dispatch.cmd_sensors(update, context)

    metrics = get_state(context.application).command_metrics["sensors"]
    assert metrics.count == 1
    assert metrics.success == 0
    assert metrics.error == 1
    assert metrics.last_error == "session unavailable"


@pytest.mark.asyncio
async def test_dispatched_notifications_rate_limited(
    monkeypatch, client, cache, credential, session
) -> None:
    monkeypatch.setattr(config, "ALLOWED", {123})
    monkeypatch.setattr(config, "RATE_LIMIT_S", 100.0)
    monkeypatch.setattr(common, "_last_command_ts", time.monotonic())
    update = DummyUpdate(chat_id=123, user_id=123)
    context = _context(["a1"], client, cache, credential)

    await dispatch.cmd_notifications(update, context)

    metrics = get_state(context.application).command_metrics["notifications"]
    assert metrics.rate_limited == 1
    assert metrics.count == 0
    assert "Rate limit" in update.message.replies[0]
    assert session.calls == []


@pytest.mark.asyncio
async def test_metrics_command_hides_last_error(monkeypatch) -> None:
    monkeypatch.setattr(config, "ALLOWED", {123})
    update = DummyUpdate(chat_id=123, user_id=123)
    context = DummyContext()
    state = get_state(context.application)
    state.record_command("sensors", 0.25, ok=False, error_msg="secret boom")
    state.record_rate_limited("sensors")

    await meta.cmd_metrics(update, context)

    text = update.message.replies[0]
    assert "<code>sensors</code>" in text
    assert "err 1 rl 1" in text
    assert "avg 250.0ms" in text
    assert "secret boom" not in text

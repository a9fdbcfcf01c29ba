import pytest

from servereye_helper.handlers import meta
from servereye_helper.handlers.common import get_state


class DummyMessage:
    def __init__(self) -> None:
        self.replies: list[str] = []

    async def reply_text(self, text: str, **_) -> None:
        self.replies.append(text)


class DummyUpdate:
    def __init__(self) -> None:
        self.message = DummyMessage()


class DummyApplication:
    def __init__(self) -> None:
        self.bot_data: dict[str, object] = {}


class DummyContext:
    def __init__(self, args: list[str]) -> None:
        self.args = args
        self.application = DummyApplication()


@pytest.mark.asyncio
async def test_debug_command_filters_by_command(monkeypatch) -> None:
    async def allow_guard(update, context) -> bool:
        return True

    monkeypatch.setattr(meta, "guard", allow_guard)
    update = DummyUpdate()
    context = DummyContext(args=["/sensors"])
    state = get_state(context.application)
    state.add_debug("sensors", "sensor lookup failed", error_type="NotFound")
    state.add_debug("customer", "customer lookup failed")

    await meta.cmd_debug(update, context)

    assert update.message.replies
    text = update.message.replies[0]
    assert "sensor lookup failed" in text
    assert "[NotFound]" in text
    assert "customer lookup failed" not in text


@pytest.mark.asyncio
async def test_debug_command_truncates_details(monkeypatch) -> None:
    async def allow_guard(update, context) -> bool:
        return True

    monkeypatch.setattr(meta, "guard", allow_guard)
    update = DummyUpdate()
    context = DummyContext(args=[])
    state = get_state(context.application)
    state.add_debug("sensors", "sensor lookup failed", "x" * 2000)

    await meta.cmd_debug(update, context)

    text = update.message.replies[0]
    assert "x" * 1200 in text
    assert "x" * 1500 not in text


@pytest.mark.asyncio
async def test_debug_command_empty(monkeypatch) -> None:
    async def allow_guard(update, context) -> bool:
        return True

    monkeypatch.setattr(meta, "guard", allow_guard)
    update = DummyUpdate()

    await meta.cmd_debug(update, DummyContext(args=[]))

    assert "No debug entries" in update.message.replies[0]

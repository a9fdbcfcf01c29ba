"""Notification message filtering.

A message can be reduced either to the lines that contain one of a set of
substrings (``LineFilter``) or to the block between two marker lines
(``SpanFilter``). The two modes are mutually exclusive; ``build_filter`` is
the only place that turns raw options into a mode, so a filter value always
holds exactly one of them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence, Union

from .errors import ConfigError

__all__ = [
    "NoFilter",
    "LineFilter",
    "SpanFilter",
    "MessageFilter",
    "NO_FILTER",
    "build_filter",
    "apply_filter",
    "filter_message",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoFilter:
    """Leave messages untouched."""


@dataclass(frozen=True)
class LineFilter:
    """Keep lines containing any of ``needles`` (literal, case-sensitive)."""

    needles: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.needles:
            raise ConfigError("line filter needs at least one substring")

    def patterns(self) -> list[re.Pattern[str]]:
        return [re.compile(re.escape(needle)) for needle in self.needles]


@dataclass(frozen=True)
class SpanFilter:
    """Extract the lines between a ``start`` marker line and an ``end`` one."""

    start: str
    end: str

    def pattern(self) -> re.Pattern[str]:
        return re.compile(
            rf"^{re.escape(self.start)}.*\n([\s\S]*?)^{re.escape(self.end)}.*",
            re.MULTILINE,
        )


MessageFilter = Union[NoFilter, LineFilter, SpanFilter]

NO_FILTER = NoFilter()


def build_filter(
    line_filter: Sequence[str] | None = None,
    span_filter: Sequence[str] | None = None,
) -> MessageFilter:
    """Resolve the two optional filter options into one filter mode.

    Args:
        line_filter: Substrings selecting whole lines. An empty list means no
            filtering at all.
        span_filter: Exactly two marker strings, ``[start, end]``.

    Returns:
        ``NO_FILTER``, a ``LineFilter`` or a ``SpanFilter``.

    Raises:
        ConfigError: Both options were given, or ``span_filter`` does not
            hold exactly two strings.
    """
    if line_filter is not None and span_filter is not None:
        raise ConfigError("only one filter type may be used at a time")
    if isinstance(line_filter, str) or isinstance(span_filter, str):
        raise ConfigError("filter options must be lists of strings, not a string")
    if span_filter is not None:
        parts = list(span_filter)
        if len(parts) != 2:
            raise ConfigError(
                f"span filter needs exactly two delimiters (start, end), got {len(parts)}"
            )
        return SpanFilter(start=str(parts[0]), end=str(parts[1]))
    if line_filter:
        return LineFilter(needles=tuple(str(n) for n in line_filter))
    return NO_FILTER


def _filter_lines(message: str, mode: LineFilter) -> str:
    patterns = mode.patterns()
    out: list[str] = []
    for line in message.split("\n"):
        for pattern in patterns:
            if pattern.search(line):
                out.append(line + "\n")
                break
    return "".join(out)


def _extract_span(message: str, mode: SpanFilter) -> str:
    match = mode.pattern().search(message)
    if not match:
        logger.debug("span %r..%r not found in message", mode.start, mode.end)
        return ""
    return match.group(1)


def apply_filter(message: str | None, mode: MessageFilter | None = None) -> str:
    """Transform ``message`` according to ``mode``. Pure; no I/O."""
    text = message or ""
    if mode is None or isinstance(mode, NoFilter):
        return text
    if isinstance(mode, LineFilter):
        return _filter_lines(text, mode)
    if isinstance(mode, SpanFilter):
        return _extract_span(text, mode)
    raise ConfigError(f"unknown filter mode: {mode!r}")


def filter_message(
    message: str | None,
    line_filter: Sequence[str] | None = None,
    span_filter: Sequence[str] | None = None,
) -> str:
    """Filter a notification message using raw option values.

    Example:
        >>> filter_message("start\\nkeep\\nend", line_filter=["keep"])
        'keep\\n'
    """
    return apply_filter(message, build_filter(line_filter, span_filter))

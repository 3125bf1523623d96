# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Final, Generic, TypeVar

from ..core.models import RawToolOutput
from ..extraction import strip_ansi

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

Builder = Callable[[re.Match[str]], T | None]

RawInput = RawToolOutput | str


@dataclass(frozen=True, slots=True)
class LinePattern(Generic[T]):
    """A named regex and the builder turning its match into a parsed item.

    A builder may return ``None`` to reject a match, in which case the next
    pattern in the table is tried.
    """

    name: str
    regex: re.Pattern[str]
    builder: Builder[T]

    def apply(self, line: str) -> T | None:
        match = self.regex.match(line)
        if match is None:
            return None
        return self.builder(match)


@dataclass(slots=True)
class ParseStats:
    """Matched and dropped line counts for one parser run."""

    matched: int = 0
    dropped: int = 0

    @property
    def seen(self) -> int:
        return self.matched + self.dropped


def parse_lines(
    lines: Iterable[str],
    patterns: Sequence[LinePattern[T]],
    *,
    family: str,
) -> tuple[list[T], ParseStats]:
    """Apply a prioritized pattern table to ``lines``.

    Patterns are tried in order for each non-blank line and the first that
    yields an item wins. Lines no pattern accepts are dropped and counted.

    Args:
        lines: Input lines, already stripped of ANSI codes.
        patterns: Ordered pattern table owned by the calling parser.
        family: Parser name used in the debug log record.

    Returns:
        tuple[list[T], ParseStats]: Parsed items in input order and line counts.
    """

    items: list[T] = []
    stats = ParseStats()
    for line in lines:
        if not line.strip():
            continue
        item = _first_match(line, patterns)
        if item is None:
            stats.dropped += 1
            continue
        stats.matched += 1
        items.append(item)
    log_stats(family, stats)
    return items, stats


def _first_match(line: str, patterns: Sequence[LinePattern[T]]) -> T | None:
    for pattern in patterns:
        item = pattern.apply(line)
        if item is not None:
            return item
    return None


def log_stats(family: str, stats: ParseStats) -> None:
    if stats.dropped:
        LOGGER.debug("%s: matched %d line(s), dropped %d", family, stats.matched, stats.dropped)


def as_raw(value: RawInput) -> RawToolOutput:
    """Treat a bare string as the stdout of a successful run."""

    if isinstance(value, RawToolOutput):
        return value
    return RawToolOutput(stdout=value)


def combined_lines(raw: RawToolOutput) -> list[str]:
    """Return ANSI-stripped stdout followed by stderr, split into lines."""

    return strip_ansi(raw.combined).split("\n")


def stdout_lines(raw: RawToolOutput) -> list[str]:
    return strip_ansi(raw.stdout).split("\n")


def duration_of(raw: RawToolOutput) -> float | None:
    """Return the caller-supplied duration, ``None`` when none was measured."""

    return raw.duration_ms or None


def to_int(value: str | None, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


NAMED_COUNT_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?P<name>[a-z_]+)=(?P<value>\d+)")


def named_counts(text: str, pattern: re.Pattern[str] = NAMED_COUNT_PATTERN) -> dict[str, int]:
    """Collect ``name=value`` (or pattern-defined) count pairs by field name.

    Fields are looked up by name, so their order in the source row and the
    absence of some of them never shift the values of the others.
    """

    return {match.group("name").lower(): int(match.group("value")) for match in pattern.finditer(text)}


__all__ = [
    "LinePattern",
    "ParseStats",
    "RawInput",
    "as_raw",
    "combined_lines",
    "duration_of",
    "log_stats",
    "named_counts",
    "parse_lines",
    "stdout_lines",
    "to_int",
]

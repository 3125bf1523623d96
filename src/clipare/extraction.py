# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate JSON payloads embedded in noisy console output.

Tools such as JSON test reporters or audit commands print their document
surrounded by banners, progress spinners and ANSI colour codes. The helpers
here scan the stream with a small string-aware state machine so that braces
inside string literals (stack traces, escaped quotes) never disturb the
nesting count.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final, cast

from .core.models import JsonValue
from .errors import NoJsonFoundError

LOGGER = logging.getLogger(__name__)

_OPENERS: Final[frozenset[str]] = frozenset("{[")
_CLOSERS: Final[frozenset[str]] = frozenset("}]")
_QUOTE: Final[str] = '"'
_ESCAPE: Final[str] = "\\"

ANSI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC ... BEL / ST
    r"|\x1b\[[0-?]*[ -/]*[@-~]"  # CSI
    r"|\x1b[@-Z\\-_]",  # two-character escapes
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and normalise line endings to ``\\n``."""

    cleaned = ANSI_PATTERN.sub("", text)
    return cleaned.replace("\r\n", "\n").replace("\r", "\n")


@dataclass(frozen=True, slots=True)
class JsonSpan:
    """Inclusive character range of a balanced JSON value."""

    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start : self.end + 1]


def _scan_balanced(text: str, start: int) -> int | None:
    """Return the index closing the value opened at ``start``.

    Args:
        text: Source text.
        start: Index of an opening ``{`` or ``[``.

    Returns:
        int | None: Index of the matching closer, ``None`` when the stream ends first.
    """

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == _ESCAPE:
                escaped = True
            elif char == _QUOTE:
                in_string = False
            continue
        if char == _QUOTE:
            in_string = True
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return index
    return None


def iter_json_spans(text: str) -> Iterator[JsonSpan]:
    """Yield the span of each top-level JSON value in ``text``, in order.

    Each scan starts at the next ``{`` or ``[``; nested values are folded into
    their parent through the depth counter. Iteration stops at the first
    opener that is never balanced.
    """

    position = 0
    length = len(text)
    while position < length:
        start = next(
            (index for index in range(position, length) if text[index] in _OPENERS),
            None,
        )
        if start is None:
            return
        end = _scan_balanced(text, start)
        if end is None:
            return
        yield JsonSpan(start=start, end=end)
        position = end + 1


def find_json_span(text: str) -> JsonSpan | None:
    """Return the span of the first complete JSON value in ``text``."""

    return next(iter_json_spans(text), None)


def extract_json(text: str) -> str:
    """Return the substring spanning the first balanced JSON value in ``text``.

    ANSI escape sequences are removed before scanning; they can never occur
    inside a valid JSON document.

    Args:
        text: Arbitrary console output that may contain one JSON document.

    Returns:
        str: JSON text ready for :func:`json.loads`.

    Raises:
        NoJsonFoundError: When no balanced object or array is present.
    """

    cleaned = ANSI_PATTERN.sub("", text)
    span = find_json_span(cleaned)
    if span is None:
        raise NoJsonFoundError("no balanced JSON object or array found in output")
    return span.slice(cleaned)


def find_json(text: str) -> str | None:
    """Return the embedded JSON text or ``None`` when the stream has none."""

    try:
        return extract_json(text)
    except NoJsonFoundError:
        return None


def load_embedded_json(text: str) -> JsonValue | None:
    """Extract and decode the embedded JSON value.

    Candidate spans are tried in order so that bracketed log prefixes such as
    ``[INFO]`` ahead of the document do not hide it. Returns ``None`` when no
    candidate decodes, letting callers fall back to text-only output.
    """

    cleaned = ANSI_PATTERN.sub("", text)
    for span in iter_json_spans(cleaned):
        try:
            return cast(JsonValue, json.loads(span.slice(cleaned)))
        except json.JSONDecodeError:
            continue
    LOGGER.debug("no embedded JSON payload found (%d chars scanned)", len(text))
    return None


def split_json_objects(text: str) -> list[str]:
    """Return every top-level JSON value in a concatenated stream.

    Used for tools such as ``go list -json`` that print one object after
    another without separators.
    """

    cleaned = ANSI_PATTERN.sub("", text)
    return [span.slice(cleaned) for span in iter_json_spans(cleaned)]


__all__ = [
    "ANSI_PATTERN",
    "JsonSpan",
    "extract_json",
    "find_json",
    "find_json_span",
    "iter_json_spans",
    "load_embedded_json",
    "split_json_objects",
    "strip_ansi",
]

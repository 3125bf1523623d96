# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dual structured/text output and the adaptive compaction policy."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, TypeVar

from ..core.models import JsonValue, RecordModel
from ..errors import InvalidArgumentError, ToolError, format_tool_error

if TYPE_CHECKING:
    from ..config import OutputConfig

LOGGER = logging.getLogger(__name__)

DEFAULT_CHARS_PER_TOKEN: Final[int] = 4
DEFAULT_COMPACT_MARGIN: Final[float] = 1.0

RecordT = TypeVar("RecordT", bound=RecordModel)
CompactT = TypeVar("CompactT", bound=RecordModel)


@dataclass(frozen=True, slots=True)
class ToolOutput:
    """Structured value and text rendering returned together for one invocation."""

    structured: JsonValue
    text: str
    compacted: bool = False
    is_error: bool = False

    def to_mcp(self) -> dict[str, JsonValue]:
        """Return the MCP tool-result payload.

        ``isError`` is only present when the output describes a failure.
        """

        payload: dict[str, JsonValue] = {
            "content": [{"type": "text", "text": self.text}],
            "structuredContent": self.structured,
        }
        if self.is_error:
            payload["isError"] = True
        return payload


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Approximate the token cost of ``text`` as ``ceil(len / chars_per_token)``."""

    if chars_per_token <= 0:
        raise InvalidArgumentError(f"chars_per_token must be positive, got {chars_per_token}")
    return math.ceil(len(text) / chars_per_token)


@dataclass(frozen=True, slots=True)
class DualOutputPolicy:
    """Decide between the full and compact projection of a record.

    Attributes:
        chars_per_token: Characters counted as one token when estimating cost.
        compact_margin: Multiplier applied to the raw-text estimate; the
            compact form is chosen once the structured estimate reaches it.
    """

    chars_per_token: int = DEFAULT_CHARS_PER_TOKEN
    compact_margin: float = DEFAULT_COMPACT_MARGIN

    @classmethod
    def from_config(cls, config: OutputConfig) -> DualOutputPolicy:
        return cls(chars_per_token=config.chars_per_token, compact_margin=config.compact_margin)

    def should_compact(self, structured_json: str, raw_text: str) -> bool:
        structured_cost = estimate_tokens(structured_json, self.chars_per_token)
        raw_budget = estimate_tokens(raw_text, self.chars_per_token) * self.compact_margin
        LOGGER.debug("structured cost %d tokens, raw budget %.1f tokens", structured_cost, raw_budget)
        return structured_cost >= raw_budget


def dual_output(record: RecordT, formatter: Callable[[RecordT], str]) -> ToolOutput:
    """Return the full record together with its full text rendering."""

    return ToolOutput(structured=record.to_json(), text=formatter(record))


def compact_dual_output(
    record: RecordT,
    raw_text: str,
    formatter: Callable[[RecordT], str],
    compact_mapper: Callable[[RecordT], CompactT],
    compact_formatter: Callable[[CompactT], str],
    *,
    force_full: bool = False,
    policy: DualOutputPolicy | None = None,
) -> ToolOutput:
    """Return full or compact dual output depending on the size budget.

    Args:
        record: Canonical record produced by a parser.
        raw_text: ANSI-stripped raw output the record was parsed from.
        formatter: Full text formatter for ``record``.
        compact_mapper: Projection of ``record`` onto its compact shape.
        compact_formatter: Text formatter for the compact shape.
        force_full: Skip the budget check and always emit the full form.
        policy: Token estimation settings; defaults apply when omitted.

    Returns:
        ToolOutput: Full output when forced or cheaper than the raw text,
        otherwise the compact record with ``compacted`` set.
    """

    if force_full:
        return dual_output(record, formatter)
    policy = policy or DualOutputPolicy()
    if not policy.should_compact(record.model_dump_json(exclude_none=True), raw_text):
        return dual_output(record, formatter)
    compact = compact_mapper(record)
    return ToolOutput(structured=compact.to_json(), text=compact_formatter(compact), compacted=True)


def error_output(error: ToolError) -> ToolOutput:
    """Render a classified tool failure as dual output with ``is_error`` set."""

    return ToolOutput(
        structured=error.model_dump(mode="json", exclude_none=True),
        text=format_tool_error(error),
        is_error=True,
    )


__all__ = [
    "DualOutputPolicy",
    "ToolOutput",
    "compact_dual_output",
    "dual_output",
    "error_output",
    "estimate_tokens",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fold newline-delimited JSON event streams into one final state per key."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .core.models import JsonValue

LOGGER = logging.getLogger(__name__)

KeyT = TypeVar("KeyT", bound=Hashable)

Event = Mapping[str, JsonValue]
KeyFunction = Callable[[Event], KeyT | None]
EventPredicate = Callable[[Event], bool]


@dataclass(slots=True)
class ReducedStream(Generic[KeyT]):
    """Result of reducing an event stream.

    Attributes:
        latest: Insertion-ordered mapping from key to the last stored event.
        unkeyed_events: Events that carried no identifying key, in stream order.
        dropped: Number of lines that were blank or failed to decode.
        ignored: Number of keyed events rejected by the terminal filter.
    """

    latest: dict[KeyT, Event] = field(default_factory=dict)
    unkeyed_events: list[Event] = field(default_factory=list)
    dropped: int = 0
    ignored: int = 0

    @property
    def results(self) -> list[Event]:
        """Return the final event per key in first-seen key order."""
        return list(self.latest.values())

    def count(self, predicate: EventPredicate) -> int:
        """Return how many final per-key events satisfy ``predicate``."""
        return sum(1 for event in self.latest.values() if predicate(event))


class EventStreamReducer(Generic[KeyT]):
    """Reduce JSON-lines events with last-write-wins semantics.

    A later event for an existing key replaces the stored one, including a
    terminal state replacing another terminal state (``fail`` then ``pass``
    under a rerun yields ``pass``). The earlier state is not retained.
    """

    def __init__(
        self,
        key_of: KeyFunction[KeyT],
        *,
        is_terminal: EventPredicate | None = None,
    ) -> None:
        """Create a reducer.

        Args:
            key_of: Return the identity key for an event, or ``None`` for
                events that belong outside the keyed result set.
            is_terminal: Optional filter; when supplied only matching keyed
                events are stored, so progress events never overwrite a
                terminal state.
        """

        self._key_of = key_of
        self._is_terminal = is_terminal

    def reduce(self, lines: Iterable[str]) -> ReducedStream[KeyT]:
        """Fold ``lines`` into a :class:`ReducedStream`.

        Args:
            lines: Raw lines, each expected to hold one JSON object.

        Returns:
            ReducedStream[KeyT]: Final per-key events plus drop accounting.
        """

        reduced: ReducedStream[KeyT] = ReducedStream()
        for raw_line in lines:
            event = _decode_event(raw_line)
            if event is None:
                reduced.dropped += 1
                continue
            key = self._key_of(event)
            if key is None:
                reduced.unkeyed_events.append(event)
                continue
            if self._is_terminal is not None and not self._is_terminal(event):
                reduced.ignored += 1
                continue
            reduced.latest[key] = event
        if reduced.dropped:
            LOGGER.debug("event stream: dropped %d undecodable line(s)", reduced.dropped)
        return reduced

    def reduce_text(self, text: str) -> ReducedStream[KeyT]:
        """Reduce a newline-delimited text blob."""

        return self.reduce(text.splitlines())


def _decode_event(raw_line: str) -> Event | None:
    line = raw_line.strip()
    if not line:
        return None
    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload


__all__ = ["Event", "EventStreamReducer", "ReducedStream"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for last-write-wins event stream reduction."""

from __future__ import annotations

import json

from clipare.events import Event, EventStreamReducer


def _key(event: Event) -> str | None:
    name = event.get("Test")
    return str(name) if name else None


def test_last_event_for_key_wins() -> None:
    events = [
        {"Test": "TestX", "Action": "run"},
        {"Test": "TestX", "Action": "fail", "Elapsed": 0.01},
        {"Test": "TestX", "Action": "pass", "Elapsed": 0.02},
        {"Test": "TestX", "Action": "output", "Output": "tail"},
    ]

    reduced = EventStreamReducer(_key).reduce(json.dumps(event) for event in events)

    assert reduced.latest["TestX"] == events[-1]


def test_terminal_filter_keeps_last_terminal_state() -> None:
    lines = [
        '{"Test": "TestX", "Action": "run"}',
        '{"Test": "TestX", "Action": "fail", "Elapsed": 0.01}',
        '{"Test": "TestX", "Action": "pass", "Elapsed": 0.02}',
        '{"Test": "TestX", "Action": "output", "Output": "ok"}',
    ]
    reducer = EventStreamReducer(_key, is_terminal=lambda event: event.get("Action") in {"pass", "fail"})

    reduced = reducer.reduce(lines)

    assert reduced.latest["TestX"]["Action"] == "pass"
    assert reduced.latest["TestX"]["Elapsed"] == 0.02
    assert reduced.ignored == 2


def test_unkeyed_and_malformed_lines_are_accounted() -> None:
    text = '\n'.join(
        [
            '{"Action": "start", "Package": "p"}',
            "not json",
            "[1, 2]",
            "",
            '{"Test": "A", "Action": "pass"}',
            '{"Test": "B", "Action": "fail"}',
        ],
    )

    reduced = EventStreamReducer(_key).reduce_text(text)

    assert [event["Test"] for event in reduced.results] == ["A", "B"]
    assert reduced.unkeyed_events == [{"Action": "start", "Package": "p"}]
    assert reduced.dropped == 3
    assert reduced.count(lambda event: event.get("Action") == "fail") == 1


def test_results_keep_first_seen_key_order() -> None:
    lines = [
        '{"Test": "A", "Action": "fail"}',
        '{"Test": "B", "Action": "pass"}',
        '{"Test": "A", "Action": "pass"}',
    ]

    reduced = EventStreamReducer(_key).reduce(lines)

    assert [(event["Test"], event["Action"]) for event in reduced.results] == [("A", "pass"), ("B", "pass")]

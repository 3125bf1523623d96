# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for locating JSON embedded in noisy console output."""

from __future__ import annotations

import json

import pytest

from clipare.errors import NoJsonFoundError
from clipare.extraction import (
    extract_json,
    find_json,
    load_embedded_json,
    split_json_objects,
    strip_ansi,
)


def _nested(depth: int) -> dict[str, object]:
    value: dict[str, object] = {"leaf": True}
    for level in range(depth):
        value = {f"level{level}": value, "items": [level, {"n": level}]}
    return value


def test_extract_json_from_ansi_noise() -> None:
    text = "\x1b[32mANSI...\x1b[0m\n{\"a\":1}\nmore noise"

    assert extract_json(text) == '{"a":1}'


@pytest.mark.parametrize(
    "value",
    [
        {"message": 'he said "hi" {not a brace}'},
        {"path": "C:\\temp\\new\\", "tail": "\\"},
        [1, "two", {"three": [3, {"four": None}]}],
        _nested(12),
    ],
)
def test_extract_json_round_trips_through_noise(value: object) -> None:
    document = json.dumps(value)
    text = f"Building...\r\nstep 1 done\r\n{document}\r\nDone in 3s\r\n"

    extracted = extract_json(text)

    assert extracted == document
    assert json.loads(extracted) == value


def test_extract_json_ignores_quotes_in_leading_noise() -> None:
    text = 'warning: can\'t resolve "thing"\n{"ok": true}'

    assert json.loads(extract_json(text)) == {"ok": True}


def test_extract_json_raises_when_absent() -> None:
    with pytest.raises(NoJsonFoundError):
        extract_json("no json here")


def test_find_json_returns_none_for_unbalanced_input() -> None:
    assert find_json('prefix {"a": [1, 2') is None


def test_load_embedded_json_skips_bracketed_log_prefixes() -> None:
    text = '[INFO] running tests\n{"numTotalTests": 2}\n'

    assert load_embedded_json(text) == {"numTotalTests": 2}


def test_load_embedded_json_returns_none_without_document() -> None:
    assert load_embedded_json("[INFO] nothing to see") is None


def test_split_json_objects_handles_concatenated_values() -> None:
    text = '{"a": 1}{"b": "}"}\n[1]'

    assert split_json_objects(text) == ['{"a": 1}', '{"b": "}"}', "[1]"]


def test_strip_ansi_normalises_line_endings() -> None:
    assert strip_ansi("\x1b[1mbold\x1b[0m\r\nnext\rlast") == "bold\nnext\nlast"

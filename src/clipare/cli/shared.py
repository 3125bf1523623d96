# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared CLI helpers."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import typer

STDIN_MARKER = "-"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def read_input(source: str | None) -> str:
    """Return text from ``source``: a file path, ``-`` for stdin, or ``None`` for nothing.

    Raises:
        CLIError: If the file cannot be read.
    """

    if source is None:
        return ""
    if source == STDIN_MARKER:
        return typer.get_text_stream("stdin").read()
    try:
        return Path(source).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise CLIError(f"cannot read {source}: {exc.strerror or exc}", exit_code=2) from exc


def parse_context(pairs: Sequence[str]) -> dict[str, str]:
    """Split ``key=value`` pairs into a mapping.

    Raises:
        CLIError: If a pair has no ``=`` or an empty key.
    """

    context: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise CLIError(f"context must be key=value, got {pair!r}", exit_code=2)
        context[key.strip()] = value
    return context


__all__ = ["CLIError", "STDIN_MARKER", "parse_context", "read_input"]

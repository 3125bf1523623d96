# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared rich consoles for the clipare CLI."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import NamedTuple

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    isatty = getattr(sys.stdout, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


class ConsoleKey(NamedTuple):
    color: bool
    emoji: bool
    stderr: bool
    tty: bool


class RichConsoleManager:
    """Hand out one :class:`Console` per presentation setting.

    Colour is enabled only when requested and stdout is a terminal.
    """

    def __init__(self) -> None:
        self._consoles: dict[ConsoleKey, Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        key = ConsoleKey(color=color, emoji=emoji, stderr=stderr, tty=detect_tty())
        console = self._consoles.get(key)
        if console is None:
            colored = key.color and key.tty
            console = Console(
                color_system="auto" if colored else None,
                force_terminal=key.tty,
                no_color=not colored,
                emoji=key.emoji,
                soft_wrap=True,
                stderr=key.stderr,
            )
            self._consoles[key] = console
        return console


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    return RichConsoleManager()


__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager"]

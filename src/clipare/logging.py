# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status messages with optional colour and emoji support.

Messages go to standard error so they never mix with rendered tool output.
"""

from __future__ import annotations

from rich.markup import escape

from .console import get_console_manager


def _emit(prefix: str, msg: str, style: str, *, use_color: bool, use_emoji: bool) -> None:
    console = get_console_manager().get(color=use_color, emoji=use_emoji, stderr=True)
    marker = f"{prefix} " if use_emoji else ""
    console.print(f"{marker}[{style}]{escape(msg)}[/]", highlight=False)


def warn(msg: str, *, use_color: bool = True, use_emoji: bool = True) -> None:
    """Emit a warning message."""

    _emit("⚠️ ", msg, "yellow", use_color=use_color, use_emoji=use_emoji)


def fail(msg: str, *, use_color: bool = True, use_emoji: bool = True) -> None:
    """Emit an error message."""

    _emit("❌", msg, "bold red", use_color=use_color, use_emoji=use_emoji)


__all__ = ["fail", "warn"]

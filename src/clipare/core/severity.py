# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising different compiler and linter vocabularies."""

    ERROR = "error"
    WARNING = "warning"


SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "e": Severity.ERROR,
    "fatal": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "w": Severity.WARNING,
}


def map_severity(
    label: str | None,
    mapping: Mapping[str, Severity] = SEVERITY_ALIASES,
    default: Severity = Severity.WARNING,
) -> Severity:
    """Return a :class:`Severity` derived from ``label`` using ``mapping``.

    Args:
        label: Tool-native severity label such as ``"error"`` or ``"w"``.
        mapping: Lower-case label lookup table.
        default: Severity returned when ``label`` is unknown or missing.

    Returns:
        Severity: Normalised severity value.
    """

    if not label:
        return default
    return mapping.get(label.strip().lower(), default)


__all__ = ["SEVERITY_ALIASES", "Severity", "map_severity"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Text renderings and compact projections of canonical records."""

from __future__ import annotations

from .compact import DEFAULT_COMPACT_LIMIT, compact_record, format_compact
from .formatters import format_diagnostic, format_record

__all__ = [
    "DEFAULT_COMPACT_LIMIT",
    "compact_record",
    "format_compact",
    "format_diagnostic",
    "format_record",
]

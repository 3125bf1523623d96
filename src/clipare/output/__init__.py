# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dual-output assembly for normalized tool results."""

from __future__ import annotations

from .policy import DualOutputPolicy, ToolOutput, compact_dual_output, dual_output, error_output, estimate_tokens

__all__ = [
    "DualOutputPolicy",
    "ToolOutput",
    "compact_dual_output",
    "dual_output",
    "error_output",
    "estimate_tokens",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core models and severity vocabulary."""

from __future__ import annotations

from .models import Diagnostic, JsonScalar, JsonValue, RawToolOutput, RecordModel, ToolRecord
from .severity import SEVERITY_ALIASES, Severity, map_severity

__all__ = [
    "SEVERITY_ALIASES",
    "Diagnostic",
    "JsonScalar",
    "JsonValue",
    "RawToolOutput",
    "RecordModel",
    "Severity",
    "ToolRecord",
    "map_severity",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalize developer-tool output into structured records with adaptive compaction."""

from __future__ import annotations

from importlib import metadata

from .core.models import RawToolOutput
from .output.policy import DualOutputPolicy, ToolOutput
from .registry import normalize

__all__ = ["DualOutputPolicy", "RawToolOutput", "ToolOutput", "__version__", "normalize"]

try:
    __version__ = metadata.version("clipare")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""clipare CLI package exports."""

from __future__ import annotations

from typing import Final

from .app import app
from .shared import CLIError

__all__: Final[list[str]] = ["CLIError", "app"]

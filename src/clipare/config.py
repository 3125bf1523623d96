# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for clipare."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import ClipareError


class ConfigError(ClipareError):
    """Raised when configuration input is invalid."""


class OutputConfig(BaseModel):
    """Settings controlling dual output and console rendering."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    compact: bool = True
    chars_per_token: int = Field(default=4, gt=0)
    compact_margin: float = Field(default=1.0, gt=0)
    compact_diagnostic_limit: int = Field(default=10, ge=0)
    color: bool = True
    emoji: bool = True


class Config(BaseModel):
    """Top-level configuration object."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain mapping suitable for layering further sources on top."""
        return self.model_dump(mode="python")


__all__ = ["Config", "ConfigError", "OutputConfig"]

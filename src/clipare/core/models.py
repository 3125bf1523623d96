# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the clipare package."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import TypeAliasType

from .severity import Severity

JsonScalar = TypeAliasType("JsonScalar", str | int | float | bool | None)
JsonValue = TypeAliasType("JsonValue", "JsonScalar | list[JsonValue] | dict[str, JsonValue]")


class RawToolOutput(BaseModel):
    """Captured result of a single external tool invocation."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    duration_ms: float = Field(default=0.0, ge=0)
    timed_out: bool = False

    @field_validator("stdout", "stderr", mode="before")
    @classmethod
    def _coerce_stream(cls, value: object) -> str:
        """Accept ``None`` and line sequences in place of plain text."""
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return "\n".join(str(item) for item in value)
        return str(value)

    @property
    def combined(self) -> str:
        """Return stdout followed by stderr, newline separated."""
        if not self.stderr:
            return self.stdout
        if not self.stdout:
            return self.stderr
        return f"{self.stdout}\n{self.stderr}"

    @property
    def success(self) -> bool:
        """Return ``True`` when the tool exited cleanly and did not time out."""
        return self.exit_code == 0 and not self.timed_out


class RecordModel(BaseModel):
    """Immutable base for canonical and compact records."""

    model_config = ConfigDict(frozen=True)

    def to_json(self) -> dict[str, JsonValue]:
        """Return the JSON-compatible mapping emitted as structured content."""
        return self.model_dump(mode="json", exclude_none=True)


class ToolRecord(RecordModel):
    """Base for canonical records produced by a parser.

    ``LABEL`` is the human-facing tool name used in text renderings.
    """

    LABEL: ClassVar[str] = "tool"


class Diagnostic(RecordModel):
    """Normalized compiler or linter diagnostic."""

    file: str | None = None
    line: int | None = None
    column: int | None = None
    severity: Severity
    code: str | None = None
    message: str

    @property
    def location(self) -> str:
        """Return ``file:line[:column]`` or an empty string for project-level entries."""
        if not self.file:
            return ""
        parts = [self.file]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


__all__ = [
    "Diagnostic",
    "JsonScalar",
    "JsonValue",
    "RawToolOutput",
    "RecordModel",
    "ToolRecord",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records for compiler and build tool diagnostics."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import computed_field

from ..core.models import Diagnostic, RecordModel, ToolRecord
from ..core.severity import Severity


class DiagnosticsResult(ToolRecord):
    """Diagnostics collected from one compiler or build run.

    Counts are derived from ``diagnostics`` on access, so ``total`` always
    equals ``errors + warnings``.
    """

    success: bool
    duration_ms: float | None = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return len(self.diagnostics)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.severity is Severity.ERROR)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warnings(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.severity is Severity.WARNING)


class GoBuildResult(DiagnosticsResult):
    LABEL: ClassVar[str] = "go build"

    kind: Literal["go-build"] = "go-build"


class GoVetResult(DiagnosticsResult):
    LABEL: ClassVar[str] = "go vet"

    kind: Literal["go-vet"] = "go-vet"


class DotnetBuildResult(DiagnosticsResult):
    LABEL: ClassVar[str] = "dotnet build"

    kind: Literal["dotnet-build"] = "dotnet-build"


class TscResult(DiagnosticsResult):
    LABEL: ClassVar[str] = "tsc"

    kind: Literal["tsc"] = "tsc"


class GradleBuildResult(DiagnosticsResult):
    """Gradle build outcome including task counters from the footer."""

    LABEL: ClassVar[str] = "gradle build"

    kind: Literal["gradle-build"] = "gradle-build"
    exit_code: int
    timed_out: bool = False
    tasks_executed: int | None = None
    tasks_failed: int | None = None


class MavenBuildResult(DiagnosticsResult):
    LABEL: ClassVar[str] = "maven build"

    kind: Literal["maven-build"] = "maven-build"
    exit_code: int
    timed_out: bool = False


class DiagnosticRef(RecordModel):
    """Location-only view of a diagnostic kept in compact output."""

    file: str | None = None
    line: int | None = None
    severity: Severity


class DiagnosticsCompact(RecordModel):
    """Compact projection shared by every diagnostics record."""

    kind: str
    label: str
    success: bool
    total: int
    errors: int
    warnings: int
    duration_ms: float | None = None
    timed_out: bool | None = None
    diagnostics: tuple[DiagnosticRef, ...] = ()


__all__ = [
    "DiagnosticRef",
    "DiagnosticsCompact",
    "DiagnosticsResult",
    "DotnetBuildResult",
    "GoBuildResult",
    "GoVetResult",
    "GradleBuildResult",
    "MavenBuildResult",
    "TscResult",
]

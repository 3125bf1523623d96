# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for compiler and build-tool diagnostics.

Each dialect owns an ordered pattern table; lines are matched against the
table top to bottom and the first accepting pattern wins. ``success`` is
always taken from the exit code and timeout flag, never from the text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Final

from ..core.models import Diagnostic
from ..core.severity import Severity, map_severity
from ..records.build import (
    DotnetBuildResult,
    GoBuildResult,
    GoVetResult,
    GradleBuildResult,
    MavenBuildResult,
    TscResult,
)
from .base import LinePattern, RawInput, as_raw, combined_lines, duration_of, parse_lines, to_int


def _optional_int(match: re.Match[str], group: str) -> int | None:
    value = match.groupdict().get(group)
    return int(value) if value else None


def _builder(
    severity: Severity | None = None,
    *,
    file: str | None = None,
    line: int | None = None,
) -> Callable[[re.Match[str]], Diagnostic]:
    """Return a builder reading the standard named groups of a diagnostic regex.

    ``severity`` fixes the severity for dialects without a label; otherwise the
    ``severity`` group is mapped. ``file``/``line`` supply placeholders for
    project-level diagnostics.
    """

    def build(match: re.Match[str]) -> Diagnostic:
        groups = match.groupdict()
        resolved = severity or map_severity(groups.get("severity"))
        return Diagnostic(
            file=(groups.get("file") or "").strip() or file,
            line=_optional_int(match, "line") if line is None else line,
            column=_optional_int(match, "column"),
            severity=resolved,
            code=groups.get("code"),
            message=groups["message"].strip(),
        )

    return build


# -- go ----------------------------------------------------------------------

GO_DIAGNOSTIC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?\.go):(?P<line>\d+)(?::(?P<column>\d+))?: (?P<message>.+)$",
)

GO_BUILD_PATTERNS: Final[tuple[LinePattern[Diagnostic], ...]] = (
    LinePattern("go-position", GO_DIAGNOSTIC_PATTERN, _builder(Severity.ERROR)),
)
GO_VET_PATTERNS: Final[tuple[LinePattern[Diagnostic], ...]] = (
    LinePattern("go-position", GO_DIAGNOSTIC_PATTERN, _builder(Severity.WARNING)),
)


def parse_go_build(raw: RawInput) -> GoBuildResult:
    """Parse ``go build`` output; every positioned line is an error."""

    raw = as_raw(raw)
    diagnostics, _ = parse_lines(combined_lines(raw), GO_BUILD_PATTERNS, family="go-build")
    return GoBuildResult(success=raw.success, duration_ms=duration_of(raw), diagnostics=tuple(diagnostics))


def parse_go_vet(raw: RawInput) -> GoVetResult:
    """Parse ``go vet`` output; findings are reported as warnings."""

    raw = as_raw(raw)
    diagnostics, _ = parse_lines(combined_lines(raw), GO_VET_PATTERNS, family="go-vet")
    return GoVetResult(success=raw.success, duration_ms=duration_of(raw), diagnostics=tuple(diagnostics))


# -- dotnet / MSBuild ----------------------------------------------------------

_MSBUILD_TAIL: Final[str] = r":\s+(?P<severity>error|warning)\s+(?P<code>[A-Z]{1,3}\d+):\s+(?P<message>.+?)(?:\s+\[.+\])?$"

MSBUILD_PATTERNS: Final[tuple[LinePattern[Diagnostic], ...]] = (
    LinePattern(
        "msbuild-line-column",
        re.compile(r"^\s*(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\)" + _MSBUILD_TAIL),
        _builder(),
    ),
    LinePattern(
        "msbuild-line",
        re.compile(r"^\s*(?P<file>.+?)\((?P<line>\d+)\)" + _MSBUILD_TAIL),
        _builder(),
    ),
    LinePattern(
        "msbuild-project",
        re.compile(r"^\s*(?P<severity>error|warning)\s+(?P<code>[A-Z]{1,3}\d+):\s+(?P<message>.+?)(?:\s+\[.+\])?$"),
        _builder(file="(build)", line=0),
    ),
)


def parse_dotnet_build(raw: RawInput) -> DotnetBuildResult:
    """Parse MSBuild diagnostics from ``dotnet build``.

    Accepts the ``file(line,col)`` and ``file(line)`` positions, with or
    without the trailing ``[project]`` suffix, and bare build-level entries
    which are attributed to ``(build)`` line 0.
    """

    raw = as_raw(raw)
    diagnostics, _ = parse_lines(combined_lines(raw), MSBUILD_PATTERNS, family="dotnet-build")
    return DotnetBuildResult(success=raw.success, duration_ms=duration_of(raw), diagnostics=tuple(diagnostics))


# -- tsc -----------------------------------------------------------------------

TSC_PATTERNS: Final[tuple[LinePattern[Diagnostic], ...]] = (
    LinePattern(
        "tsc-parenthesized",
        re.compile(
            r"^(?P<file>.+?)\((?P<line>\d+),(?P<column>\d+)\):\s+(?P<severity>error|warning)\s+"
            r"(?P<code>TS\d+):\s+(?P<message>.+)$",
        ),
        _builder(),
    ),
    LinePattern(
        "tsc-pretty",
        re.compile(
            r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+)\s+-\s+(?P<severity>error|warning)\s+"
            r"(?P<code>TS\d+):\s+(?P<message>.+)$",
        ),
        _builder(),
    ),
)


def parse_tsc(raw: RawInput) -> TscResult:
    """Parse ``tsc`` diagnostics in both the plain and ``--pretty`` layouts."""

    raw = as_raw(raw)
    diagnostics, _ = parse_lines(combined_lines(raw), TSC_PATTERNS, family="tsc")
    return TscResult(success=raw.success, duration_ms=duration_of(raw), diagnostics=tuple(diagnostics))


# -- JVM (javac, kotlinc, maven) -------------------------------------------------

JVM_NOISE_PREFIXES: Final[tuple[str, ...]] = (
    "BUILD FAILURE",
    "BUILD SUCCESS",
    "---",
    "Total time",
    "Finished at",
    "For more information",
    "Re-run Maven",
    "To see the full stack trace",
    "Help 1",
    "-> [Help",
)


def _maven_severity(match: re.Match[str]) -> Severity:
    return Severity.ERROR if match.group("level") == "ERROR" else Severity.WARNING


def _build_maven_located(match: re.Match[str]) -> Diagnostic:
    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(match.group("column")),
        severity=_maven_severity(match),
        message=match.group("message").strip(),
    )


def _build_maven_generic(match: re.Match[str]) -> Diagnostic | None:
    message = match.group("message").strip()
    if not message or message.startswith(JVM_NOISE_PREFIXES):
        return None
    return Diagnostic(severity=_maven_severity(match), message=message)


def _build_kotlin(match: re.Match[str]) -> Diagnostic:
    return Diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=_optional_int(match, "column"),
        severity=Severity.ERROR if match.group("level") == "e" else Severity.WARNING,
        message=match.group("message").strip(),
    )


JVM_PATTERNS: Final[tuple[LinePattern[Diagnostic], ...]] = (
    LinePattern(
        "javac",
        re.compile(r"^(?P<file>.+\.java):(?P<line>\d+):\s*(?P<severity>error|warning):\s*(?P<message>.+)$"),
        _builder(),
    ),
    LinePattern(
        "kotlin",
        re.compile(r"^(?P<level>[ew]):\s*(?P<file>.+\.kts?)\s*:\s*\((?P<line>\d+),\s*(?P<column>\d+)\):\s*(?P<message>.+)$"),
        _build_kotlin,
    ),
    LinePattern(
        "kotlin-uri",
        re.compile(r"^(?P<level>[ew]):\s*(?:file://)?(?P<file>.+\.kts?):(?P<line>\d+):(?P<column>\d+)\s+(?P<message>.+)$"),
        _build_kotlin,
    ),
    LinePattern(
        "maven-located",
        re.compile(
            r"^\[(?P<level>ERROR|WARNING)\]\s*(?P<file>.+\.java):\[(?P<line>\d+),(?P<column>\d+)\]\s*"
            r"(?:(?:error|warning):\s*)?(?P<message>.+)$",
        ),
        _build_maven_located,
    ),
    LinePattern(
        "maven-generic",
        re.compile(r"^\[(?P<level>ERROR|WARNING)\]\s*(?P<message>.*)$"),
        _build_maven_generic,
    ),
)


def parse_jvm_diagnostics(text: str, *, family: str = "jvm") -> tuple[Diagnostic, ...]:
    """Extract javac, kotlinc and Maven diagnostics from ``text``.

    Generic ``[ERROR]``/``[WARNING]`` lines become file-less diagnostics,
    except build-status chatter such as ``BUILD FAILURE`` or ``Total time``.
    """

    diagnostics, _ = parse_lines(text.split("\n"), JVM_PATTERNS, family=family)
    return tuple(diagnostics)


GRADLE_ACTIONABLE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?P<total>\d+)\s+actionable\s+tasks?:\s*(?P<executed>\d+)\s+executed",
)
GRADLE_FAILED_TASK_PATTERN: Final[re.Pattern[str]] = re.compile(r"^> Task \S+ FAILED\s*$", re.MULTILINE)


def parse_gradle_build(raw: RawInput) -> GradleBuildResult:
    """Parse a Gradle build, collecting diagnostics and task counters."""

    raw = as_raw(raw)
    text = "\n".join(combined_lines(raw))
    actionable = GRADLE_ACTIONABLE_PATTERN.search(text)
    tasks_failed: int | None = None
    if not raw.success:
        tasks_failed = len(GRADLE_FAILED_TASK_PATTERN.findall(text)) or None
    return GradleBuildResult(
        success=raw.success,
        exit_code=raw.exit_code,
        timed_out=raw.timed_out,
        duration_ms=duration_of(raw),
        tasks_executed=to_int(actionable.group("executed")) if actionable else None,
        tasks_failed=tasks_failed,
        diagnostics=parse_jvm_diagnostics(text, family="gradle-build"),
    )


def parse_maven_build(raw: RawInput) -> MavenBuildResult:
    raw = as_raw(raw)
    text = "\n".join(combined_lines(raw))
    return MavenBuildResult(
        success=raw.success,
        exit_code=raw.exit_code,
        timed_out=raw.timed_out,
        duration_ms=duration_of(raw),
        diagnostics=parse_jvm_diagnostics(text, family="maven-build"),
    )


__all__ = [
    "GO_BUILD_PATTERNS",
    "GO_VET_PATTERNS",
    "JVM_PATTERNS",
    "MSBUILD_PATTERNS",
    "TSC_PATTERNS",
    "parse_dotnet_build",
    "parse_go_build",
    "parse_go_vet",
    "parse_gradle_build",
    "parse_jvm_diagnostics",
    "parse_maven_build",
    "parse_tsc",
]

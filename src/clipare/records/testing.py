# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records for test-runner output."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import computed_field

from ..core.models import RecordModel, ToolRecord


class TestStatus(StrEnum):
    """Terminal outcome of a single test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class TestCase(RecordModel):
    """Outcome of one test.

    ``elapsed`` is in seconds, as reported by the runner.
    """

    __test__ = False

    name: str
    status: TestStatus
    package: str | None = None
    file: str | None = None
    line: int | None = None
    elapsed: float | None = None
    message: str | None = None

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}/{self.name}"
        return self.name


class TestSummary(RecordModel):
    """Counts stated by the runner's own summary line; unstated counts stay ``None``."""

    __test__ = False

    total: int | None = None
    passed: int | None = None
    failed: int | None = None
    skipped: int | None = None
    errors: int | None = None


class TestRunResult(ToolRecord):
    """Shared shape of every test-runner record.

    A count stated in ``summary`` wins over the number derived from
    ``tests``; counts the summary leaves out are derived by filtering.
    """

    __test__ = False

    success: bool
    duration_ms: float | None = None
    tests: tuple[TestCase, ...] = ()
    summary: TestSummary | None = None

    def _count(self, status: TestStatus) -> int:
        return sum(1 for test in self.tests if test.status is status)

    def _stated(self, name: str) -> int | None:
        if self.summary is None:
            return None
        return getattr(self.summary, name)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> int:
        stated = self._stated("passed")
        return self._count(TestStatus.PASSED) if stated is None else stated

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        stated = self._stated("failed")
        return self._count(TestStatus.FAILED) if stated is None else stated

    @computed_field  # type: ignore[prop-decorator]
    @property
    def skipped(self) -> int:
        stated = self._stated("skipped")
        return self._count(TestStatus.SKIPPED) if stated is None else stated

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> int:
        return self._stated("errors") or 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        stated = self._stated("total")
        if stated is not None:
            return stated
        if self.summary is not None:
            return self.passed + self.failed + self.skipped + self.errors
        return len(self.tests)

    @property
    def failures(self) -> tuple[TestCase, ...]:
        return tuple(test for test in self.tests if test.status is TestStatus.FAILED)


class PackageResult(RecordModel):
    """Package-level verdict taken from events that name no test."""

    package: str
    status: TestStatus
    elapsed: float | None = None


class GoTestResult(TestRunResult):
    LABEL: ClassVar[str] = "go test"

    kind: Literal["go-test"] = "go-test"
    packages: tuple[PackageResult, ...] = ()


class JestResult(TestRunResult):
    LABEL: ClassVar[str] = "jest"

    kind: Literal["jest"] = "jest"
    json_found: bool = True


class PytestResult(TestRunResult):
    LABEL: ClassVar[str] = "pytest"

    kind: Literal["pytest"] = "pytest"


class DotnetTestResult(TestRunResult):
    LABEL: ClassVar[str] = "dotnet test"

    kind: Literal["dotnet-test"] = "dotnet-test"


class TestRunCompact(RecordModel):
    """Compact projection shared by every test-runner record."""

    __test__ = False

    kind: str
    label: str
    success: bool
    total: int
    passed: int
    failed: int
    skipped: int
    errors: int
    duration_ms: float | None = None
    failed_tests: tuple[str, ...] = ()
    json_found: bool | None = None


__all__ = [
    "DotnetTestResult",
    "GoTestResult",
    "JestResult",
    "PackageResult",
    "PytestResult",
    "TestCase",
    "TestRunCompact",
    "TestRunResult",
    "TestStatus",
    "TestSummary",
]

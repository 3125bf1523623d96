# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for test-runner output."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Final

from ..core.models import JsonValue
from ..events import Event, EventStreamReducer
from ..extraction import load_embedded_json, strip_ansi
from ..records.testing import (
    DotnetTestResult,
    GoTestResult,
    JestResult,
    PackageResult,
    PytestResult,
    TestCase,
    TestStatus,
    TestSummary,
)
from .base import ParseStats, RawInput, as_raw, combined_lines, duration_of, log_stats, named_counts, stdout_lines

# -- go test -json -------------------------------------------------------------

GO_TERMINAL_ACTIONS: Final[dict[str, TestStatus]] = {
    "pass": TestStatus.PASSED,
    "fail": TestStatus.FAILED,
    "skip": TestStatus.SKIPPED,
}


def _go_test_key(event: Event) -> tuple[str, str] | None:
    test = event.get("Test")
    if not test:
        return None
    return str(event.get("Package", "")), str(test)


def _is_go_terminal(event: Event) -> bool:
    return event.get("Action") in GO_TERMINAL_ACTIONS


def _elapsed(event: Event) -> float | None:
    value = event.get("Elapsed")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


GO_TEST_REDUCER: Final[EventStreamReducer[tuple[str, str]]] = EventStreamReducer(
    _go_test_key,
    is_terminal=_is_go_terminal,
)


def parse_go_test(raw: RawInput) -> GoTestResult:
    """Parse ``go test -json`` event streams.

    Per-test events are folded by the event reducer: the last terminal event
    (``pass``/``fail``/``skip``) for each ``(package, test)`` wins, so a rerun
    that passes after failing reports ``passed``. Events without a test name
    carry package-level verdicts and are reported separately.
    """

    raw = as_raw(raw)
    reduced = GO_TEST_REDUCER.reduce(stdout_lines(raw))
    tests = tuple(
        TestCase(
            name=str(event["Test"]),
            package=str(event.get("Package", "")) or None,
            status=GO_TERMINAL_ACTIONS[str(event["Action"])],
            elapsed=_elapsed(event),
        )
        for event in reduced.results
    )
    packages: dict[str, PackageResult] = {}
    for event in reduced.unkeyed_events:
        action = event.get("Action")
        package = event.get("Package")
        if action not in GO_TERMINAL_ACTIONS or not package:
            continue
        packages[str(package)] = PackageResult(
            package=str(package),
            status=GO_TERMINAL_ACTIONS[str(action)],
            elapsed=_elapsed(event),
        )
    return GoTestResult(
        success=raw.success,
        duration_ms=duration_of(raw),
        tests=tests,
        packages=tuple(packages.values()),
    )


# -- jest --json ---------------------------------------------------------------

JEST_STATUS: Final[dict[str, TestStatus]] = {
    "passed": TestStatus.PASSED,
    "failed": TestStatus.FAILED,
}
JEST_SUMMARY_FIELDS: Final[dict[str, str]] = {
    "total": "numTotalTests",
    "passed": "numPassedTests",
    "failed": "numFailedTests",
    "skipped": "numPendingTests",
}


def _mapping(value: JsonValue) -> Mapping[str, JsonValue]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: JsonValue) -> Sequence[JsonValue]:
    if isinstance(value, Sequence) and not isinstance(value, str):
        return value
    return ()


def _optional_int(value: JsonValue) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def _jest_case(suite_file: str | None, assertion: Mapping[str, JsonValue]) -> TestCase | None:
    name = assertion.get("fullName") or assertion.get("title")
    if not isinstance(name, str):
        return None
    status = JEST_STATUS.get(str(assertion.get("status")), TestStatus.SKIPPED)
    duration = assertion.get("duration")
    message: str | None = None
    if status is TestStatus.FAILED:
        failures = [str(item) for item in _sequence(assertion.get("failureMessages", []))]
        message = strip_ansi("\n".join(failures)).strip().split("\n")[0] or "Test failed"
    location = _mapping(assertion.get("location"))
    return TestCase(
        name=name,
        status=status,
        file=suite_file,
        line=_optional_int(location.get("line")),
        elapsed=duration / 1000 if isinstance(duration, (int, float)) and not isinstance(duration, bool) else None,
        message=message,
    )


def parse_jest_json(raw: RawInput) -> JestResult:
    """Parse ``jest --json`` output embedded in console noise.

    When no JSON document can be extracted the record reports
    ``json_found=False`` with no tests rather than failing.
    """

    raw = as_raw(raw)
    payload = load_embedded_json(raw.stdout)
    document = _mapping(payload) if payload is not None else {}
    if not document:
        return JestResult(success=raw.success, duration_ms=duration_of(raw), json_found=False)

    tests: list[TestCase] = []
    for suite_value in _sequence(document.get("testResults", [])):
        suite = _mapping(suite_value)
        suite_file = suite.get("name") or suite.get("testFilePath")
        assertions = suite.get("assertionResults") or suite.get("testResults") or []
        for assertion in _sequence(assertions):
            case = _jest_case(suite_file if isinstance(suite_file, str) else None, _mapping(assertion))
            if case is not None:
                tests.append(case)

    summary = TestSummary(
        **{field: _optional_int(document.get(key)) for field, key in JEST_SUMMARY_FIELDS.items()},
    )
    return JestResult(
        success=raw.success,
        duration_ms=duration_of(raw),
        tests=tuple(tests),
        summary=summary,
    )


# -- pytest --------------------------------------------------------------------

PYTEST_RESULT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<nodeid>\S+::\S+)\s+(?P<outcome>PASSED|FAILED|SKIPPED|ERROR|XFAIL|XPASS)\b",
)
PYTEST_SUMMARY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^=+\s+(?P<body>.*?\bin\s+(?P<seconds>[\d.]+)s\b.*?)\s+=+$",
)
PYTEST_SHORT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<outcome>FAILED|ERROR)\s+(?P<nodeid>\S+)(?:\s+-\s+(?P<message>.+))?$",
)
PYTEST_COUNT_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?P<value>\d+)\s+(?P<name>[a-z]+)")
PYTEST_OUTCOMES: Final[dict[str, TestStatus]] = {
    "PASSED": TestStatus.PASSED,
    "XPASS": TestStatus.PASSED,
    "FAILED": TestStatus.FAILED,
    "ERROR": TestStatus.FAILED,
    "SKIPPED": TestStatus.SKIPPED,
    "XFAIL": TestStatus.SKIPPED,
}
PYTEST_COUNT_ALIASES: Final[dict[str, str]] = {"error": "errors"}
# Summary counts folded into the status their result rows are stored under.
PYTEST_FOLDED_COUNTS: Final[dict[str, str]] = {"xfailed": "skipped", "xpassed": "passed"}
SHORT_SUMMARY_MARKER: Final[str] = "short test summary info"


def _split_nodeid(nodeid: str) -> tuple[str, str]:
    file, _, name = nodeid.partition("::")
    return file, name or file


def _pytest_summary(body: str) -> TestSummary:
    counts: dict[str, int] = {}
    for name, value in named_counts(body, PYTEST_COUNT_PATTERN).items():
        counts[PYTEST_COUNT_ALIASES.get(name, name)] = value
    for name, target in PYTEST_FOLDED_COUNTS.items():
        if name in counts:
            counts[target] = counts.get(target, 0) + counts.pop(name)
    return TestSummary(
        passed=counts.get("passed", 0),
        failed=counts.get("failed", 0),
        skipped=counts.get("skipped", 0),
        errors=counts.get("errors", 0),
    )


def parse_pytest(raw: RawInput) -> PytestResult:
    """Parse verbose pytest output with its short summary and final tally.

    The final ``N failed, N passed ... in Xs`` line is read field by field,
    so absent or reordered counts never shift the others. Failure messages
    come from the short test summary section.
    """

    raw = as_raw(raw)
    cases: dict[str, TestCase] = {}
    messages: dict[str, tuple[str, str | None]] = {}
    summary: TestSummary | None = None
    duration_ms = duration_of(raw)
    in_short_summary = False
    stats = ParseStats()
    for line in stdout_lines(raw):
        stripped = line.strip()
        if not stripped:
            continue
        summary_match = PYTEST_SUMMARY_PATTERN.match(stripped)
        if summary_match is not None:
            summary = _pytest_summary(summary_match.group("body"))
            duration_ms = float(summary_match.group("seconds")) * 1000
            in_short_summary = False
            stats.matched += 1
            continue
        if SHORT_SUMMARY_MARKER in stripped:
            in_short_summary = True
            continue
        if in_short_summary:
            short = PYTEST_SHORT_PATTERN.match(stripped)
            if short is not None:
                messages[short.group("nodeid")] = (short.group("outcome"), short.group("message"))
                stats.matched += 1
            continue
        result = PYTEST_RESULT_PATTERN.match(stripped)
        if result is None:
            stats.dropped += 1
            continue
        stats.matched += 1
        nodeid = result.group("nodeid")
        file, name = _split_nodeid(nodeid)
        cases[nodeid] = TestCase(name=name, file=file, status=PYTEST_OUTCOMES[result.group("outcome")])
    log_stats("pytest", stats)

    for nodeid, (outcome, message) in messages.items():
        file, name = _split_nodeid(nodeid)
        existing = cases.get(nodeid)
        if existing is None:
            cases[nodeid] = TestCase(name=name, file=file, status=PYTEST_OUTCOMES[outcome], message=message)
        else:
            cases[nodeid] = existing.model_copy(update={"message": message})
    return PytestResult(
        success=raw.success,
        duration_ms=duration_ms,
        tests=tuple(cases.values()),
        summary=summary,
    )


# -- dotnet test ---------------------------------------------------------------

# Result rows are indented; "Failed to ..." is a host or build error, not a test.
DOTNET_RESULT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s+(?P<status>Passed|Failed|Skipped)\s+(?!to\b)(?P<name>[^\s\[].*?)(?:\s+\[(?P<duration>[^\]]+)\])?\s*$",
)
DOTNET_SUMMARY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\b(?P<name>Total|Passed|Failed|Skipped)(?: tests)?:\s*(?P<value>\d+)",
)
DOTNET_MESSAGE_HEADER: Final[re.Pattern[str]] = re.compile(r"^\s{2,}(?:Error Message|Message):\s*$")
DOTNET_MESSAGE_BODY: Final[re.Pattern[str]] = re.compile(r"^\s{3,}(?P<text>.+)$")
DOTNET_DURATION: Final[re.Pattern[str]] = re.compile(r"(?P<value>[\d.]+)\s*(?P<unit>ms|s|m)\b")
DOTNET_STATUS: Final[dict[str, TestStatus]] = {
    "Passed": TestStatus.PASSED,
    "Failed": TestStatus.FAILED,
    "Skipped": TestStatus.SKIPPED,
}
DOTNET_UNIT_SECONDS: Final[dict[str, float]] = {"ms": 0.001, "s": 1.0, "m": 60.0}
DOTNET_MESSAGE_LOOKAHEAD: Final[int] = 20
DOTNET_MESSAGE_MAX_LINES: Final[int] = 10


def _dotnet_seconds(text: str | None) -> float | None:
    if not text:
        return None
    match = DOTNET_DURATION.search(text)
    if match is None:
        return None
    return float(match.group("value")) * DOTNET_UNIT_SECONDS[match.group("unit")]


def _dotnet_failure_message(lines: list[str], start: int) -> str | None:
    """Collect the indented ``Error Message:`` block following a failed test."""

    for index in range(start, min(len(lines), start + DOTNET_MESSAGE_LOOKAHEAD)):
        if DOTNET_RESULT_PATTERN.match(lines[index]):
            return None
        if not DOTNET_MESSAGE_HEADER.match(lines[index]):
            continue
        body: list[str] = []
        for follow in lines[index + 1 : index + 1 + DOTNET_MESSAGE_MAX_LINES]:
            content = DOTNET_MESSAGE_BODY.match(follow)
            if content is None:
                break
            body.append(content.group("text"))
        return "\n".join(body) or None
    return None


def parse_dotnet_test(raw: RawInput) -> DotnetTestResult:
    """Parse ``dotnet test`` console output.

    Counts stated by the summary line (either the ``Total: N, Passed: N``
    layout or the older ``Total tests: N`` block) override the counts derived
    from per-test lines, but only for the fields the summary states.
    """

    raw = as_raw(raw)
    lines = combined_lines(raw)
    tests: list[TestCase] = []
    stated: dict[str, int] = {}
    stats = ParseStats()
    for index, line in enumerate(lines):
        if not line.strip():
            continue
        result = DOTNET_RESULT_PATTERN.match(line)
        if result is not None:
            status = DOTNET_STATUS[result.group("status")]
            message = _dotnet_failure_message(lines, index + 1) if status is TestStatus.FAILED else None
            tests.append(
                TestCase(
                    name=result.group("name").strip(),
                    status=status,
                    elapsed=_dotnet_seconds(result.group("duration")),
                    message=message,
                ),
            )
            stats.matched += 1
            continue
        fields = named_counts(line, DOTNET_SUMMARY_PATTERN)
        if fields:
            stated.update(fields)
            stats.matched += 1
            continue
        stats.dropped += 1
    log_stats("dotnet-test", stats)
    summary = TestSummary(**stated) if stated else None
    return DotnetTestResult(
        success=raw.success,
        duration_ms=duration_of(raw),
        tests=tuple(tests),
        summary=summary,
    )


__all__ = ["parse_dotnet_test", "parse_go_test", "parse_jest_json", "parse_pytest"]

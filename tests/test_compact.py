# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for compact projections and their text renderings."""

from __future__ import annotations

from clipare.core.models import Diagnostic
from clipare.core.severity import Severity
from clipare.parsers import parse_blame, parse_git_status, parse_log_graph
from clipare.records.build import DotnetBuildResult, GradleBuildResult
from clipare.records.deps import MavenDependenciesResult, MavenDependency
from clipare.records.infra import AnsiblePlaybookResult, HostRecap
from clipare.records.testing import GoTestResult, TestCase, TestStatus
from clipare.reporting import DEFAULT_COMPACT_LIMIT, compact_record, format_compact


def _diagnostics(count: int) -> tuple[Diagnostic, ...]:
    return tuple(
        Diagnostic(file=f"src/F{index}.cs", line=index + 1, severity=Severity.ERROR, message="boom " * 10)
        for index in range(count)
    )


def test_diagnostics_compact_caps_list_and_keeps_counts() -> None:
    record = DotnetBuildResult(success=False, diagnostics=_diagnostics(15))

    compact = compact_record(record)

    assert compact.total == 15
    assert compact.errors == 15
    assert len(compact.diagnostics) == DEFAULT_COMPACT_LIMIT
    assert compact.timed_out is None
    assert "message" not in compact.diagnostics[0].to_json()
    lines = format_compact(compact).split("\n")
    assert lines[0] == "dotnet build: failed (15 errors, 0 warnings)"
    assert lines[1] == "  src/F0.cs:1 error"
    assert lines[-1] == "  ... 5 more"


def test_diagnostics_compact_respects_custom_limit() -> None:
    record = DotnetBuildResult(success=False, diagnostics=_diagnostics(4))

    compact = compact_record(record, limit=2)

    assert [ref.file for ref in compact.diagnostics] == ["src/F0.cs", "src/F1.cs"]
    assert format_compact(compact).endswith("  ... 2 more")


def test_jvm_compact_keeps_timeout_flag() -> None:
    record = GradleBuildResult(success=False, exit_code=124, timed_out=True, duration_ms=5000.0)

    compact = compact_record(record)

    assert compact.timed_out is True
    assert format_compact(compact) == "gradle build: TIMED OUT after 5000ms (0 errors, 0 warnings)"


def test_test_run_compact_lists_failed_names() -> None:
    record = GoTestResult(
        success=False,
        tests=(
            TestCase(name="TestOk", package="p", status=TestStatus.PASSED),
            TestCase(name="TestBad", package="p", status=TestStatus.FAILED, message="expected 1"),
        ),
    )

    compact = compact_record(record)

    assert compact.failed_tests == ("p/TestBad",)
    assert (compact.passed, compact.failed, compact.total) == (1, 1, 2)
    assert format_compact(compact) == "go test: failed: 1 passed, 1 failed, 0 skipped (2 total)\n  FAIL p/TestBad"


def test_git_status_compact_counts() -> None:
    record = parse_git_status("## main\nM  a.py\n M b.py\n?? c.txt\n?? d.txt\n")

    compact = compact_record(record)

    assert (compact.staged, compact.modified, compact.untracked) == (1, 1, 2)
    assert format_compact(compact) == (
        "git status: main, 1 staged, 1 modified, 0 deleted, 2 untracked, 0 conflicts"
    )
    assert format_compact(compact_record(parse_git_status("## main\n"))) == "git status: main, clean"


def test_log_graph_compact_drops_topology_rows() -> None:
    record = parse_log_graph("* abc1234 (HEAD -> main) Merge\n|\\  \n| * def5678 Side\n|/  \n")

    compact = compact_record(record)

    assert compact.total == 2
    assert [entry.h for entry in compact.commits] == ["abc1234", "def5678"]
    assert compact.commits[0].r == "HEAD -> main"
    assert format_compact(compact).split("\n")[1:] == ["* abc1234 Merge", "| * def5678 Side"]


def test_blame_compact_reports_line_counts(blame_porcelain: str) -> None:
    compact = compact_record(parse_blame(blame_porcelain))

    assert [(commit.author, commit.lines) for commit in compact.commits] == [("Alice", 2), ("Bob", 1)]
    assert format_compact(compact).split("\n")[0] == "git blame main.go: 3 lines"


def test_dependency_and_playbook_summaries() -> None:
    maven = MavenDependenciesResult(
        dependencies=(
            MavenDependency(group_id="g", artifact_id="a", version="1", depth=0),
            MavenDependency(group_id="g", artifact_id="b", version="2", depth=1),
        ),
    )
    playbook = AnsiblePlaybookResult(
        success=False,
        exit_code=2,
        recap=(HostRecap(host="a", changed=2), HostRecap(host="b", failed=1, unreachable=1)),
    )

    assert format_compact(compact_record(maven)) == "maven: 2 dependencies (1 direct)"
    assert format_compact(compact_record(playbook)) == (
        "ansible-playbook: failed, 2 host(s), 2 changed, 1 failed, 1 unreachable"
    )


def test_compact_json_is_smaller_than_full_json() -> None:
    record = DotnetBuildResult(success=False, diagnostics=_diagnostics(30))

    compact = compact_record(record)

    assert len(compact.model_dump_json()) < len(record.model_dump_json())

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the full text renderings of canonical records."""

from __future__ import annotations

import pytest

from clipare.core.models import Diagnostic
from clipare.core.severity import Severity
from clipare.parsers import parse_blame, parse_diff_numstat, parse_go_build, parse_go_test, parse_log_graph
from clipare.records.build import DotnetBuildResult, GoBuildResult, GoVetResult, GradleBuildResult, MavenBuildResult
from clipare.records.deps import GradleDependenciesResult, MavenDependenciesResult
from clipare.records.infra import AnsiblePlaybookResult, HostRecap, PlaybookMode
from clipare.records.testing import JestResult, PytestResult, TestCase, TestStatus
from clipare.records.vcs import FileStatus, GitBranchResult, GitDiffResult, GitLogResult, GitStatusResult, StagedFile
from clipare.reporting import format_diagnostic, format_record


def test_go_build_failure_text(make_raw) -> None:
    record = parse_go_build(make_raw(stderr="main.go:10:5: undefined: foo", exit_code=2))

    assert format_record(record) == "go build: failed (1 errors, 0 warnings)\n  main.go:10:5 error: undefined: foo"


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        (GoBuildResult(success=True), "go build: no errors found."),
        (GoVetResult(success=True), "go vet: no issues found."),
        (DotnetBuildResult(success=True), "dotnet build: success, no diagnostics."),
        (GitLogResult(), "git log: no commits found."),
        (GitDiffResult(), "git diff: no changes."),
        (GitBranchResult(), "git branch: no branches found."),
        (GradleDependenciesResult(), "gradle: no dependencies found."),
        (MavenDependenciesResult(), "maven: no dependencies found."),
        (JestResult(success=True, json_found=False), "jest: no JSON report found."),
        (PytestResult(success=True), "pytest: no tests found."),
    ],
)
def test_empty_records_render_single_sentence(record, expected: str) -> None:
    assert format_record(record) == expected


def test_empty_graph_and_blame_sentences() -> None:
    assert format_record(parse_log_graph("")) == "git log --graph: no commits found."
    assert format_record(parse_blame("", file="main.go")) == "git blame main.go: no lines found."


def test_diagnostic_with_code_and_without_location() -> None:
    with_code = Diagnostic(file="src/A.cs", line=12, column=17, severity=Severity.ERROR, code="CS0103", message="nope")
    project_level = Diagnostic(severity=Severity.WARNING, message="restore skipped")

    assert format_diagnostic(with_code) == "src/A.cs:12:17 error CS0103: nope"
    assert format_diagnostic(project_level) == "warning: restore skipped"


def test_jvm_build_headers() -> None:
    gradle = GradleBuildResult(success=True, exit_code=0, duration_ms=1200.0, tasks_executed=5)
    maven = MavenBuildResult(success=False, exit_code=124, timed_out=True, duration_ms=60000.0)
    failed = MavenBuildResult(
        success=False,
        exit_code=1,
        diagnostics=(Diagnostic(file="App.java", line=3, severity=Severity.ERROR, message="cannot find symbol"),),
    )

    assert format_record(gradle) == "gradle build: success (1200ms).\n  tasks executed: 5"
    assert format_record(maven) == "maven build: TIMED OUT after 60000ms (exit code 124)."
    assert format_record(failed) == "maven build: exit code 1.\n  error: cannot find symbol (App.java:3)"


def test_go_test_run_lists_packages_and_tests(go_test_rerun_events: str) -> None:
    text = format_record(parse_go_test(go_test_rerun_events))

    assert text.split("\n") == [
        "go test: passed: 1 passed, 0 failed, 0 skipped (1 total)",
        "  package example.com/pkg: passed (0.5s)",
        "  passed  example.com/pkg/TestX (0.02s)",
    ]


def test_failed_test_message_is_indented() -> None:
    record = PytestResult(
        success=False,
        duration_ms=340.0,
        tests=(TestCase(name="test_a", status=TestStatus.FAILED, message="assert 1 == 2\nwhere 1 = f()"),),
    )

    assert format_record(record).split("\n") == [
        "pytest: failed: 0 passed, 1 failed, 0 skipped (1 total) (340ms)",
        "  failed  test_a",
        "    assert 1 == 2",
        "    where 1 = f()",
    ]


def test_git_status_clean_and_dirty() -> None:
    clean = GitStatusResult(branch="main", upstream="origin/main", ahead=2)
    dirty = GitStatusResult(
        branch="dev",
        staged=(StagedFile(file="new.py", status=FileStatus.RENAMED, old_file="old.py"),),
        untracked=("notes.txt",),
    )

    assert format_record(clean) == "git status: main -> origin/main [ahead 2], working tree clean."
    assert format_record(dirty) == "git status: dev\n  staged renamed: old.py -> new.py\n  untracked: notes.txt"


def test_diff_and_blame_headers(blame_porcelain: str) -> None:
    diff = parse_diff_numstat("3\t1\ta.py\n-\t-\tlogo.png\n")
    blame = parse_blame(blame_porcelain)

    assert format_record(diff).split("\n")[0] == "git diff: 2 files changed, +3 -1"
    assert "(binary)" in format_record(diff)
    assert format_record(blame).split("\n")[0] == "git blame main.go: 3 lines from 2 commits"


def test_ansible_modes_render_differently() -> None:
    run = AnsiblePlaybookResult(
        success=True,
        exit_code=0,
        plays=("web",),
        recap=(HostRecap(host="web1", ok=2, changed=1),),
    )
    syntax = AnsiblePlaybookResult(mode=PlaybookMode.SYNTAX_CHECK, success=False, exit_code=4, error="bad yaml")

    assert format_record(run).split("\n") == [
        "ansible-playbook: success",
        "  PLAY: web",
        "  PLAY RECAP:",
        "    web1: ok=2 changed=1 unreachable=0 failed=0 skipped=0 rescued=0 ignored=0",
    ]
    assert format_record(syntax) == "ansible-playbook --syntax-check: FAILED\nerror: bad yaml"


def test_formatting_is_deterministic(blame_porcelain: str) -> None:
    first = format_record(parse_blame(blame_porcelain))
    second = format_record(parse_blame(blame_porcelain))

    assert first == second


def test_unregistered_record_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        format_record(Diagnostic(severity=Severity.ERROR, message="x"))

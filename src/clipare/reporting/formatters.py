# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic text renderings of canonical records.

Every formatter emits one header line followed by indented detail lines, or
a single stable sentence when there is nothing to report. The single-line
fallbacks are part of the output contract and must not change casually.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Final

from ..core.models import Diagnostic, ToolRecord
from ..records.build import DiagnosticsResult, GradleBuildResult, MavenBuildResult
from ..records.deps import GradleDependenciesResult, MavenDependenciesResult
from ..records.infra import AnsiblePlaybookResult, HostRecap, PlaybookMode
from ..records.testing import GoTestResult, JestResult, TestCase, TestRunResult
from ..records.vcs import (
    GitBlameResult,
    GitBranchResult,
    GitDiffResult,
    GitLogGraphResult,
    GitLogResult,
    GitStatusResult,
)

INDENT: Final[str] = "  "
DEFAULT_EMPTY_DIAGNOSTICS: Final[str] = "no errors found."
EMPTY_DIAGNOSTICS: Final[dict[str, str]] = {
    "go-vet": "no issues found.",
    "dotnet-build": "success, no diagnostics.",
}
NO_COMMITS: Final[str] = "git log: no commits found."
NO_GRAPH_COMMITS: Final[str] = "git log --graph: no commits found."
NO_CHANGES: Final[str] = "git diff: no changes."
NO_BRANCHES: Final[str] = "git branch: no branches found."
NO_GRADLE_DEPENDENCIES: Final[str] = "gradle: no dependencies found."
NO_MAVEN_DEPENDENCIES: Final[str] = "maven: no dependencies found."


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def format_duration_ms(duration_ms: float | None) -> str:
    """Return ``" (Nms)"`` or an empty string when no duration was measured."""

    if duration_ms is None:
        return ""
    return f" ({duration_ms:.0f}ms)"


def format_seconds(elapsed: float | None) -> str:
    if elapsed is None:
        return ""
    return f" ({elapsed:g}s)"


# -- diagnostics -----------------------------------------------------------------


def empty_diagnostics_text(label: str, kind: str) -> str:
    return f"{label}: {EMPTY_DIAGNOSTICS.get(kind, DEFAULT_EMPTY_DIAGNOSTICS)}"


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render ``file:line:col severity CODE: message`` without empty parts."""

    code = f" {diagnostic.code}" if diagnostic.code else ""
    location = f"{diagnostic.location} " if diagnostic.location else ""
    return f"{location}{diagnostic.severity.value}{code}: {diagnostic.message}"


def format_diagnostics(record: DiagnosticsResult) -> str:
    """Format a compiler diagnostics record.

    Example:
        ``go build: failed (1 errors, 0 warnings)`` followed by
        ``  main.go:10:5 error: undefined: foo``.
    """

    if record.success and not record.diagnostics:
        return empty_diagnostics_text(record.LABEL, str(getattr(record, "kind", "")))
    status = "success" if record.success else "failed"
    lines = [f"{record.LABEL}: {status} ({record.errors} errors, {record.warnings} warnings)"]
    lines.extend(f"{INDENT}{format_diagnostic(diagnostic)}" for diagnostic in record.diagnostics)
    return join_lines(lines)


def jvm_build_header(record: GradleBuildResult | MavenBuildResult) -> str:
    duration = record.duration_ms or 0
    if record.timed_out:
        return f"{record.LABEL}: TIMED OUT after {duration:.0f}ms (exit code {record.exit_code})."
    if record.success:
        return f"{record.LABEL}: success{format_duration_ms(record.duration_ms)}."
    return f"{record.LABEL}: exit code {record.exit_code}{format_duration_ms(record.duration_ms)}."


def _format_jvm_diagnostic(diagnostic: Diagnostic) -> str:
    location = f" ({diagnostic.location})" if diagnostic.location else ""
    return f"{INDENT}{diagnostic.severity.value}: {diagnostic.message}{location}"


def format_jvm_build(record: GradleBuildResult | MavenBuildResult) -> str:
    """Format Gradle or Maven build results with task counters and diagnostics."""

    lines = [jvm_build_header(record)]
    if isinstance(record, GradleBuildResult):
        if record.tasks_executed is not None:
            lines.append(f"{INDENT}tasks executed: {record.tasks_executed}")
        if record.tasks_failed is not None:
            lines.append(f"{INDENT}tasks failed: {record.tasks_failed}")
    lines.extend(_format_jvm_diagnostic(diagnostic) for diagnostic in record.diagnostics)
    return join_lines(lines)


# -- tests -------------------------------------------------------------------------


def run_header(record: TestRunResult) -> str:
    status = "passed" if record.success else "failed"
    errors = f", {record.errors} errors" if record.errors else ""
    return (
        f"{record.LABEL}: {status}: {record.passed} passed, {record.failed} failed, "
        f"{record.skipped} skipped{errors} ({record.total} total){format_duration_ms(record.duration_ms)}"
    )


def empty_run_text(label: str, *, json_found: bool = True) -> str:
    if not json_found:
        return f"{label}: no JSON report found."
    return f"{label}: no tests found."


def _format_test_case(test: TestCase) -> list[str]:
    lines = [f"{INDENT}{test.status.value:<7} {test.qualified_name}{format_seconds(test.elapsed)}"]
    if test.message:
        lines.extend(f"{INDENT * 2}{line}" for line in test.message.split("\n"))
    return lines


def format_test_run(record: TestRunResult) -> str:
    """Format a test run: summary header, one line per test, failure messages."""

    if record.total == 0 and not record.tests:
        if record.success:
            json_found = record.json_found if isinstance(record, JestResult) else True
            return empty_run_text(record.LABEL, json_found=json_found)
        return run_header(record)
    lines = [run_header(record)]
    if isinstance(record, GoTestResult):
        lines.extend(
            f"{INDENT}package {package.package}: {package.status.value}{format_seconds(package.elapsed)}"
            for package in record.packages
        )
    for test in record.tests:
        lines.extend(_format_test_case(test))
    return join_lines(lines)


# -- vcs ---------------------------------------------------------------------------


def status_tracking(record: GitStatusResult) -> str:
    if not record.upstream:
        return ""
    counters = [
        f"{label} {value}" for label, value in (("ahead", record.ahead), ("behind", record.behind)) if value
    ]
    suffix = f" [{', '.join(counters)}]" if counters else ""
    return f" -> {record.upstream}{suffix}"


def format_git_status(record: GitStatusResult) -> str:
    branch = record.branch or "(unknown)"
    if record.clean:
        return f"git status: {branch}{status_tracking(record)}, working tree clean."
    lines = [f"git status: {branch}{status_tracking(record)}"]
    for staged in record.staged:
        path = f"{staged.old_file} -> {staged.file}" if staged.old_file else staged.file
        lines.append(f"{INDENT}staged {staged.status.value}: {path}")
    lines.extend(f"{INDENT}modified: {path}" for path in record.modified)
    lines.extend(f"{INDENT}deleted: {path}" for path in record.deleted)
    lines.extend(f"{INDENT}untracked: {path}" for path in record.untracked)
    lines.extend(f"{INDENT}conflict: {path}" for path in record.conflicts)
    return join_lines(lines)


def format_git_log(record: GitLogResult) -> str:
    if not record.commits:
        return NO_COMMITS
    lines = [f"git log: {record.total} commits"]
    for commit in record.commits:
        refs = f" ({commit.refs})" if commit.refs else ""
        lines.append(f"{INDENT}{commit.hash_short}{refs} {commit.message} [{commit.author}, {commit.date}]")
    return join_lines(lines)


def format_log_graph(record: GitLogGraphResult) -> str:
    """Format a log graph; entries are printed unindented to keep the drawing aligned."""

    if record.total == 0:
        return NO_GRAPH_COMMITS
    lines = [f"git log --graph: {record.total} commits"]
    for entry in record.entries:
        if not entry.is_commit:
            lines.append(entry.graph)
            continue
        refs = f" ({entry.refs})" if entry.refs else ""
        message = f" {entry.message}" if entry.message else ""
        lines.append(f"{entry.graph} {entry.hash_short}{refs}{message}")
    return join_lines(lines)


def empty_blame_text(file: str | None) -> str:
    target = f" {file}" if file else ""
    return f"git blame{target}: no lines found."


def format_blame(record: GitBlameResult) -> str:
    if not record.commits:
        return empty_blame_text(record.file)
    target = f" {record.file}" if record.file else ""
    lines = [f"git blame{target}: {record.total_lines} lines from {len(record.commits)} commits"]
    for commit in record.commits:
        summary = f" - {commit.summary}" if commit.summary else ""
        lines.append(f"{INDENT}{commit.commit_id} {commit.author} {commit.date}{summary}")
        lines.extend(f"{INDENT * 2}{line.line_number}: {line.content}" for line in commit.lines)
    return join_lines(lines)


def format_diff(record: GitDiffResult) -> str:
    if not record.files:
        return NO_CHANGES
    lines = [
        f"git diff: {record.total_files} files changed, +{record.total_additions} -{record.total_deletions}",
    ]
    for entry in record.files:
        path = f"{entry.old_file} -> {entry.file}" if entry.old_file else entry.file
        counts = "binary" if entry.binary else f"+{entry.additions} -{entry.deletions}"
        lines.append(f"{INDENT}{entry.status.value:<8} {path} ({counts})")
    return join_lines(lines)


def format_git_branch(record: GitBranchResult) -> str:
    if not record.branches:
        return NO_BRANCHES
    current = f", current {record.current}" if record.current else ""
    lines = [f"git branch: {len(record.branches)} branches{current}"]
    lines.extend(f"{INDENT}{'* ' if branch.current else '  '}{branch.name}" for branch in record.branches)
    return join_lines(lines)


# -- dependencies --------------------------------------------------------------


def format_gradle_dependencies(record: GradleDependenciesResult) -> str:
    if record.total_dependencies == 0:
        return NO_GRADLE_DEPENDENCIES
    lines = [f"gradle: {record.total_dependencies} dependencies"]
    for configuration in record.configurations:
        lines.append(f"{configuration.configuration}:")
        lines.extend(
            f"{INDENT}{INDENT * dependency.depth}{dependency.coordinate}" for dependency in configuration.dependencies
        )
    return join_lines(lines)


def format_maven_dependencies(record: MavenDependenciesResult) -> str:
    if record.total == 0:
        return NO_MAVEN_DEPENDENCIES
    lines = [f"maven: {record.total} dependencies"]
    for dependency in record.dependencies:
        scope = f" ({dependency.scope})" if dependency.scope else ""
        lines.append(
            f"{INDENT}{INDENT * dependency.depth}{dependency.group_id}:{dependency.artifact_id}:"
            f"{dependency.version}{scope}",
        )
    return join_lines(lines)


# -- ansible -------------------------------------------------------------------


def format_recap_row(row: HostRecap) -> str:
    return (
        f"{row.host}: ok={row.ok} changed={row.changed} unreachable={row.unreachable} failed={row.failed} "
        f"skipped={row.skipped} rescued={row.rescued} ignored={row.ignored}"
    )


def format_ansible_playbook(record: AnsiblePlaybookResult) -> str:
    """Format playbook output according to the invocation mode."""

    label = record.LABEL
    lines: list[str]
    if record.mode is PlaybookMode.SYNTAX_CHECK:
        lines = [f"{label} --syntax-check: {'OK' if record.success else 'FAILED'}"]
    elif record.mode is PlaybookMode.LIST_TASKS:
        lines = [f"{label} --list-tasks:"]
        lines.extend(f"{INDENT}{task}" for task in record.task_list)
    elif record.mode is PlaybookMode.LIST_TAGS:
        lines = [f"{label} --list-tags:"]
        lines.extend(f"{INDENT}{tag}" for tag in record.tag_list)
    else:
        lines = [f"{label}: {'success' if record.success else 'failed'}"]
        lines.extend(f"{INDENT}PLAY: {play}" for play in record.plays)
        if record.recap:
            lines.append(f"{INDENT}PLAY RECAP:")
            lines.extend(f"{INDENT * 2}{format_recap_row(row)}" for row in record.recap)
        if record.duration:
            lines.append(f"{INDENT}duration: {record.duration}")
    if record.error:
        lines.append(f"error: {record.error}")
    return join_lines(lines)


# -- dispatch ------------------------------------------------------------------


@singledispatch
def format_record(record: ToolRecord) -> str:
    """Render any canonical record using the formatter registered for its type."""

    raise TypeError(f"no formatter registered for {type(record).__name__}")


format_record.register(DiagnosticsResult, format_diagnostics)
format_record.register(GradleBuildResult, format_jvm_build)
format_record.register(MavenBuildResult, format_jvm_build)
format_record.register(TestRunResult, format_test_run)
format_record.register(GitStatusResult, format_git_status)
format_record.register(GitLogResult, format_git_log)
format_record.register(GitLogGraphResult, format_log_graph)
format_record.register(GitBlameResult, format_blame)
format_record.register(GitDiffResult, format_diff)
format_record.register(GitBranchResult, format_git_branch)
format_record.register(GradleDependenciesResult, format_gradle_dependencies)
format_record.register(MavenDependenciesResult, format_maven_dependencies)
format_record.register(AnsiblePlaybookResult, format_ansible_playbook)


__all__ = [
    "format_ansible_playbook",
    "format_blame",
    "format_diagnostic",
    "format_diagnostics",
    "format_diff",
    "format_git_branch",
    "format_git_log",
    "format_git_status",
    "format_gradle_dependencies",
    "format_jvm_build",
    "format_log_graph",
    "format_maven_dependencies",
    "format_record",
    "format_test_run",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compact projections of canonical records and their text renderings.

A compact record keeps the counters and identifiers of its source record and
drops bulky detail such as messages, file contents and line payloads. Lists
that survive are capped at ``limit`` entries.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Final

from ..core.models import RecordModel, ToolRecord
from ..records.build import DiagnosticRef, DiagnosticsCompact, DiagnosticsResult, GradleBuildResult, MavenBuildResult
from ..records.deps import (
    GradleDependenciesCompact,
    GradleDependenciesResult,
    MavenDependenciesCompact,
    MavenDependenciesResult,
)
from ..records.infra import AnsiblePlaybookCompact, AnsiblePlaybookResult
from ..records.testing import JestResult, TestRunCompact, TestRunResult
from ..records.vcs import (
    BlameCommitCompact,
    CommitRef,
    GitBlameCompact,
    GitBlameResult,
    GitBranchCompact,
    GitBranchResult,
    GitDiffCompact,
    GitDiffResult,
    GitLogCompact,
    GitLogGraphCompact,
    GitLogGraphResult,
    GitLogResult,
    GitStatusCompact,
    GitStatusResult,
    GraphEntryCompact,
)
from .formatters import (
    INDENT,
    NO_BRANCHES,
    NO_CHANGES,
    NO_COMMITS,
    NO_GRADLE_DEPENDENCIES,
    NO_GRAPH_COMMITS,
    NO_MAVEN_DEPENDENCIES,
    empty_blame_text,
    empty_diagnostics_text,
    empty_run_text,
    join_lines,
)

DEFAULT_COMPACT_LIMIT: Final[int] = 10


# -- mappers -------------------------------------------------------------------


def compact_diagnostics(record: DiagnosticsResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> DiagnosticsCompact:
    """Keep counters and the first ``limit`` diagnostic locations."""

    timed_out = record.timed_out if isinstance(record, (GradleBuildResult, MavenBuildResult)) else None
    return DiagnosticsCompact(
        kind=str(getattr(record, "kind", "")),
        label=record.LABEL,
        success=record.success,
        total=record.total,
        errors=record.errors,
        warnings=record.warnings,
        duration_ms=record.duration_ms,
        timed_out=timed_out,
        diagnostics=tuple(
            DiagnosticRef(file=diagnostic.file, line=diagnostic.line, severity=diagnostic.severity)
            for diagnostic in record.diagnostics[:limit]
        ),
    )


def compact_test_run(record: TestRunResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> TestRunCompact:
    return TestRunCompact(
        kind=str(getattr(record, "kind", "")),
        label=record.LABEL,
        success=record.success,
        total=record.total,
        passed=record.passed,
        failed=record.failed,
        skipped=record.skipped,
        errors=record.errors,
        duration_ms=record.duration_ms,
        failed_tests=tuple(test.qualified_name for test in record.failures[:limit]),
        json_found=record.json_found if isinstance(record, JestResult) else None,
    )


def compact_git_status(record: GitStatusResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitStatusCompact:
    del limit
    return GitStatusCompact(
        branch=record.branch,
        clean=record.clean,
        staged=len(record.staged),
        modified=len(record.modified),
        deleted=len(record.deleted),
        untracked=len(record.untracked),
        conflicts=len(record.conflicts),
    )


def compact_git_log(record: GitLogResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitLogCompact:
    return GitLogCompact(
        total=record.total,
        commits=tuple(
            CommitRef(hash_short=commit.hash_short, message=commit.message) for commit in record.commits[:limit]
        ),
    )


def compact_log_graph(record: GitLogGraphResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitLogGraphCompact:
    """Drop topology-only rows and keep the first ``limit`` commits in short form."""

    commits = [entry for entry in record.entries if entry.is_commit][:limit]
    return GitLogGraphCompact(
        total=record.total,
        commits=tuple(
            GraphEntryCompact(g=entry.graph, h=entry.hash_short or "", m=entry.message or "", r=entry.refs)
            for entry in commits
        ),
    )


def compact_blame(record: GitBlameResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitBlameCompact:
    return GitBlameCompact(
        file=record.file,
        total_lines=record.total_lines,
        commits=tuple(
            BlameCommitCompact(commit_id=commit.commit_id, author=commit.author, lines=len(commit.lines))
            for commit in record.commits[:limit]
        ),
    )


def compact_diff(record: GitDiffResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitDiffCompact:
    del limit
    return GitDiffCompact(
        total_files=record.total_files,
        total_additions=record.total_additions,
        total_deletions=record.total_deletions,
    )


def compact_git_branch(record: GitBranchResult, *, limit: int = DEFAULT_COMPACT_LIMIT) -> GitBranchCompact:
    del limit
    return GitBranchCompact(current=record.current, total=len(record.branches))


def compact_gradle_dependencies(
    record: GradleDependenciesResult,
    *,
    limit: int = DEFAULT_COMPACT_LIMIT,
) -> GradleDependenciesCompact:
    del limit
    return GradleDependenciesCompact(
        total_dependencies=record.total_dependencies,
        configuration_count=len(record.configurations),
    )


def compact_maven_dependencies(
    record: MavenDependenciesResult,
    *,
    limit: int = DEFAULT_COMPACT_LIMIT,
) -> MavenDependenciesCompact:
    del limit
    return MavenDependenciesCompact(
        total=record.total,
        direct=sum(1 for dependency in record.dependencies if dependency.depth == 0),
    )


def compact_ansible_playbook(
    record: AnsiblePlaybookResult,
    *,
    limit: int = DEFAULT_COMPACT_LIMIT,
) -> AnsiblePlaybookCompact:
    del limit
    return AnsiblePlaybookCompact(
        mode=record.mode,
        success=record.success,
        exit_code=record.exit_code,
        host_count=record.host_count,
        total_changed=sum(row.changed for row in record.recap),
        total_failed=sum(row.failed for row in record.recap),
        total_unreachable=sum(row.unreachable for row in record.recap),
    )


# -- compact text ----------------------------------------------------------------


def format_diagnostics_compact(compact: DiagnosticsCompact) -> str:
    """Render the header and the capped ``file:line severity`` list.

    Example:
        ``dotnet build: failed (2 errors, 1 warnings)`` followed by
        ``  src/A.cs:10 error``.
    """

    if compact.timed_out is not None:
        if compact.timed_out:
            header = f"{compact.label}: TIMED OUT after {compact.duration_ms or 0:.0f}ms"
        else:
            header = f"{compact.label}: {'success' if compact.success else 'failed'}"
        header += f" ({compact.errors} errors, {compact.warnings} warnings)"
    elif compact.success and compact.total == 0:
        return empty_diagnostics_text(compact.label, compact.kind)
    else:
        status = "success" if compact.success else "failed"
        header = f"{compact.label}: {status} ({compact.errors} errors, {compact.warnings} warnings)"
    lines = [header]
    for ref in compact.diagnostics:
        location = ref.file or ""
        if location and ref.line is not None:
            location = f"{location}:{ref.line}"
        lines.append(f"{INDENT}{location} {ref.severity.value}" if location else f"{INDENT}{ref.severity.value}")
    hidden = compact.total - len(compact.diagnostics)
    if hidden > 0:
        lines.append(f"{INDENT}... {hidden} more")
    return join_lines(lines)


def format_test_run_compact(compact: TestRunCompact) -> str:
    if compact.success and compact.total == 0 and not compact.failed_tests:
        return empty_run_text(compact.label, json_found=compact.json_found is not False)
    status = "passed" if compact.success else "failed"
    lines = [
        f"{compact.label}: {status}: {compact.passed} passed, {compact.failed} failed, "
        f"{compact.skipped} skipped ({compact.total} total)",
    ]
    lines.extend(f"{INDENT}FAIL {name}" for name in compact.failed_tests)
    return join_lines(lines)


def format_git_status_compact(compact: GitStatusCompact) -> str:
    branch = compact.branch or "(unknown)"
    if compact.clean:
        return f"git status: {branch}, clean"
    return (
        f"git status: {branch}, {compact.staged} staged, {compact.modified} modified, "
        f"{compact.deleted} deleted, {compact.untracked} untracked, {compact.conflicts} conflicts"
    )


def format_git_log_compact(compact: GitLogCompact) -> str:
    if compact.total == 0:
        return NO_COMMITS
    lines = [f"git log: {compact.total} commits"]
    lines.extend(f"{INDENT}{commit.hash_short} {commit.message}" for commit in compact.commits)
    return join_lines(lines)


def format_log_graph_compact(compact: GitLogGraphCompact) -> str:
    if compact.total == 0:
        return NO_GRAPH_COMMITS
    lines = [f"git log --graph: {compact.total} commits"]
    lines.extend(f"{entry.g} {entry.h} {entry.m}".rstrip() for entry in compact.commits)
    return join_lines(lines)


def format_blame_compact(compact: GitBlameCompact) -> str:
    if compact.total_lines == 0:
        return empty_blame_text(compact.file)
    target = f" {compact.file}" if compact.file else ""
    lines = [f"git blame{target}: {compact.total_lines} lines"]
    lines.extend(f"{INDENT}{commit.commit_id} {commit.author}: {commit.lines} lines" for commit in compact.commits)
    return join_lines(lines)


def format_diff_compact(compact: GitDiffCompact) -> str:
    if compact.total_files == 0:
        return NO_CHANGES
    return (
        f"git diff: {compact.total_files} files changed, "
        f"+{compact.total_additions} -{compact.total_deletions}"
    )


def format_git_branch_compact(compact: GitBranchCompact) -> str:
    if compact.total == 0:
        return NO_BRANCHES
    current = f", current {compact.current}" if compact.current else ""
    return f"git branch: {compact.total} branches{current}"


def format_gradle_dependencies_compact(compact: GradleDependenciesCompact) -> str:
    if compact.total_dependencies == 0:
        return NO_GRADLE_DEPENDENCIES
    return (
        f"gradle: {compact.total_dependencies} dependencies across "
        f"{compact.configuration_count} configurations"
    )


def format_maven_dependencies_compact(compact: MavenDependenciesCompact) -> str:
    if compact.total == 0:
        return NO_MAVEN_DEPENDENCIES
    return f"maven: {compact.total} dependencies ({compact.direct} direct)"


def format_ansible_playbook_compact(compact: AnsiblePlaybookCompact) -> str:
    status = "success" if compact.success else "failed"
    return (
        f"ansible-playbook: {status}, {compact.host_count} host(s), {compact.total_changed} changed, "
        f"{compact.total_failed} failed, {compact.total_unreachable} unreachable"
    )


# -- dispatch ------------------------------------------------------------------


@singledispatch
def compact_record(record: ToolRecord, *, limit: int = DEFAULT_COMPACT_LIMIT) -> RecordModel:
    """Project any canonical record onto its compact shape."""

    raise TypeError(f"no compact mapper registered for {type(record).__name__}")


compact_record.register(DiagnosticsResult, compact_diagnostics)
compact_record.register(TestRunResult, compact_test_run)
compact_record.register(GitStatusResult, compact_git_status)
compact_record.register(GitLogResult, compact_git_log)
compact_record.register(GitLogGraphResult, compact_log_graph)
compact_record.register(GitBlameResult, compact_blame)
compact_record.register(GitDiffResult, compact_diff)
compact_record.register(GitBranchResult, compact_git_branch)
compact_record.register(GradleDependenciesResult, compact_gradle_dependencies)
compact_record.register(MavenDependenciesResult, compact_maven_dependencies)
compact_record.register(AnsiblePlaybookResult, compact_ansible_playbook)


@singledispatch
def format_compact(compact: RecordModel) -> str:
    """Render any compact record using the formatter registered for its type."""

    raise TypeError(f"no compact formatter registered for {type(compact).__name__}")


format_compact.register(DiagnosticsCompact, format_diagnostics_compact)
format_compact.register(TestRunCompact, format_test_run_compact)
format_compact.register(GitStatusCompact, format_git_status_compact)
format_compact.register(GitLogCompact, format_git_log_compact)
format_compact.register(GitLogGraphCompact, format_log_graph_compact)
format_compact.register(GitBlameCompact, format_blame_compact)
format_compact.register(GitDiffCompact, format_diff_compact)
format_compact.register(GitBranchCompact, format_git_branch_compact)
format_compact.register(GradleDependenciesCompact, format_gradle_dependencies_compact)
format_compact.register(MavenDependenciesCompact, format_maven_dependencies_compact)
format_compact.register(AnsiblePlaybookCompact, format_ansible_playbook_compact)


__all__ = [
    "DEFAULT_COMPACT_LIMIT",
    "compact_ansible_playbook",
    "compact_blame",
    "compact_diagnostics",
    "compact_diff",
    "compact_git_branch",
    "compact_git_log",
    "compact_git_status",
    "compact_gradle_dependencies",
    "compact_log_graph",
    "compact_maven_dependencies",
    "compact_record",
    "compact_test_run",
    "format_compact",
]

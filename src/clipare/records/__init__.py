# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Canonical and compact record models, one closed shape per tool command."""

from __future__ import annotations

from .build import (
    DiagnosticRef,
    DiagnosticsCompact,
    DiagnosticsResult,
    DotnetBuildResult,
    GoBuildResult,
    GoVetResult,
    GradleBuildResult,
    MavenBuildResult,
    TscResult,
)
from .deps import (
    GradleConfiguration,
    GradleDependenciesCompact,
    GradleDependenciesResult,
    GradleDependency,
    MavenDependenciesCompact,
    MavenDependenciesResult,
    MavenDependency,
)
from .infra import AnsiblePlaybookCompact, AnsiblePlaybookResult, HostRecap, PlaybookMode
from .testing import (
    DotnetTestResult,
    GoTestResult,
    JestResult,
    PackageResult,
    PytestResult,
    TestCase,
    TestRunCompact,
    TestRunResult,
    TestStatus,
    TestSummary,
)
from .vcs import (
    BlameCommit,
    BlameCommitCompact,
    BlameLine,
    Branch,
    Commit,
    CommitRef,
    DiffFile,
    FileStatus,
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
    GraphEntry,
    GraphEntryCompact,
    StagedFile,
)

__all__ = [
    "AnsiblePlaybookCompact",
    "AnsiblePlaybookResult",
    "BlameCommit",
    "BlameCommitCompact",
    "BlameLine",
    "Branch",
    "Commit",
    "CommitRef",
    "DiagnosticRef",
    "DiagnosticsCompact",
    "DiagnosticsResult",
    "DiffFile",
    "DotnetBuildResult",
    "DotnetTestResult",
    "FileStatus",
    "GitBlameCompact",
    "GitBlameResult",
    "GitBranchCompact",
    "GitBranchResult",
    "GitDiffCompact",
    "GitDiffResult",
    "GitLogCompact",
    "GitLogGraphCompact",
    "GitLogGraphResult",
    "GitLogResult",
    "GitStatusCompact",
    "GitStatusResult",
    "GoBuildResult",
    "GoTestResult",
    "GoVetResult",
    "GradleBuildResult",
    "GradleConfiguration",
    "GradleDependenciesCompact",
    "GradleDependenciesResult",
    "GradleDependency",
    "GraphEntry",
    "GraphEntryCompact",
    "HostRecap",
    "JestResult",
    "MavenBuildResult",
    "MavenDependenciesCompact",
    "MavenDependenciesResult",
    "MavenDependency",
    "PackageResult",
    "PlaybookMode",
    "PytestResult",
    "StagedFile",
    "TestCase",
    "TestRunCompact",
    "TestRunResult",
    "TestStatus",
    "TestSummary",
    "TscResult",
]

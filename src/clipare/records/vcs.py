# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records for version-control command output."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import computed_field

from ..core.models import RecordModel, ToolRecord


class FileStatus(StrEnum):
    """Change classification shared by status and diff records."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"


class StagedFile(RecordModel):
    file: str
    status: FileStatus
    old_file: str | None = None


class GitStatusResult(ToolRecord):
    """Parsed ``git status --porcelain=v1 --branch`` output."""

    LABEL: ClassVar[str] = "git status"

    kind: Literal["git-status"] = "git-status"
    branch: str = ""
    upstream: str | None = None
    ahead: int | None = None
    behind: int | None = None
    staged: tuple[StagedFile, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    untracked: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def clean(self) -> bool:
        return not (self.staged or self.modified or self.deleted or self.untracked or self.conflicts)


class GitStatusCompact(RecordModel):
    kind: Literal["git-status"] = "git-status"
    branch: str
    clean: bool
    staged: int
    modified: int
    deleted: int
    untracked: int
    conflicts: int


class Commit(RecordModel):
    hash: str
    hash_short: str
    author: str
    email: str = ""
    date: str = ""
    refs: str | None = None
    message: str


class GitLogResult(ToolRecord):
    """Commits from ``git log`` using the unit-separator pretty format."""

    LABEL: ClassVar[str] = "git log"

    kind: Literal["git-log"] = "git-log"
    commits: tuple[Commit, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return len(self.commits)


class CommitRef(RecordModel):
    hash_short: str
    message: str


class GitLogCompact(RecordModel):
    kind: Literal["git-log"] = "git-log"
    total: int
    commits: tuple[CommitRef, ...] = ()


class GraphEntry(RecordModel):
    """One line of ``git log --graph --oneline`` output.

    Topology-only lines carry the graph characters and no commit fields.
    ``parents`` and ``is_merge`` are set only for ``--parents`` output.
    """

    graph: str
    hash_short: str | None = None
    message: str | None = None
    parents: tuple[str, ...] | None = None
    refs: str | None = None
    parsed_refs: tuple[str, ...] | None = None
    is_merge: bool | None = None

    @property
    def is_commit(self) -> bool:
        return self.hash_short is not None


class GitLogGraphResult(ToolRecord):
    LABEL: ClassVar[str] = "git log --graph"

    kind: Literal["git-log-graph"] = "git-log-graph"
    entries: tuple[GraphEntry, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        """Number of commit lines; topology lines are not counted."""
        return sum(1 for entry in self.entries if entry.is_commit)


class GraphEntryCompact(RecordModel):
    g: str
    h: str
    m: str
    r: str | None = None


class GitLogGraphCompact(RecordModel):
    kind: Literal["git-log-graph"] = "git-log-graph"
    total: int
    commits: tuple[GraphEntryCompact, ...] = ()


class BlameLine(RecordModel):
    line_number: int
    content: str


class BlameCommit(RecordModel):
    commit_id: str
    author: str
    email: str | None = None
    date: str
    summary: str | None = None
    lines: tuple[BlameLine, ...] = ()


class GitBlameResult(ToolRecord):
    """``git blame --porcelain`` output grouped by commit in first-sighting order."""

    LABEL: ClassVar[str] = "git blame"

    kind: Literal["git-blame"] = "git-blame"
    file: str = ""
    commits: tuple[BlameCommit, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_lines(self) -> int:
        return sum(len(commit.lines) for commit in self.commits)


class BlameCommitCompact(RecordModel):
    commit_id: str
    author: str
    lines: int


class GitBlameCompact(RecordModel):
    kind: Literal["git-blame"] = "git-blame"
    file: str
    total_lines: int
    commits: tuple[BlameCommitCompact, ...] = ()


class DiffFile(RecordModel):
    file: str
    status: FileStatus
    additions: int
    deletions: int
    old_file: str | None = None
    binary: bool = False


class GitDiffResult(ToolRecord):
    """Per-file change counts from ``git diff --numstat``."""

    LABEL: ClassVar[str] = "git diff"

    kind: Literal["git-diff"] = "git-diff"
    files: tuple[DiffFile, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_files(self) -> int:
        return len(self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_additions(self) -> int:
        return sum(entry.additions for entry in self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_deletions(self) -> int:
        return sum(entry.deletions for entry in self.files)


class GitDiffCompact(RecordModel):
    kind: Literal["git-diff"] = "git-diff"
    total_files: int
    total_additions: int
    total_deletions: int


class Branch(RecordModel):
    name: str
    current: bool = False


class GitBranchResult(ToolRecord):
    LABEL: ClassVar[str] = "git branch"

    kind: Literal["git-branch"] = "git-branch"
    branches: tuple[Branch, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def current(self) -> str | None:
        return next((branch.name for branch in self.branches if branch.current), None)


class GitBranchCompact(RecordModel):
    kind: Literal["git-branch"] = "git-branch"
    current: str | None = None
    total: int


__all__ = [
    "BlameCommit",
    "BlameCommitCompact",
    "BlameLine",
    "Branch",
    "Commit",
    "CommitRef",
    "DiffFile",
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
    "GraphEntry",
    "GraphEntryCompact",
    "StagedFile",
]

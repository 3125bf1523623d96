# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for git porcelain, log, graph, blame and numstat output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

from ..records.vcs import (
    BlameCommit,
    BlameLine,
    Branch,
    Commit,
    DiffFile,
    FileStatus,
    GitBlameResult,
    GitBranchResult,
    GitDiffResult,
    GitLogGraphResult,
    GitLogResult,
    GitStatusResult,
    GraphEntry,
    StagedFile,
)
from .base import LinePattern, ParseStats, RawInput, as_raw, log_stats, parse_lines, stdout_lines, to_int

# -- status --------------------------------------------------------------------

STAGED_STATUS: Final[dict[str, FileStatus]] = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "C": FileStatus.COPIED,
}
BRANCH_LINE_PREFIX: Final[str] = "## "
NO_COMMITS_PREFIX: Final[str] = "No commits yet on "
PORCELAIN_PATH_OFFSET: Final[int] = 3
PORCELAIN_CODES: Final[frozenset[str]] = frozenset(" MTADRCU?!")
AHEAD_PATTERN: Final[re.Pattern[str]] = re.compile(r"ahead (\d+)")
BEHIND_PATTERN: Final[re.Pattern[str]] = re.compile(r"behind (\d+)")


@dataclass(slots=True)
class _BranchInfo:
    name: str = ""
    upstream: str | None = None
    ahead: int | None = None
    behind: int | None = None


def _parse_branch_header(line: str) -> _BranchInfo:
    """Parse ``## main...origin/main [ahead 2, behind 1]`` style headers."""

    header = line.removeprefix(BRANCH_LINE_PREFIX).removeprefix(NO_COMMITS_PREFIX)
    name, sep, rest = header.partition("...")
    if not sep:
        return _BranchInfo(name=header.split(" ")[0])
    ahead = AHEAD_PATTERN.search(rest)
    behind = BEHIND_PATTERN.search(rest)
    return _BranchInfo(
        name=name,
        upstream=rest.split(" ")[0],
        ahead=int(ahead.group(1)) if ahead else None,
        behind=int(behind.group(1)) if behind else None,
    )


def parse_git_status(raw: RawInput) -> GitStatusResult:
    """Parse ``git status --porcelain=v1 --branch``.

    Conflicts (``U`` on either side, or ``AA``) are reported only as
    conflicts. An index letter produces a staged entry; the worktree letter
    independently produces a modified or deleted entry.
    """

    raw = as_raw(raw)
    branch = _BranchInfo()
    staged: list[StagedFile] = []
    modified: list[str] = []
    deleted: list[str] = []
    untracked: list[str] = []
    conflicts: list[str] = []
    stats = ParseStats()
    for line in stdout_lines(raw):
        if not line.strip():
            continue
        if line.startswith(BRANCH_LINE_PREFIX):
            branch = _parse_branch_header(line)
            stats.matched += 1
            continue
        if len(line) <= PORCELAIN_PATH_OFFSET or line[2] != " ":
            stats.dropped += 1
            continue
        index, worktree = line[0], line[1]
        if index not in PORCELAIN_CODES or worktree not in PORCELAIN_CODES:
            stats.dropped += 1
            continue
        stats.matched += 1
        path = line[PORCELAIN_PATH_OFFSET:].strip()
        if "U" in (index, worktree) or (index == "A" and worktree == "A"):
            conflicts.append(path)
            continue
        if index == "?":
            untracked.append(path)
            continue
        if index not in (" ", "!"):
            old, arrow, new = path.partition(" -> ")
            staged.append(
                StagedFile(
                    file=new if arrow else path,
                    status=STAGED_STATUS.get(index, FileStatus.MODIFIED),
                    old_file=old if arrow else None,
                ),
            )
        if worktree == "M":
            modified.append(path)
        elif worktree == "D":
            deleted.append(path)
    log_stats("git-status", stats)
    return GitStatusResult(
        branch=branch.name,
        upstream=branch.upstream,
        ahead=branch.ahead,
        behind=branch.behind,
        staged=tuple(staged),
        modified=tuple(modified),
        deleted=tuple(deleted),
        untracked=tuple(untracked),
        conflicts=tuple(conflicts),
    )


# -- log -----------------------------------------------------------------------

LOG_FIELD_SEPARATOR: Final[str] = "\x1f"
LOG_FORMAT: Final[str] = "%H%x1f%h%x1f%an%x1f%ae%x1f%aI%x1f%D%x1f%s"
LOG_MIN_FIELDS: Final[int] = 7


def parse_git_log(raw: RawInput) -> GitLogResult:
    """Parse ``git log`` rendered with :data:`LOG_FORMAT`.

    The message is everything after the sixth separator, so separators in
    the subject survive.
    """

    raw = as_raw(raw)
    commits: list[Commit] = []
    stats = ParseStats()
    for line in stdout_lines(raw):
        if not line.strip():
            continue
        fields = line.split(LOG_FIELD_SEPARATOR)
        if len(fields) < LOG_MIN_FIELDS:
            stats.dropped += 1
            continue
        stats.matched += 1
        full_hash, short_hash, author, email, date, refs, *message = fields
        commits.append(
            Commit(
                hash=full_hash,
                hash_short=short_hash,
                author=author,
                email=email,
                date=date,
                refs=refs or None,
                message=LOG_FIELD_SEPARATOR.join(message),
            ),
        )
    log_stats("git-log", stats)
    return GitLogResult(commits=tuple(commits))


# -- log --graph ---------------------------------------------------------------

REF_TAG_PREFIX: Final[str] = "tag: "
REF_POINTER: Final[str] = " -> "


def parse_refs(refs: str) -> tuple[str, ...]:
    """Split a ``--decorate`` ref list into individual ref names.

    ``HEAD -> main`` contributes both names and ``tag: v1`` contributes ``v1``.
    """

    names: list[str] = []
    for part in refs.split(","):
        token = part.strip()
        if not token:
            continue
        for name in token.split(REF_POINTER):
            names.append(name.strip().removeprefix(REF_TAG_PREFIX))
    return tuple(names)


def _build_graph_commit(match: re.Match[str]) -> GraphEntry:
    refs = match.group("refs")
    parents = tuple(match.group("parents").split()) or None
    return GraphEntry(
        graph=match.group("graph").rstrip(),
        hash_short=match.group("hash"),
        message=(match.group("message") or "").strip(),
        parents=parents,
        refs=refs,
        parsed_refs=parse_refs(refs) if refs else None,
        is_merge=len(parents) > 1 if parents else None,
    )


def _build_graph_topology(match: re.Match[str]) -> GraphEntry:
    return GraphEntry(graph=match.group("graph").rstrip())


GRAPH_PATTERNS: Final[tuple[LinePattern[GraphEntry], ...]] = (
    LinePattern(
        "graph-commit",
        re.compile(
            r"^(?P<graph>[|/\\ _.-]*\*[|/\\ *_.-]*?)\s*(?P<hash>[0-9a-f]{4,40})\b"
            r"(?P<parents>(?:\s+[0-9a-f]{7,40}(?=\s|$))*)"
            r"(?:\s+\((?P<refs>[^)]*)\))?(?:\s+(?P<message>.*))?$",
        ),
        _build_graph_commit,
    ),
    LinePattern(
        "graph-topology",
        re.compile(r"^(?P<graph>[|/\\ _.*-]+)$"),
        _build_graph_topology,
    ),
)


def parse_log_graph(raw: RawInput) -> GitLogGraphResult:
    """Parse ``git log --graph --oneline --decorate``.

    Commit lines and pure topology lines are kept in output order; only
    commit lines count towards ``total``. With ``--parents`` the abbreviated
    parent hashes that follow the commit hash (7 or more hex digits each) are
    collected into ``parents`` and a commit with more than one parent is
    flagged ``is_merge``. Without ``--parents`` merges are not inferred from
    the drawing.
    """

    raw = as_raw(raw)
    entries, _ = parse_lines(stdout_lines(raw), GRAPH_PATTERNS, family="git-log-graph")
    return GitLogGraphResult(entries=tuple(entries))


# -- blame ---------------------------------------------------------------------

BLAME_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<commit>[0-9a-f]{40}) (?P<orig>\d+) (?P<final>\d+)(?: (?P<count>\d+))?$",
)
BLAME_CONTENT_PREFIX: Final[str] = "\t"
BLAME_ID_LENGTH: Final[int] = 8
BLAME_METADATA_KEYS: Final[frozenset[str]] = frozenset(
    {"author", "author-mail", "author-time", "author-tz", "summary", "filename"},
)
BLAME_IGNORED_KEYS: Final[frozenset[str]] = frozenset(
    {"committer", "committer-mail", "committer-time", "committer-tz", "previous", "boundary"},
)


def _iso_utc(epoch: str | None) -> str:
    if epoch is None:
        return ""
    try:
        stamp = datetime.fromtimestamp(int(epoch), tz=UTC)
    except (ValueError, OverflowError, OSError):
        return ""
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class _BlameGroup:
    commit: str
    lines: list[BlameLine] = field(default_factory=list)


def parse_blame(raw: RawInput, *, file: str = "") -> GitBlameResult:
    """Group ``git blame --porcelain`` output by commit.

    Porcelain output emits a commit's metadata only on its first header, so
    metadata is cached per full commit id and reused for later headers of
    the same commit. Groups appear in first-sighting order and each group's
    lines are sorted by final line number.

    Args:
        raw: Captured blame output.
        file: Path that was blamed; defaults to the ``filename`` metadata.

    Returns:
        GitBlameResult: Commits with their attributed lines.
    """

    raw = as_raw(raw)
    metadata: dict[str, dict[str, str]] = {}
    groups: dict[str, _BlameGroup] = {}
    current: str | None = None
    final_line = 0
    stats = ParseStats()
    for line in stdout_lines(raw):
        header = BLAME_HEADER_PATTERN.match(line)
        if header is not None:
            current = header.group("commit")
            final_line = int(header.group("final"))
            metadata.setdefault(current, {})
            groups.setdefault(current, _BlameGroup(commit=current))
            stats.matched += 1
            continue
        if current is None:
            if line.strip():
                stats.dropped += 1
            continue
        if line.startswith(BLAME_CONTENT_PREFIX):
            groups[current].lines.append(BlameLine(line_number=final_line, content=line[1:]))
            stats.matched += 1
            continue
        key, _, value = line.partition(" ")
        if key in BLAME_METADATA_KEYS:
            metadata[current].setdefault(key, value)
        elif line.strip() and key not in BLAME_IGNORED_KEYS:
            stats.dropped += 1
    log_stats("git-blame", stats)

    commits = tuple(_blame_commit(group, metadata[group.commit]) for group in groups.values())
    if not file:
        file = next((meta["filename"] for meta in metadata.values() if "filename" in meta), "")
    return GitBlameResult(file=file, commits=commits)


def _blame_commit(group: _BlameGroup, meta: dict[str, str]) -> BlameCommit:
    email = meta.get("author-mail", "").strip("<>") or None
    return BlameCommit(
        commit_id=group.commit[:BLAME_ID_LENGTH],
        author=meta.get("author", ""),
        email=email,
        date=_iso_utc(meta.get("author-time")),
        summary=meta.get("summary"),
        lines=tuple(sorted(group.lines, key=lambda item: item.line_number)),
    )


# -- diff --numstat ------------------------------------------------------------

BRACE_RENAME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<prefix>.*)\{(?P<old>.*) => (?P<new>.*)\}(?P<suffix>.*)$",
)
RENAME_MARKER: Final[str] = " => "
BINARY_COUNT: Final[str] = "-"
NUMSTAT_FIELDS: Final[int] = 3


def _join_path(*parts: str) -> str:
    return re.sub(r"/{2,}", "/", "".join(parts))


def expand_rename(path: str) -> tuple[str, str] | None:
    """Return ``(old, new)`` full paths for a numstat rename, else ``None``.

    Handles both ``old => new`` and the brace form ``src/{a => b}/x.py``.
    """

    brace = BRACE_RENAME_PATTERN.match(path)
    if brace is not None:
        prefix, suffix = brace.group("prefix"), brace.group("suffix")
        return (
            _join_path(prefix, brace.group("old"), suffix),
            _join_path(prefix, brace.group("new"), suffix),
        )
    old, marker, new = path.partition(RENAME_MARKER)
    if marker:
        return old, new
    return None


def classify_change(additions: int, deletions: int, *, renamed: bool) -> FileStatus:
    """Apply the numstat status precedence.

    renamed > added (only additions) > deleted (only deletions) > modified.
    Zero/zero rows, which include binary files and mode-only changes, are
    ``modified``.
    """

    if renamed:
        return FileStatus.RENAMED
    if additions > 0 and deletions == 0:
        return FileStatus.ADDED
    if deletions > 0 and additions == 0:
        return FileStatus.DELETED
    return FileStatus.MODIFIED


def parse_diff_numstat(raw: RawInput) -> GitDiffResult:
    """Parse ``git diff --numstat`` rows of ``adds<TAB>dels<TAB>path``."""

    raw = as_raw(raw)
    files: list[DiffFile] = []
    stats = ParseStats()
    for line in stdout_lines(raw):
        if not line.strip():
            continue
        fields = line.split("\t", NUMSTAT_FIELDS - 1)
        if len(fields) < NUMSTAT_FIELDS or not fields[2]:
            stats.dropped += 1
            continue
        added_text, deleted_text, path = fields
        if not all(value == BINARY_COUNT or value.isdigit() for value in (added_text, deleted_text)):
            stats.dropped += 1
            continue
        stats.matched += 1
        additions = to_int(added_text)
        deletions = to_int(deleted_text)
        rename = expand_rename(path)
        files.append(
            DiffFile(
                file=rename[1] if rename else path,
                status=classify_change(additions, deletions, renamed=rename is not None),
                additions=additions,
                deletions=deletions,
                old_file=rename[0] if rename else None,
                binary=added_text == BINARY_COUNT and deleted_text == BINARY_COUNT,
            ),
        )
    log_stats("git-diff", stats)
    return GitDiffResult(files=tuple(files))


# -- branch --------------------------------------------------------------------

CURRENT_BRANCH_MARKER: Final[str] = "* "
BRANCH_LINE_MARKERS: Final[tuple[str, ...]] = ("* ", "+ ", "  ")
DETACHED_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\((?P<name>[^)]*)\)")


def parse_git_branch(raw: RawInput) -> GitBranchResult:
    """Parse ``git branch`` (optionally ``-v``/``-vv``) listings."""

    raw = as_raw(raw)
    branches: list[Branch] = []
    stats = ParseStats()
    for line in stdout_lines(raw):
        if not line.strip():
            continue
        if not line.startswith(BRANCH_LINE_MARKERS):
            stats.dropped += 1
            continue
        stats.matched += 1
        current = line.startswith(CURRENT_BRANCH_MARKER)
        rest = line[2:].strip()
        detached = DETACHED_PATTERN.match(rest)
        name = f"({detached.group('name')})" if detached else rest.split()[0]
        branches.append(Branch(name=name, current=current))
    log_stats("git-branch", stats)
    return GitBranchResult(branches=tuple(branches))


__all__ = [
    "GRAPH_PATTERNS",
    "LOG_FORMAT",
    "classify_change",
    "expand_rename",
    "parse_blame",
    "parse_diff_numstat",
    "parse_git_branch",
    "parse_git_log",
    "parse_git_status",
    "parse_log_graph",
    "parse_refs",
]

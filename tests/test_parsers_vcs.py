# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering git porcelain, log, blame, numstat and branch parsers."""

from __future__ import annotations

import pytest

from clipare.parsers import (
    parse_blame,
    parse_diff_numstat,
    parse_git_branch,
    parse_git_log,
    parse_git_status,
    parse_log_graph,
)
from clipare.parsers.vcs import LOG_FORMAT, expand_rename, parse_refs
from clipare.records import FileStatus


def test_git_status_porcelain() -> None:
    stdout = "\n".join(
        [
            "## feature...origin/feature [ahead 2, behind 1]",
            "M  src/staged.py",
            " M src/changed.py",
            "MM src/both.py",
            "R  old.py -> new.py",
            " D gone.py",
            "UU conflict.py",
            "AA added_both.py",
            "?? notes.txt",
        ],
    )

    record = parse_git_status(stdout)

    assert record.branch == "feature"
    assert record.upstream == "origin/feature"
    assert (record.ahead, record.behind) == (2, 1)
    assert [(entry.file, entry.status, entry.old_file) for entry in record.staged] == [
        ("src/staged.py", FileStatus.MODIFIED, None),
        ("src/both.py", FileStatus.MODIFIED, None),
        ("new.py", FileStatus.RENAMED, "old.py"),
    ]
    assert record.modified == ("src/changed.py", "src/both.py")
    assert record.deleted == ("gone.py",)
    assert record.conflicts == ("conflict.py", "added_both.py")
    assert record.untracked == ("notes.txt",)
    assert record.clean is False


def test_git_status_clean_branch_without_upstream() -> None:
    record = parse_git_status("## No commits yet on main\n")

    assert record.branch == "main"
    assert record.upstream is None
    assert record.clean is True


def test_git_status_ignores_error_text(make_raw) -> None:
    record = parse_git_status(make_raw(stderr="fatal: not a git repository", stdout="fatal: not a git repository"))

    assert record.staged == ()
    assert record.modified == ()


def test_git_log_keeps_separators_in_subject() -> None:
    sep = "\x1f"
    line = sep.join(["f" * 40, "fffffff", "Ann", "ann@example.com", "2024-01-02T03:04:05+00:00", "HEAD -> main"])
    stdout = f"{line}{sep}fix: a{sep}b\nmalformed line\n"

    record = parse_git_log(stdout)

    assert record.total == 1
    commit = record.commits[0]
    assert commit.message == f"fix: a{sep}b"
    assert commit.refs == "HEAD -> main"
    assert LOG_FORMAT.count("%x1f") == 6


def test_log_graph_counts_commit_rows_only() -> None:
    stdout = "\n".join(
        [
            "*   abc1234 (HEAD -> main, tag: v1.0, origin/main) Merge branch 'topic'",
            "|\\  ",
            "| * def5678 Topic work",
            "|/  ",
            "* 0123abc Initial commit",
        ],
    )

    record = parse_log_graph(stdout)

    assert record.total == 3
    assert len(record.entries) == 5
    head = record.entries[0]
    assert head.hash_short == "abc1234"
    assert head.message == "Merge branch 'topic'"
    assert head.parsed_refs == ("HEAD", "main", "v1.0", "origin/main")
    assert head.parents is None
    assert head.is_merge is None
    assert record.entries[1].is_commit is False


def test_log_graph_captures_parent_hashes() -> None:
    record = parse_log_graph("* abc1234 def5678  (HEAD -> main) commit message")

    entry = record.entries[0]
    assert entry.hash_short == "abc1234"
    assert entry.parents == ("def5678",)
    assert entry.refs == "HEAD -> main"
    assert entry.parsed_refs == ("HEAD", "main")
    assert entry.message == "commit message"
    assert entry.is_merge is False


def test_log_graph_flags_merge_with_two_parents() -> None:
    record = parse_log_graph("* abc1234 def5678 fedcba9  Merge branch 'feature'")

    entry = record.entries[0]
    assert entry.parents == ("def5678", "fedcba9")
    assert entry.is_merge is True
    assert entry.message == "Merge branch 'feature'"
    assert entry.to_json()["is_merge"] is True


def test_parse_refs_splits_pointers_and_tags() -> None:
    assert parse_refs("HEAD -> dev, tag: v2") == ("HEAD", "dev", "v2")


def test_blame_groups_interleaved_commits(blame_porcelain: str) -> None:
    record = parse_blame(blame_porcelain)

    assert record.file == "main.go"
    assert len(record.commits) == 2
    alice, bob = record.commits
    assert alice.commit_id == "aaaaaaaa"
    assert alice.author == "Alice"
    assert alice.email == "alice@example.com"
    assert alice.date == "2023-11-14T22:13:20.000Z"
    assert alice.summary == "Initial commit"
    assert [line.line_number for line in alice.lines] == [1, 3]
    assert [line.content for line in alice.lines] == ["package main", "func main() {}"]
    assert bob.author == "Bob"
    assert [line.line_number for line in bob.lines] == [2]
    assert record.total_lines == 3


def test_blame_prefers_explicit_file(blame_porcelain: str) -> None:
    assert parse_blame(blame_porcelain, file="cmd/main.go").file == "cmd/main.go"


@pytest.mark.parametrize(
    ("row", "status"),
    [
        ("0\t0\tmode-only.sh", FileStatus.MODIFIED),
        ("-\t-\tlogo.png", FileStatus.MODIFIED),
        ("12\t0\tnew_file.py", FileStatus.ADDED),
        ("0\t7\tremoved.py", FileStatus.DELETED),
        ("3\t4\tchanged.py", FileStatus.MODIFIED),
        ("5\t2\tsrc/{old => new}/mod.py", FileStatus.RENAMED),
        ("9\t0\told_name.py => new_name.py", FileStatus.RENAMED),
    ],
)
def test_numstat_status_precedence(row: str, status: FileStatus) -> None:
    record = parse_diff_numstat(row)

    assert record.files[0].status is status


def test_numstat_rename_expansion_and_totals() -> None:
    stdout = "5\t2\tsrc/{old => new}/mod.py\n-\t-\tlogo.png\n1\t1\tREADME.md\nnot a row\n"

    record = parse_diff_numstat(stdout)

    renamed, binary, readme = record.files
    assert (renamed.old_file, renamed.file) == ("src/old/mod.py", "src/new/mod.py")
    assert binary.binary is True
    assert (binary.additions, binary.deletions) == (0, 0)
    assert readme.binary is False
    assert (record.total_files, record.total_additions, record.total_deletions) == (3, 6, 3)


def test_expand_rename_collapses_empty_brace_side() -> None:
    assert expand_rename("src/{ => sub}/a.py") == ("src/a.py", "src/sub/a.py")
    assert expand_rename("plain.py") is None


def test_git_branch_listing() -> None:
    stdout = "  develop\n* main\n  feature/x  1a2b3c4 [origin/feature/x: ahead 1] wip\n"

    record = parse_git_branch(stdout)

    assert [branch.name for branch in record.branches] == ["develop", "main", "feature/x"]
    assert record.current == "main"


def test_git_branch_detached_head() -> None:
    record = parse_git_branch("* (HEAD detached at 1a2b3c4)\n  main\n")

    assert record.current == "(HEAD detached at 1a2b3c4)"

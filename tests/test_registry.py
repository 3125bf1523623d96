# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the tool registry and the normalize pipeline."""

from __future__ import annotations

import pytest

from clipare.config import Config, OutputConfig
from clipare.core.models import RawToolOutput
from clipare.errors import InvalidArgumentError, UnknownToolError
from clipare.records import PlaybookMode
from clipare.records.vcs import GitStatusResult
from clipare.registry import TOOLS, get_tool, iter_tools, normalize, record_is_empty

EXPECTED_TOOLS = {
    "ansible-playbook",
    "dotnet-build",
    "dotnet-test",
    "git-blame",
    "git-branch",
    "git-diff",
    "git-log",
    "git-log-graph",
    "git-status",
    "go-build",
    "go-test",
    "go-vet",
    "gradle-build",
    "gradle-dependencies",
    "jest",
    "maven-build",
    "maven-dependencies",
    "pytest",
    "tsc",
}

DOTNET_ERRORS = "\n".join(["src/Foo.cs(10,5): error CS0103: The name 'x' does not exist"] * 20)


def test_registry_covers_every_tool_command() -> None:
    assert set(TOOLS) == EXPECTED_TOOLS
    assert [spec.name for spec in iter_tools()] == sorted(EXPECTED_TOOLS)


def test_unknown_tool_raises() -> None:
    with pytest.raises(UnknownToolError):
        get_tool("cargo-build")


def test_context_values_are_coerced() -> None:
    assert TOOLS["gradle-dependencies"].coerce_context({"resolved": "true"}) == {"resolved": True}
    assert TOOLS["ansible-playbook"].coerce_context({"mode": "list-tags"}) == {"mode": PlaybookMode.LIST_TAGS}


@pytest.mark.parametrize(
    ("tool", "context"),
    [
        ("go-build", {"file": "main.go"}),
        ("ansible-playbook", {"mode": "explode"}),
        ("gradle-dependencies", {"resolved": "maybe"}),
    ],
)
def test_bad_context_is_rejected(tool: str, context: dict[str, str]) -> None:
    with pytest.raises(InvalidArgumentError):
        TOOLS[tool].coerce_context(context)


def test_record_is_empty() -> None:
    assert record_is_empty(GitStatusResult(branch="main")) is True
    assert record_is_empty(GitStatusResult(branch="main", untracked=("a.txt",))) is False


def test_verbose_build_output_is_compacted(make_raw) -> None:
    output = normalize("dotnet-build", make_raw(stdout=DOTNET_ERRORS, exit_code=1))

    assert output.compacted is True
    assert output.is_error is False
    assert output.structured["total"] == 20
    assert output.text.split("\n")[0] == "dotnet build: failed (20 errors, 0 warnings)"


def test_config_controls_compaction(make_raw) -> None:
    raw = make_raw(stdout=DOTNET_ERRORS, exit_code=1)

    disabled = normalize("dotnet-build", raw, config=Config(output=OutputConfig(compact=False)))
    limited = normalize("dotnet-build", raw, config=Config(output=OutputConfig(compact_diagnostic_limit=3)))
    forced = normalize("dotnet-build", raw, force_full=True)

    assert disabled.compacted is False
    assert len(limited.structured["diagnostics"]) == 3
    assert forced.compacted is False
    assert len(forced.structured["diagnostics"]) == 20


def test_failed_git_command_becomes_classified_error(make_raw) -> None:
    raw = make_raw(stderr="fatal: ambiguous argument 'nope': unknown revision or path", exit_code=128)

    output = normalize("git-log", raw)

    assert output.is_error is True
    assert output.structured["category"] == "not-found"
    assert output.structured["command"] == "git log"
    assert output.to_mcp()["isError"] is True


def test_git_status_outside_repository(make_raw) -> None:
    stderr = "fatal: not a git repository (or any of the parent directories): .git"

    output = normalize("git-status", make_raw(stderr=stderr, exit_code=128))

    assert output.is_error is True
    assert output.text.startswith("Error [command-failed]: fatal: not a git repository")


def test_build_failure_without_diagnostics_is_not_an_error(make_raw) -> None:
    output = normalize("go-build", make_raw(exit_code=1))

    assert output.is_error is False
    assert output.text == "go build: failed (0 errors, 0 warnings)"


def test_context_reaches_parser(make_raw, blame_porcelain: str) -> None:
    output = normalize("git-blame", make_raw(stdout=blame_porcelain), file="cmd/main.go")

    assert output.structured["file"] == "cmd/main.go"
    assert output.text.startswith("git blame cmd/main.go: 3 lines")


@pytest.mark.parametrize(
    ("tool", "context", "expected"),
    [
        ("go-build", {}, "go build: no errors found."),
        ("go-vet", {}, "go vet: no issues found."),
        ("dotnet-build", {}, "dotnet build: success, no diagnostics."),
        ("tsc", {}, "tsc: no errors found."),
        ("go-test", {}, "go test: no tests found."),
        ("pytest", {}, "pytest: no tests found."),
        ("dotnet-test", {}, "dotnet test: no tests found."),
        ("jest", {}, "jest: no JSON report found."),
        ("git-log", {}, "git log: no commits found."),
        ("git-log-graph", {}, "git log --graph: no commits found."),
        ("git-blame", {"file": "main.go"}, "git blame main.go: no lines found."),
        ("git-diff", {}, "git diff: no changes."),
        ("git-branch", {}, "git branch: no branches found."),
        ("gradle-dependencies", {}, "gradle: no dependencies found."),
        ("maven-dependencies", {}, "maven: no dependencies found."),
    ],
)
def test_empty_output_keeps_empty_sentence_when_compacted(
    tool: str,
    context: dict[str, str],
    expected: str,
) -> None:
    compacted = normalize(tool, RawToolOutput(), **context)
    full = normalize(tool, RawToolOutput(), force_full=True, **context)

    assert compacted.compacted is True
    assert compacted.text == expected
    assert full.text == expected


def test_failed_empty_test_run_keeps_header() -> None:
    output = normalize("pytest", RawToolOutput(exit_code=1))

    assert output.text.startswith("pytest: failed: 0 passed")

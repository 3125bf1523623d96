# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry mapping tool-command names to their parse/format/compact pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from .config import Config
from .core.models import RawToolOutput, RecordModel, ToolRecord
from .errors import InvalidArgumentError, UnknownToolError, classify_failure
from .extraction import strip_ansi
from .output.policy import DualOutputPolicy, ToolOutput, compact_dual_output, error_output
from .parsers import (
    parse_ansible_playbook,
    parse_blame,
    parse_diff_numstat,
    parse_dotnet_build,
    parse_dotnet_test,
    parse_git_branch,
    parse_git_log,
    parse_git_status,
    parse_go_build,
    parse_go_test,
    parse_go_vet,
    parse_gradle_build,
    parse_gradle_dependencies,
    parse_jest_json,
    parse_log_graph,
    parse_maven_build,
    parse_maven_dependencies,
    parse_pytest,
    parse_tsc,
)
from .records.infra import PlaybookMode
from .reporting import compact as compact_mod
from .reporting import formatters as fmt

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """Pipeline bound to one tool command.

    Attributes:
        name: Tool-command identifier such as ``git-blame``.
        parse: Parser producing the canonical record.
        format: Full text formatter for the canonical record.
        compact: Mapper onto the compact record; accepts a ``limit`` keyword.
        format_compact: Text formatter for the compact record.
        error_on_failure: Report a classified error when the tool exits
            non-zero and the parsed record is empty.
        context: Extra keyword arguments accepted by ``parse`` and their types.
        description: One-line summary shown by ``clipare tools``.
    """

    name: str
    parse: Callable[..., ToolRecord]
    format: Callable[[Any], str]
    compact: Callable[..., RecordModel]
    format_compact: Callable[[Any], str]
    error_on_failure: bool = False
    context: Mapping[str, type] = field(default_factory=dict)
    description: str = ""

    def coerce_context(self, context: Mapping[str, Any]) -> dict[str, Any]:
        """Validate ``context`` against the declared parser keywords.

        Raises:
            InvalidArgumentError: If a key is not accepted or a value does not
                convert to the declared type.
        """

        coerced: dict[str, Any] = {}
        for key, value in context.items():
            if key not in self.context:
                raise InvalidArgumentError(f"{self.name} does not accept context key {key!r}")
            try:
                coerced[key] = TypeAdapter(self.context[key]).validate_python(value)
            except ValidationError as exc:
                raise InvalidArgumentError(f"invalid value for {self.name} context {key!r}: {value!r}") from exc
        return coerced


def record_is_empty(record: ToolRecord) -> bool:
    """Return ``True`` when every collection field of ``record`` is empty."""

    collections = [value for value in vars(record).values() if isinstance(value, tuple)]
    return bool(collections) and not any(collections)


def _diagnostics_tool(name: str, parse: Callable[..., ToolRecord], description: str) -> ToolSpec:
    return ToolSpec(
        name=name,
        parse=parse,
        format=fmt.format_diagnostics,
        compact=compact_mod.compact_diagnostics,
        format_compact=compact_mod.format_diagnostics_compact,
        description=description,
    )


def _jvm_build_tool(name: str, parse: Callable[..., ToolRecord], description: str) -> ToolSpec:
    return ToolSpec(
        name=name,
        parse=parse,
        format=fmt.format_jvm_build,
        compact=compact_mod.compact_diagnostics,
        format_compact=compact_mod.format_diagnostics_compact,
        description=description,
    )


def _test_tool(name: str, parse: Callable[..., ToolRecord], description: str) -> ToolSpec:
    return ToolSpec(
        name=name,
        parse=parse,
        format=fmt.format_test_run,
        compact=compact_mod.compact_test_run,
        format_compact=compact_mod.format_test_run_compact,
        description=description,
    )


_SPECS: Final[tuple[ToolSpec, ...]] = (
    _diagnostics_tool("go-build", parse_go_build, "go build diagnostics"),
    _diagnostics_tool("go-vet", parse_go_vet, "go vet findings"),
    _diagnostics_tool("dotnet-build", parse_dotnet_build, "MSBuild errors and warnings"),
    _diagnostics_tool("tsc", parse_tsc, "TypeScript compiler diagnostics"),
    _jvm_build_tool("gradle-build", parse_gradle_build, "Gradle build outcome and compiler diagnostics"),
    _jvm_build_tool("maven-build", parse_maven_build, "Maven build outcome and compiler diagnostics"),
    _test_tool("go-test", parse_go_test, "go test -json event stream"),
    _test_tool("jest", parse_jest_json, "jest --json report"),
    _test_tool("pytest", parse_pytest, "pytest verbose output and summary"),
    _test_tool("dotnet-test", parse_dotnet_test, "dotnet test results"),
    ToolSpec(
        name="git-status",
        parse=parse_git_status,
        format=fmt.format_git_status,
        compact=compact_mod.compact_git_status,
        format_compact=compact_mod.format_git_status_compact,
        error_on_failure=True,
        description="git status --porcelain=v1 -b",
    ),
    ToolSpec(
        name="git-log",
        parse=parse_git_log,
        format=fmt.format_git_log,
        compact=compact_mod.compact_git_log,
        format_compact=compact_mod.format_git_log_compact,
        error_on_failure=True,
        description="git log with a unit-separated format",
    ),
    ToolSpec(
        name="git-log-graph",
        parse=parse_log_graph,
        format=fmt.format_log_graph,
        compact=compact_mod.compact_log_graph,
        format_compact=compact_mod.format_log_graph_compact,
        error_on_failure=True,
        description="git log --graph --oneline --decorate",
    ),
    ToolSpec(
        name="git-blame",
        parse=parse_blame,
        format=fmt.format_blame,
        compact=compact_mod.compact_blame,
        format_compact=compact_mod.format_blame_compact,
        error_on_failure=True,
        context={"file": str},
        description="git blame --porcelain",
    ),
    ToolSpec(
        name="git-diff",
        parse=parse_diff_numstat,
        format=fmt.format_diff,
        compact=compact_mod.compact_diff,
        format_compact=compact_mod.format_diff_compact,
        error_on_failure=True,
        description="git diff --numstat",
    ),
    ToolSpec(
        name="git-branch",
        parse=parse_git_branch,
        format=fmt.format_git_branch,
        compact=compact_mod.compact_git_branch,
        format_compact=compact_mod.format_git_branch_compact,
        error_on_failure=True,
        description="git branch",
    ),
    ToolSpec(
        name="gradle-dependencies",
        parse=parse_gradle_dependencies,
        format=fmt.format_gradle_dependencies,
        compact=compact_mod.compact_gradle_dependencies,
        format_compact=compact_mod.format_gradle_dependencies_compact,
        error_on_failure=True,
        context={"resolved": bool},
        description="gradle dependencies --console=plain",
    ),
    ToolSpec(
        name="maven-dependencies",
        parse=parse_maven_dependencies,
        format=fmt.format_maven_dependencies,
        compact=compact_mod.compact_maven_dependencies,
        format_compact=compact_mod.format_maven_dependencies_compact,
        error_on_failure=True,
        description="mvn dependency:tree",
    ),
    ToolSpec(
        name="ansible-playbook",
        parse=parse_ansible_playbook,
        format=fmt.format_ansible_playbook,
        compact=compact_mod.compact_ansible_playbook,
        format_compact=compact_mod.format_ansible_playbook_compact,
        context={"mode": PlaybookMode},
        description="ansible-playbook runs, syntax checks and listings",
    ),
)

TOOLS: Final[Mapping[str, ToolSpec]] = MappingProxyType({spec.name: spec for spec in _SPECS})


def get_tool(name: str) -> ToolSpec:
    """Return the :class:`ToolSpec` registered under ``name``.

    Raises:
        UnknownToolError: If ``name`` is not registered.
    """

    try:
        return TOOLS[name]
    except KeyError:
        raise UnknownToolError(name) from None


def iter_tools() -> Iterator[ToolSpec]:
    """Yield registered tool specs sorted by name."""

    for name in sorted(TOOLS):
        yield TOOLS[name]


def normalize(
    tool: str,
    raw: RawToolOutput,
    *,
    force_full: bool = False,
    config: Config | None = None,
    **context: Any,
) -> ToolOutput:
    """Parse ``raw`` for ``tool`` and return its dual output.

    Args:
        tool: Registered tool-command name.
        raw: Captured output of the invocation.
        force_full: Always emit the full record and full text.
        config: Loaded configuration; defaults apply when omitted.
        **context: Parser keywords declared by the :class:`ToolSpec`, such as
            ``file`` for ``git-blame``.

    Returns:
        ToolOutput: Full, compact or classified-error dual output.

    Raises:
        UnknownToolError: If ``tool`` is not registered.
        InvalidArgumentError: If ``context`` carries unsupported keys or values.
    """

    spec = get_tool(tool)
    config = config or Config()
    record = spec.parse(raw, **spec.coerce_context(context))
    if spec.error_on_failure and raw.exit_code != 0 and record_is_empty(record):
        LOGGER.debug("%s exited %d with no parsed output; classifying failure", tool, raw.exit_code)
        return error_output(classify_failure(raw, tool.replace("-", " ")))
    output = compact_dual_output(
        record,
        strip_ansi(raw.combined).strip(),
        spec.format,
        partial(spec.compact, limit=config.output.compact_diagnostic_limit),
        spec.format_compact,
        force_full=force_full or not config.output.compact,
        policy=DualOutputPolicy.from_config(config.output),
    )
    LOGGER.debug("%s normalized (compacted=%s)", tool, output.compacted)
    return output


__all__ = [
    "TOOLS",
    "ToolSpec",
    "get_tool",
    "iter_tools",
    "normalize",
    "record_is_empty",
]

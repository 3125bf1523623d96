# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers turning raw tool output into canonical records."""

from __future__ import annotations

from .base import LinePattern, ParseStats, parse_lines
from .build import (
    parse_dotnet_build,
    parse_go_build,
    parse_go_vet,
    parse_gradle_build,
    parse_jvm_diagnostics,
    parse_maven_build,
    parse_tsc,
)
from .deps import parse_gradle_dependencies, parse_maven_dependencies
from .infra import parse_ansible_playbook
from .testing import parse_dotnet_test, parse_go_test, parse_jest_json, parse_pytest
from .vcs import (
    parse_blame,
    parse_diff_numstat,
    parse_git_branch,
    parse_git_log,
    parse_git_status,
    parse_log_graph,
)

__all__ = [
    "LinePattern",
    "ParseStats",
    "parse_ansible_playbook",
    "parse_blame",
    "parse_diff_numstat",
    "parse_dotnet_build",
    "parse_dotnet_test",
    "parse_git_branch",
    "parse_git_log",
    "parse_git_status",
    "parse_go_build",
    "parse_go_test",
    "parse_go_vet",
    "parse_gradle_build",
    "parse_gradle_dependencies",
    "parse_jest_json",
    "parse_jvm_diagnostics",
    "parse_lines",
    "parse_log_graph",
    "parse_maven_build",
    "parse_maven_dependencies",
    "parse_pytest",
    "parse_tsc",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records for orchestration tools."""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Literal

from pydantic import computed_field

from ..core.models import RecordModel, ToolRecord


class PlaybookMode(StrEnum):
    """Invocation modes of ``ansible-playbook`` with distinct output shapes."""

    RUN = "run"
    SYNTAX_CHECK = "syntax-check"
    LIST_TASKS = "list-tasks"
    LIST_TAGS = "list-tags"


class HostRecap(RecordModel):
    """One ``PLAY RECAP`` row; fields missing from the row default to zero."""

    host: str
    ok: int = 0
    changed: int = 0
    unreachable: int = 0
    failed: int = 0
    skipped: int = 0
    rescued: int = 0
    ignored: int = 0


class AnsiblePlaybookResult(ToolRecord):
    LABEL: ClassVar[str] = "ansible-playbook"

    kind: Literal["ansible-playbook"] = "ansible-playbook"
    mode: PlaybookMode = PlaybookMode.RUN
    success: bool
    exit_code: int
    plays: tuple[str, ...] = ()
    recap: tuple[HostRecap, ...] = ()
    duration: str | None = None
    task_list: tuple[str, ...] = ()
    tag_list: tuple[str, ...] = ()
    error: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def host_count(self) -> int:
        return len(self.recap)


class AnsiblePlaybookCompact(RecordModel):
    kind: Literal["ansible-playbook"] = "ansible-playbook"
    mode: PlaybookMode
    success: bool
    exit_code: int
    host_count: int
    total_changed: int
    total_failed: int
    total_unreachable: int


__all__ = [
    "AnsiblePlaybookCompact",
    "AnsiblePlaybookResult",
    "HostRecap",
    "PlaybookMode",
]

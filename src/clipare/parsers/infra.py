# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for ``ansible-playbook`` output."""

from __future__ import annotations

import re
from typing import Final

from ..errors import InvalidArgumentError
from ..records.infra import AnsiblePlaybookResult, HostRecap, PlaybookMode
from .base import ParseStats, RawInput, as_raw, combined_lines, log_stats, named_counts

RECAP_HEADER: Final[str] = "PLAY RECAP"
RECAP_ROW_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<host>\S+)\s*:\s*(?P<fields>(?:\w+=\d+\s*)+)$")
RECAP_FIELDS: Final[frozenset[str]] = frozenset(
    {"ok", "changed", "unreachable", "failed", "skipped", "rescued", "ignored"},
)
PLAY_PATTERN: Final[re.Pattern[str]] = re.compile(r"^PLAY \[(?P<name>[^\]]*)\]", re.MULTILINE)
DURATION_PATTERN: Final[re.Pattern[str]] = re.compile(r"Playbook run took (?P<duration>.+)")
TAGS_PATTERN: Final[re.Pattern[str]] = re.compile(r"TASK TAGS:\s*\[(?P<tags>[^\]]*)\]")
TASK_TAGS_SUFFIX: Final[re.Pattern[str]] = re.compile(r"\s+TAGS:\s*\[.*\]$")
TASK_LIST_SKIP_PREFIXES: Final[tuple[str, ...]] = ("play #", "PLAY", "playbook:", "pattern:", "tasks:", "TASK TAGS")


def _parse_recap(lines: list[str], stats: ParseStats) -> tuple[HostRecap, ...]:
    """Parse ``host : ok=N changed=N ...`` rows after the recap header.

    Each field is read by name; unknown names are ignored and missing ones
    keep their zero default.
    """

    rows: list[HostRecap] = []
    in_recap = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith(RECAP_HEADER):
            in_recap = True
            continue
        if not in_recap or not stripped:
            continue
        match = RECAP_ROW_PATTERN.match(stripped)
        if match is None:
            stats.dropped += 1
            continue
        stats.matched += 1
        counts = {
            name: value for name, value in named_counts(match.group("fields")).items() if name in RECAP_FIELDS
        }
        rows.append(HostRecap(host=match.group("host"), **counts))
    return tuple(rows)


def _parse_task_list(lines: list[str]) -> tuple[str, ...]:
    tasks: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith(TASK_LIST_SKIP_PREFIXES):
            continue
        name = TASK_TAGS_SUFFIX.sub("", stripped).strip()
        if name:
            tasks.append(name)
    return tuple(tasks)


def _parse_tag_list(text: str) -> tuple[str, ...]:
    tags: dict[str, None] = {}
    for match in TAGS_PATTERN.finditer(text):
        for tag in match.group("tags").split(","):
            if tag.strip():
                tags.setdefault(tag.strip(), None)
    return tuple(tags)


def parse_ansible_playbook(
    raw: RawInput,
    *,
    mode: PlaybookMode | str = PlaybookMode.RUN,
) -> AnsiblePlaybookResult:
    """Parse ``ansible-playbook`` output for the given invocation ``mode``.

    Args:
        raw: Captured playbook output.
        mode: ``run`` (default), ``syntax-check``, ``list-tasks`` or ``list-tags``.

    Returns:
        AnsiblePlaybookResult: Plays, recap rows and duration for runs, or the
        listing for the list modes.
    """

    raw = as_raw(raw)
    try:
        mode = PlaybookMode(mode)
    except ValueError as exc:
        raise InvalidArgumentError(f"unknown ansible-playbook mode: {mode!r}") from exc
    lines = combined_lines(raw)
    text = "\n".join(lines)
    failure_text = None if raw.success else (text.strip() or None)
    base = {"mode": mode, "success": raw.success, "exit_code": raw.exit_code}

    if mode is PlaybookMode.SYNTAX_CHECK:
        return AnsiblePlaybookResult(**base, error=failure_text)
    if mode is PlaybookMode.LIST_TASKS:
        return AnsiblePlaybookResult(**base, task_list=_parse_task_list(lines), error=failure_text)
    if mode is PlaybookMode.LIST_TAGS:
        return AnsiblePlaybookResult(**base, tag_list=_parse_tag_list(text), error=failure_text)

    stats = ParseStats()
    recap = _parse_recap(lines, stats)
    log_stats("ansible-playbook", stats)
    duration = DURATION_PATTERN.search(text)
    return AnsiblePlaybookResult(
        **base,
        plays=tuple(match.group("name") for match in PLAY_PATTERN.finditer(text)),
        recap=recap,
        duration=duration.group("duration").strip() if duration else None,
        error=failure_text if not recap else None,
    )


__all__ = ["parse_ansible_playbook"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for Gradle and Maven dependency trees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

from ..records.deps import (
    GradleConfiguration,
    GradleDependenciesResult,
    GradleDependency,
    MavenDependenciesResult,
    MavenDependency,
)
from .base import ParseStats, RawInput, as_raw, log_stats, stdout_lines

GRADLE_CONFIG_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<name>[A-Za-z][\w]*)(?:\s+-\s+(?P<description>.+))?$",
)
GRADLE_DEPENDENCY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<prefix>[|\s]*)[+\\]---\s+(?P<coordinate>.+)$",
)
GRADLE_MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:\s*\((?:\*|c|n)\))+\s*$")
GRADLE_SKIP_PREFIXES: Final[tuple[str, ...]] = ("> Task", "Root project", "Project '", "BUILD ", "---")
GRADLE_INDENT: Final[int] = 5
GRADLE_VERSION_ARROW: Final[str] = " -> "


@dataclass(slots=True)
class _ConfigurationBuilder:
    name: str
    description: str | None
    dependencies: list[GradleDependency] = field(default_factory=list)
    seen: set[str] = field(default_factory=set)

    def add(self, dependency: GradleDependency) -> None:
        key = dependency.coordinate
        if key in self.seen:
            return
        self.seen.add(key)
        self.dependencies.append(dependency)

    def build(self) -> GradleConfiguration:
        return GradleConfiguration(
            configuration=self.name,
            description=self.description,
            dependencies=tuple(self.dependencies),
        )


def _parse_gradle_coordinate(coordinate: str, depth: int, *, resolved: bool) -> GradleDependency | None:
    """Turn ``group:artifact[:version][ -> version]`` into a dependency.

    The declared (left-hand) version wins unless ``resolved`` is set; when a
    side has no version the other side is used.
    """

    text = GRADLE_MARKER_PATTERN.sub("", coordinate).strip()
    declared_text, arrow, resolved_text = text.partition(GRADLE_VERSION_ARROW)
    parts = declared_text.strip().split(":")
    if len(parts) < 2 or any(not part or " " in part for part in parts[:2]):
        return None
    declared_version = parts[2] if len(parts) > 2 and parts[2] else None
    resolved_version = resolved_text.strip().rsplit(":", 1)[-1] if arrow else None
    if resolved:
        version = resolved_version or declared_version
    else:
        version = declared_version or resolved_version
    return GradleDependency(group=parts[0], artifact=parts[1], version=version, depth=depth)


def parse_gradle_dependencies(raw: RawInput, *, resolved: bool = False) -> GradleDependenciesResult:
    """Parse ``gradle dependencies --console=plain``.

    Configuration headers open groups and tree prefixes give each entry its
    depth. Within a configuration an entry is kept only on its first
    ``group:artifact:version`` occurrence; repeat and constraint markers are
    dropped and configurations left empty are omitted.

    Args:
        raw: Captured Gradle output.
        resolved: Report the right-hand side of ``old -> new`` upgrades.

    Returns:
        GradleDependenciesResult: Non-empty configurations in output order.
    """

    raw = as_raw(raw)
    configurations: list[_ConfigurationBuilder] = []
    current: _ConfigurationBuilder | None = None
    stats = ParseStats()
    for line in stdout_lines(raw):
        stripped = line.strip()
        if not stripped or stripped.startswith(GRADLE_SKIP_PREFIXES) or stripped == "No dependencies":
            continue
        dependency_match = GRADLE_DEPENDENCY_PATTERN.match(line)
        if dependency_match is not None:
            if current is None:
                stats.dropped += 1
                continue
            depth = len(dependency_match.group("prefix")) // GRADLE_INDENT
            dependency = _parse_gradle_coordinate(dependency_match.group("coordinate"), depth, resolved=resolved)
            if dependency is None:
                stats.dropped += 1
                continue
            stats.matched += 1
            current.add(dependency)
            continue
        config_match = GRADLE_CONFIG_PATTERN.match(stripped)
        if config_match is not None and line == line.lstrip():
            current = _ConfigurationBuilder(config_match.group("name"), config_match.group("description"))
            configurations.append(current)
            stats.matched += 1
            continue
        stats.dropped += 1
    log_stats("gradle-dependencies", stats)
    return GradleDependenciesResult(
        resolved=resolved,
        configurations=tuple(config.build() for config in configurations if config.dependencies),
    )


MAVEN_INFO_PREFIX: Final[re.Pattern[str]] = re.compile(r"^\[INFO\] ?")
MAVEN_DEPENDENCY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<prefix>[|\s]*)[+\\]-\s+(?P<coordinate>\S+)",
)
MAVEN_INDENT: Final[int] = 3
MAVEN_COORDINATE_WITH_SCOPE: Final[int] = 5
MAVEN_COORDINATE_WITH_CLASSIFIER: Final[int] = 6


def _parse_maven_coordinate(coordinate: str, depth: int) -> MavenDependency | None:
    """Split ``group:artifact:type[:classifier]:version[:scope]``."""

    parts = coordinate.split(":")
    if len(parts) < 4 or not all(parts):
        return None
    scope: str | None = None
    if len(parts) >= MAVEN_COORDINATE_WITH_CLASSIFIER:
        group, artifact, packaging, _classifier, version, scope = parts[:6]
    elif len(parts) == MAVEN_COORDINATE_WITH_SCOPE:
        group, artifact, packaging, version, scope = parts
    else:
        group, artifact, packaging, version = parts
    return MavenDependency(
        group_id=group,
        artifact_id=artifact,
        packaging=packaging,
        version=version,
        scope=scope,
        depth=depth,
    )


def parse_maven_dependencies(raw: RawInput) -> MavenDependenciesResult:
    """Parse ``mvn dependency:tree``, keeping the first entry per ``group:artifact``."""

    raw = as_raw(raw)
    dependencies: list[MavenDependency] = []
    seen: set[str] = set()
    stats = ParseStats()
    for line in stdout_lines(raw):
        body = MAVEN_INFO_PREFIX.sub("", line)
        match = MAVEN_DEPENDENCY_PATTERN.match(body)
        if match is None:
            if body.strip():
                stats.dropped += 1
            continue
        dependency = _parse_maven_coordinate(match.group("coordinate"), len(match.group("prefix")) // MAVEN_INDENT)
        if dependency is None:
            stats.dropped += 1
            continue
        stats.matched += 1
        key = f"{dependency.group_id}:{dependency.artifact_id}"
        if key in seen:
            continue
        seen.add(key)
        dependencies.append(dependency)
    log_stats("maven-dependencies", stats)
    return MavenDependenciesResult(dependencies=tuple(dependencies))


__all__ = ["parse_gradle_dependencies", "parse_maven_dependencies"]

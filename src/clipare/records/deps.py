# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records for dependency-tree listings."""

from __future__ import annotations

from typing import ClassVar, Literal

from pydantic import computed_field

from ..core.models import RecordModel, ToolRecord


class GradleDependency(RecordModel):
    group: str
    artifact: str
    version: str | None = None
    depth: int = 0

    @property
    def coordinate(self) -> str:
        base = f"{self.group}:{self.artifact}"
        return f"{base}:{self.version}" if self.version else base


class GradleConfiguration(RecordModel):
    configuration: str
    description: str | None = None
    dependencies: tuple[GradleDependency, ...] = ()


class GradleDependenciesResult(ToolRecord):
    """Dependencies per configuration from ``gradle dependencies``.

    Versions are the declared (left-hand) side of ``old -> new`` notations
    unless ``resolved`` is set.
    """

    LABEL: ClassVar[str] = "gradle"

    kind: Literal["gradle-dependencies"] = "gradle-dependencies"
    resolved: bool = False
    configurations: tuple[GradleConfiguration, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_dependencies(self) -> int:
        return sum(len(config.dependencies) for config in self.configurations)


class GradleDependenciesCompact(RecordModel):
    kind: Literal["gradle-dependencies"] = "gradle-dependencies"
    total_dependencies: int
    configuration_count: int


class MavenDependency(RecordModel):
    group_id: str
    artifact_id: str
    packaging: str = "jar"
    version: str
    scope: str | None = None
    depth: int = 0


class MavenDependenciesResult(ToolRecord):
    LABEL: ClassVar[str] = "maven"

    kind: Literal["maven-dependencies"] = "maven-dependencies"
    dependencies: tuple[MavenDependency, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return len(self.dependencies)


class MavenDependenciesCompact(RecordModel):
    kind: Literal["maven-dependencies"] = "maven-dependencies"
    total: int
    direct: int


__all__ = [
    "GradleConfiguration",
    "GradleDependenciesCompact",
    "GradleDependenciesResult",
    "GradleDependency",
    "MavenDependenciesCompact",
    "MavenDependenciesResult",
    "MavenDependency",
]

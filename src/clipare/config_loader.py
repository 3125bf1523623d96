# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered loading of clipare settings.

Layers are applied in order: built-in defaults, ``[tool.clipare]`` in
``pyproject.toml``, ``.clipare.toml`` and finally ``CLIPARE_*`` environment
variables. Each applied value is recorded as a :class:`FieldUpdate`.
"""

from __future__ import annotations

import copy
import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import Config, ConfigError, OutputConfig

LOGGER = logging.getLogger(__name__)

PROJECT_CONFIG_NAME: Final[str] = ".clipare.toml"
PYPROJECT_NAME: Final[str] = "pyproject.toml"
PYPROJECT_TABLE: Final[tuple[str, str]] = ("tool", "clipare")
ENV_PREFIX: Final[str] = "CLIPARE_"

# Parsed TOML documents keyed by resolved path and modification time.
_TOML_CACHE: dict[tuple[Path, int], dict[str, Any]] = {}


@runtime_checkable
class ConfigSource(Protocol):
    """One configuration layer."""

    name: str

    def load(self) -> Mapping[str, Any]:
        """Return the ``{section: {field: value}}`` fragment of this layer."""
        ...

    def describe(self) -> str:
        ...


class DefaultConfigSource:
    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return Config().to_dict()

    def describe(self) -> str:
        return "clipare defaults"


def _read_toml(path: Path) -> dict[str, Any]:
    resolved = path.resolve()
    key = (resolved, resolved.stat().st_mtime_ns)
    cached = _TOML_CACHE.get(key)
    if cached is None:
        try:
            with resolved.open("rb") as handle:
                cached = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        _TOML_CACHE[key] = cached
    return copy.deepcopy(cached)


class TomlConfigSource:
    """A standalone TOML file whose top-level tables are config sections."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        return _read_toml(self.path) if self.path.is_file() else {}

    def describe(self) -> str:
        return f"{self.name} (TOML)"


class PyProjectConfigSource(TomlConfigSource):
    """The ``[tool.clipare]`` table of a ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        table: Any = super().load()
        for key in PYPROJECT_TABLE:
            table = table.get(key) if isinstance(table, Mapping) else None
        return dict(table) if isinstance(table, Mapping) else {}

    def describe(self) -> str:
        return f"{self.name} [tool.clipare]"


class EnvConfigSource:
    """Read ``CLIPARE_<FIELD>`` variables into the ``output`` section.

    Values stay strings; pydantic coerces them when the merged config is
    validated.
    """

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None, *, prefix: str = ENV_PREFIX) -> None:
        self._env = os.environ if env is None else env
        self._prefix = prefix

    def load(self) -> Mapping[str, Any]:
        output = {
            field: self._env[key]
            for field in OutputConfig.model_fields
            if (key := f"{self._prefix}{field.upper()}") in self._env
        }
        return {"output": output} if output else {}

    def describe(self) -> str:
        return f"{self._prefix}* environment variables"


class FieldUpdate(BaseModel):
    """A value applied by one layer."""

    model_config = ConfigDict(frozen=True)

    section: str
    field: str
    source: str
    value: Any


class ConfigLoadResult(BaseModel):
    """Resolved config plus the updates and warnings collected while layering."""

    model_config = ConfigDict(frozen=True)

    config: Config
    updates: list[FieldUpdate] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ConfigLoader:
    """Merge configuration layers; a later layer overrides an earlier one per field."""

    def __init__(self, *, sources: Sequence[ConfigSource]) -> None:
        if not sources:
            raise ValueError("ConfigLoader needs at least one source")
        self._sources = tuple(sources)

    @classmethod
    def for_root(
        cls,
        project_root: Path,
        *,
        project_config: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ConfigLoader:
        """Build the standard layer stack for ``project_root``.

        Args:
            project_root: Directory holding ``pyproject.toml`` and ``.clipare.toml``.
            project_config: Alternative path to use instead of ``.clipare.toml``.
            env: Environment mapping; ``os.environ`` when omitted.
        """

        base = project_root.resolve()
        clipare_toml = project_config or base / PROJECT_CONFIG_NAME
        layers: list[ConfigSource] = [DefaultConfigSource()]
        if (base / PYPROJECT_NAME).is_file():
            layers.append(PyProjectConfigSource(base / PYPROJECT_NAME))
        layers.append(TomlConfigSource(clipare_toml, name=str(clipare_toml)))
        layers.append(EnvConfigSource(env))
        return cls(sources=layers)

    def load(self, *, strict: bool = False) -> Config:
        return self.load_with_trace(strict=strict).config

    def load_with_trace(self, *, strict: bool = False) -> ConfigLoadResult:
        """Apply every layer and validate the merged result.

        Args:
            strict: Raise on unknown sections or keys instead of warning.

        Raises:
            ConfigError: If a layer is malformed, an unknown key is seen in
                strict mode, or a merged value fails validation.
        """

        merged = Config().to_dict()
        updates: list[FieldUpdate] = []
        warnings: list[str] = []
        for source in self._sources:
            fragment = source.load()
            LOGGER.debug("config layer %s: %d sections", source.describe(), len(fragment))
            if fragment:
                updates.extend(_apply_layer(merged, fragment, source.name, warnings))
        if warnings and strict:
            raise ConfigError("; ".join(warnings))
        for warning in warnings:
            LOGGER.warning(warning)
        try:
            config = Config.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc
        return ConfigLoadResult(config=config, updates=updates, warnings=warnings)


def _apply_layer(
    merged: dict[str, Any],
    fragment: Mapping[str, Any],
    source: str,
    warnings: list[str],
) -> list[FieldUpdate]:
    applied: list[FieldUpdate] = []
    for section, values in fragment.items():
        target = merged.get(section)
        if target is None:
            warnings.append(f"{source}: unknown section '{section}'")
            continue
        if not isinstance(values, Mapping):
            raise ConfigError(f"{source}: section '{section}' must be a table")
        for key, value in values.items():
            if key not in target:
                warnings.append(f"{source}: unknown key '{section}.{key}'")
            elif target[key] != value:
                target[key] = value
                applied.append(FieldUpdate(section=section, field=key, source=source, value=value))
    return applied


def load_config(project_root: Path, *, env: Mapping[str, str] | None = None) -> Config:
    """Return the resolved :class:`Config` for ``project_root``."""
    return ConfigLoader.for_root(project_root, env=env).load()


__all__ = [
    "ConfigLoadResult",
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "EnvConfigSource",
    "FieldUpdate",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]

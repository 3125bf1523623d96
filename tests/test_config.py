# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from clipare.config import Config, ConfigError
from clipare.config_loader import ConfigLoader, EnvConfigSource, load_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_files(tmp_path: Path) -> None:
    assert load_config(tmp_path, env={}) == Config()


def test_project_file_overrides_pyproject(tmp_path: Path) -> None:
    _write(tmp_path / "pyproject.toml", "[tool.clipare.output]\nchars_per_token = 5\ncompact_margin = 2.0\n")
    project = _write(tmp_path / ".clipare.toml", "[output]\nchars_per_token = 3\ncompact = false\n")

    result = ConfigLoader.for_root(tmp_path, env={}).load_with_trace()

    output = result.config.output
    assert (output.chars_per_token, output.compact_margin, output.compact) == (3, 2.0, False)
    final_cpt = [update for update in result.updates if update.field == "chars_per_token"][-1]
    assert final_cpt.source == str(project.resolve())
    assert result.warnings == []


def test_environment_wins_and_is_coerced(tmp_path: Path) -> None:
    _write(tmp_path / ".clipare.toml", "[output]\ncompact = true\n")
    env = {"CLIPARE_COMPACT": "false", "CLIPARE_COMPACT_DIAGNOSTIC_LIMIT": "3", "UNRELATED": "1"}

    config = load_config(tmp_path, env=env)

    assert config.output.compact is False
    assert config.output.compact_diagnostic_limit == 3


def test_env_source_ignores_foreign_variables() -> None:
    assert EnvConfigSource({"PATH": "/bin"}).load() == {}


def test_invalid_value_raises_config_error(tmp_path: Path) -> None:
    _write(tmp_path / ".clipare.toml", "[output]\nchars_per_token = 0\n")

    with pytest.raises(ConfigError, match="invalid configuration"):
        load_config(tmp_path, env={})


def test_malformed_toml_raises_config_error(tmp_path: Path) -> None:
    _write(tmp_path / ".clipare.toml", "[output\ncompact = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path, env={})


def test_non_table_section_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path / ".clipare.toml", "output = 3\n")

    with pytest.raises(ConfigError, match="must be a table"):
        load_config(tmp_path, env={})


def test_unknown_keys_warn_or_fail_in_strict_mode(tmp_path: Path) -> None:
    _write(tmp_path / ".clipare.toml", "[output]\nverbosity = 2\n\n[cache]\ndir = 'x'\n")
    loader = ConfigLoader.for_root(tmp_path, env={})

    result = loader.load_with_trace()

    assert len(result.warnings) == 2
    assert result.config == Config()
    with pytest.raises(ConfigError, match="unknown key 'output.verbosity'"):
        loader.load(strict=True)

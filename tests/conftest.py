# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from clipare.core.models import RawToolOutput

SHA_A = "a" * 40
SHA_B = "b" * 40


@pytest.fixture
def make_raw() -> Callable[..., RawToolOutput]:
    """Return a factory building :class:`RawToolOutput` instances."""

    def _make(stdout: str = "", stderr: str = "", exit_code: int = 0, **extra: object) -> RawToolOutput:
        return RawToolOutput(stdout=stdout, stderr=stderr, exit_code=exit_code, **extra)

    return _make


@pytest.fixture
def blame_porcelain() -> str:
    """Three lines authored A, B, A in porcelain form; A's metadata appears once."""

    return "\n".join(
        [
            f"{SHA_A} 1 1 1",
            "author Alice",
            "author-mail <alice@example.com>",
            "author-time 1700000000",
            "author-tz +0000",
            "committer Alice",
            "committer-mail <alice@example.com>",
            "committer-time 1700000000",
            "committer-tz +0000",
            "summary Initial commit",
            "filename main.go",
            "\tpackage main",
            f"{SHA_B} 2 2 1",
            "author Bob",
            "author-mail <bob@example.com>",
            "author-time 1700003600",
            "author-tz +0000",
            "summary Add imports",
            "previous " + SHA_A + " main.go",
            "filename main.go",
            '\timport "fmt"',
            f"{SHA_A} 3 3 1",
            "\tfunc main() {}",
        ],
    )


@pytest.fixture
def go_test_rerun_events() -> str:
    """A ``go test -json`` stream where TestX fails and then passes on rerun."""

    return "\n".join(
        [
            '{"Action":"run","Package":"example.com/pkg","Test":"TestX"}',
            '{"Action":"output","Package":"example.com/pkg","Test":"TestX","Output":"=== RUN   TestX\\n"}',
            '{"Action":"fail","Package":"example.com/pkg","Test":"TestX","Elapsed":0.01}',
            '{"Action":"run","Package":"example.com/pkg","Test":"TestX"}',
            '{"Action":"pass","Package":"example.com/pkg","Test":"TestX","Elapsed":0.02}',
            '{"Action":"pass","Package":"example.com/pkg","Elapsed":0.5}',
        ],
    )

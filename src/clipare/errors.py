# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy and failure classification for wrapped tool runs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict

from .core.models import RawToolOutput


class ClipareError(Exception):
    """Base class for errors raised by clipare."""


class InvalidArgumentError(ClipareError, ValueError):
    """Raised when a caller passes arguments that violate an API contract."""


class NoJsonFoundError(ClipareError):
    """Raised by :func:`clipare.extraction.extract_json` when no balanced JSON span exists."""


class UnknownToolError(ClipareError, KeyError):
    """Raised when a tool-command name is not present in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown tool command: {self.name!r}"


class ErrorCategory(StrEnum):
    """Classes of tool failure a client can match on programmatically."""

    COMMAND_NOT_FOUND = "command-not-found"
    PERMISSION_DENIED = "permission-denied"
    TIMEOUT = "timeout"
    INVALID_INPUT = "invalid-input"
    NOT_FOUND = "not-found"
    NETWORK_ERROR = "network-error"
    AUTHENTICATION_ERROR = "authentication-error"
    CONFLICT = "conflict"
    CONFIGURATION_ERROR = "configuration-error"
    ALREADY_EXISTS = "already-exists"
    COMMAND_FAILED = "command-failed"


@dataclass(frozen=True, slots=True)
class FailureRule:
    """Map a text pattern to an :class:`ErrorCategory`."""

    category: ErrorCategory
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(category: ErrorCategory, *needles: str) -> FailureRule:
    return FailureRule(category, re.compile("|".join(needles), re.IGNORECASE))


TIMEOUT_EXIT_CODE: Final[int] = 124

# Order matters: "permission denied (publickey" is an auth failure, and conflict
# messages often carry paths that read "not found".
FAILURE_RULES: Final[tuple[FailureRule, ...]] = (
    _rule(ErrorCategory.TIMEOUT, r"timed out", r"timeout"),
    _rule(
        ErrorCategory.COMMAND_NOT_FOUND,
        r"command not found",
        r"not recognized",
        r"enoent",
        r"no such file or directory",
    ),
    _rule(
        ErrorCategory.AUTHENTICATION_ERROR,
        r"authenticat",
        r"credential",
        r"unauthorized",
        r" 40[13][ :]",
        r"permission denied \(publickey",
        r"login required",
    ),
    _rule(
        ErrorCategory.PERMISSION_DENIED,
        r"permission denied",
        r"eacces",
        r"eperm",
        r"access denied",
        r"operation not permitted",
    ),
    _rule(
        ErrorCategory.NETWORK_ERROR,
        r"connection refused",
        r"econnrefused",
        r"etimedout",
        r"econnreset",
        r"enetunreach",
        r"could not resolve host",
        r"network is unreachable",
        r"dns resolution failed",
    ),
    _rule(ErrorCategory.ALREADY_EXISTS, r"already exists?"),
    _rule(
        ErrorCategory.CONFIGURATION_ERROR,
        r"missing config",
        r"configuration error",
        r"config file not found",
        r"invalid configuration",
        r"no configuration",
        r"could not read config",
    ),
    _rule(ErrorCategory.CONFLICT, r"conflict", r"lock file", r"locked"),
    _rule(
        ErrorCategory.NOT_FOUND,
        r"not found",
        r"does not exist",
        r"no such",
        r" 404[ :]",
        r"unknown revision",
        r"pathspec",
    ),
)

SUGGESTIONS: Final[dict[ErrorCategory, str]] = {
    ErrorCategory.COMMAND_NOT_FOUND: 'Ensure "{command}" is installed and available in your PATH.',
    ErrorCategory.PERMISSION_DENIED: "Check file/directory permissions or run with elevated privileges.",
    ErrorCategory.TIMEOUT: "The command took too long. Retry with a longer timeout or a smaller scope.",
    ErrorCategory.INVALID_INPUT: "Check the input parameters and try again.",
    ErrorCategory.NOT_FOUND: "Verify the resource (file, branch, ref, etc.) exists.",
    ErrorCategory.NETWORK_ERROR: "Check your network connection and try again.",
    ErrorCategory.AUTHENTICATION_ERROR: "Verify your credentials or tokens are valid and not expired.",
    ErrorCategory.CONFLICT: "Resolve the conflict or release the lock and retry.",
    ErrorCategory.CONFIGURATION_ERROR: "Check that all required config files exist and are valid.",
    ErrorCategory.ALREADY_EXISTS: "The resource already exists. Use a different name or remove it first.",
    ErrorCategory.COMMAND_FAILED: 'Inspect the error message from "{command}" for more details.',
}


class ToolError(BaseModel):
    """Structured description of a failed tool invocation."""

    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    message: str
    command: str | None = None
    exit_code: int | None = None
    suggestion: str | None = None


def classify_text(text: str, exit_code: int, *, timed_out: bool = False) -> ErrorCategory:
    """Return the most specific :class:`ErrorCategory` for ``text``.

    Args:
        text: stderr (or stdout when stderr is empty) of the failed run.
        exit_code: Exit status reported by the process.
        timed_out: Whether the process collaborator killed the run.

    Returns:
        ErrorCategory: First matching category, ``command-failed`` otherwise.
    """

    if timed_out or exit_code == TIMEOUT_EXIT_CODE:
        return ErrorCategory.TIMEOUT
    for rule in FAILURE_RULES:
        if rule.matches(text):
            return rule.category
    return ErrorCategory.COMMAND_FAILED


def classify_failure(raw: RawToolOutput, command: str) -> ToolError:
    """Classify a failed invocation into a :class:`ToolError`.

    Args:
        raw: Output captured from the failed run.
        command: Human-readable command label such as ``"git blame"``.

    Returns:
        ToolError: Populated error including a recovery suggestion.
    """

    text = raw.stderr or raw.stdout
    category = classify_text(text, raw.exit_code, timed_out=raw.timed_out)
    message = text.strip() or f"{command} failed with exit code {raw.exit_code}"
    return ToolError(
        category=category,
        message=message,
        command=command,
        exit_code=raw.exit_code,
        suggestion=SUGGESTIONS[category].format(command=command),
    )


def invalid_input_error(message: str) -> ToolError:
    """Describe a request rejected before any tool output was parsed."""

    return ToolError(
        category=ErrorCategory.INVALID_INPUT,
        message=message,
        suggestion=SUGGESTIONS[ErrorCategory.INVALID_INPUT],
    )


def format_tool_error(error: ToolError) -> str:
    """Render ``error`` as plain text."""

    lines = [f"Error [{error.category.value}]: {error.message}"]
    if error.command:
        lines.append(f"Command: {error.command}")
    if error.exit_code is not None:
        lines.append(f"Exit code: {error.exit_code}")
    if error.suggestion:
        lines.append(f"Suggestion: {error.suggestion}")
    return "\n".join(lines)


__all__ = [
    "FAILURE_RULES",
    "ClipareError",
    "ErrorCategory",
    "FailureRule",
    "InvalidArgumentError",
    "NoJsonFoundError",
    "ToolError",
    "UnknownToolError",
    "classify_failure",
    "classify_text",
    "format_tool_error",
    "invalid_input_error",
]

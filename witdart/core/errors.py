"""
Error kinds — every failure the generator can report.

These are exceptions so they carry a traceback-friendly ``str()``, but
the pipeline *returns* them inside ``Err`` values instead of raising.
Messages are deterministic and always name the input that caused them
(argument index + token, or file path) so tests can diff them.
"""

from __future__ import annotations


class WitdartError(Exception):
    """Base class for all generator errors."""


# ── CLI arguments ───────────────────────────────────────────────


class ArgumentError(WitdartError):
    """Base class for command-line argument errors."""


class ArgumentFormatError(ArgumentError):
    """Malformed or unrecognized argument token."""

    def __init__(self, index: int, token: str, expected: str):
        self.index = index
        self.token = token
        self.expected = expected
        super().__init__(f"Invalid argument ({index}, {token}). {expected}")


class DuplicateArgumentError(ArgumentError):
    """The same config field was set twice."""

    def __init__(self, index: int, token: str):
        self.index = index
        self.token = token
        super().__init__(f"Duplicate argument ({index}, {token}).")


class MissingPositionalError(ArgumentError):
    """A required positional argument was not supplied."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing positional argument `{name}`.")


# ── Inputs and parsing ──────────────────────────────────────────


class InputNotFoundError(WitdartError):
    """A declared WIT input path could not be located or read."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"WIT input not found: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class WitSyntaxError(WitdartError):
    """WIT text does not parse, or references something undefined."""

    def __init__(self, path: str, detail: str, line: int | None = None, column: int | None = None):
        self.path = path
        self.detail = detail
        self.line = line
        self.column = column
        if line is not None:
            location = f"{path}:{line}:{column if column is not None else 1}"
        else:
            location = path
        super().__init__(f"{location}: {detail}")


class GenerationError(WitdartError):
    """Catch-all wrapping any failure surfaced through ``generate``."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    @classmethod
    def wrap(cls, error: Exception) -> GenerationError:
        """Wrap an underlying error, keeping its message verbatim."""
        if isinstance(error, GenerationError):
            return error
        return cls(str(error), cause=error)


# ── Build configuration ─────────────────────────────────────────


class ConfigError(WitdartError):
    """Raised when witdart.yml is invalid or missing."""

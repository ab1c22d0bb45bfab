"""Error taxonomy for savestate.

Filesystem failures are not wrapped: they surface as the built-in ``OSError``
family (``FileNotFoundError`` when a required directory is missing).
"""

from __future__ import annotations

from pathlib import Path


class SaveStateError(Exception):
    """Base class for errors raised by savestate itself."""


class IdentityUnavailableError(SaveStateError):
    """The environment variable naming the current user is unset or empty."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"Environment variable {variable} is not set")
        self.variable = variable


class RecordParseError(SaveStateError, ValueError):
    """A metadata or status document exists but does not match its schema."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Malformed record at {path}: {reason}")
        self.path = path
        self.reason = reason

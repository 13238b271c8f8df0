"""Exception hierarchy for verdict.

Only programmer errors are raised. Domain failures travel as ``Error``
outcomes and never appear here.
"""

from __future__ import annotations

from typing import Any


class VerdictError(Exception):
    """Base exception for all verdict errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidResultShape(VerdictError):
    """A value that is not an ``Ok``/``Error`` outcome reached a strict check.

    The offending value is kept on ``.value`` for inspection.
    """

    def __init__(
        self, value: Any, message: str, *, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.value = value


class ConfigurationError(VerdictError):
    """Options or configuration failed validation before any work ran."""

"""Configuration: frozen Config injected into the rendering engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import os
from typing import Any, Literal

from verdict.errors import ConfigurationError

LogMode = Literal["errors", "all"]

LOG_MODES: tuple[LogMode, ...] = ("errors", "all")

_APP_ENV_VAR = "VERDICT_APP"
_LOG_MODE_ENV_VAR = "VERDICT_LOG_MODE"
_MIN_CODE_LENGTH = 4

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Load a .env file into the environment the first time config resolves."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    from dotenv import load_dotenv

    load_dotenv()
    _DOTENV_LOADED = True


def check_log_mode(mode: object, *, option: str = "mode") -> LogMode:
    """Return ``mode`` when it is a known log mode, otherwise raise."""
    if mode not in LOG_MODES:
        raise ConfigurationError(
            f"invalid value for {option} option: expected one of "
            f"{list(LOG_MODES)}, got: {mode!r}",
            hint="'errors' logs failures only, 'all' logs successes too.",
        )
    return mode  # type: ignore[return-value]


@dataclass(frozen=True)
class Config:
    """Immutable configuration for rendering and logging outcomes.

    ``app`` and ``log_mode`` are auto-resolved from ``VERDICT_APP`` and
    ``VERDICT_LOG_MODE`` when not given.

    Example:
        config = Config(app="shop")
        # Log lines point at the nearest frame inside the ``shop`` package.
    """

    #: Module prefix of "your" code; log locations prefer frames inside it.
    app: str | None = None
    #: ``"errors"`` logs failures only; ``"all"`` logs successes at INFO too.
    log_mode: LogMode | None = None
    logger_name: str = "verdict"
    #: Length of the public reference code in fallback user messages.
    code_length: int = 8
    #: Renders payloads that have no dedicated rendering.
    inspector: Callable[[Any], str] = repr

    def __post_init__(self) -> None:
        """Auto-resolve environment settings and validate."""
        if self.app is None or self.log_mode is None:
            _load_dotenv_once()
        if self.app is None:
            object.__setattr__(self, "app", os.environ.get(_APP_ENV_VAR) or None)
        if self.log_mode is None:
            object.__setattr__(
                self, "log_mode", os.environ.get(_LOG_MODE_ENV_VAR) or "errors"
            )

        check_log_mode(self.log_mode, option="log_mode")

        if self.app is not None and (not isinstance(self.app, str) or not self.app):
            raise ConfigurationError(
                f"app must be a non-empty module name, got: {self.app!r}",
                hint=f"Set {_APP_ENV_VAR}=myservice or pass Config(app='myservice').",
            )
        if (
            isinstance(self.code_length, bool)
            or not isinstance(self.code_length, int)
            or self.code_length < _MIN_CODE_LENGTH
        ):
            raise ConfigurationError(
                f"code_length must be an integer ≥ {_MIN_CODE_LENGTH}, "
                f"got {self.code_length!r}",
                hint="Short codes collide; the default of 8 is a good fit.",
            )
        if not callable(self.inspector):
            raise ConfigurationError(
                f"inspector must be callable, got: {self.inspector!r}",
                hint="Pass inspector=repr or inspector=pprint.saferepr.",
            )

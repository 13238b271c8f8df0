"""verdict: outcomes as values, with combinators, retries and rendering.

Public API:
    - Ok / Error: the outcome shapes
    - run(), ok_then(), error_then(), tap_ok(), tap_error(): control flow
    - map_if(), find_value(), all_ok(): enumeration over outcomes
    - wrap_context(): attach provenance to failures
    - log(), user_message(): render outcomes for developers and users
    - Config / Renderer: injected configuration for rendering
"""

from __future__ import annotations

import logging

from verdict.combinators import (
    all_ok,
    error_then,
    find_value,
    map_if,
    ok_then,
    ok_then_unsafe,
    run,
    run_unsafe,
    tap_error,
    tap_ok,
)
from verdict.config import Config
from verdict.errors import ConfigurationError, InvalidResultShape, VerdictError
from verdict.logsink import LoggingSink, LogSink
from verdict.outcome import (
    Error,
    Ok,
    Outcome,
    classify,
    is_error,
    is_ok,
    validate,
)
from verdict.render import LogEntry, Renderer, log, render_log, user_message
from verdict.retry import RetryPolicy
from verdict.stacktrace import Origin
from verdict.validation import format_errors
from verdict.wrapper import ContextWrapper, unwrap_chain, wrap_context

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("verdict-results")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("verdict").addHandler(logging.NullHandler())

__all__ = [
    "Config",
    "ConfigurationError",
    "ContextWrapper",
    "Error",
    "InvalidResultShape",
    "LogEntry",
    "LogSink",
    "LoggingSink",
    "Ok",
    "Origin",
    "Outcome",
    "Renderer",
    "RetryPolicy",
    "VerdictError",
    "all_ok",
    "classify",
    "error_then",
    "find_value",
    "format_errors",
    "is_error",
    "is_ok",
    "log",
    "map_if",
    "ok_then",
    "ok_then_unsafe",
    "render_log",
    "run",
    "run_unsafe",
    "tap_error",
    "tap_ok",
    "unwrap_chain",
    "user_message",
    "validate",
    "wrap_context",
]

"""Turn outcomes into developer log lines and end-user messages.

Log line format::

    [RESULT] app/views.py:19: timeout
        [CONTEXT] app/views.py:18: checking out
        [CONTEXT] app/orders.py:40: charging card {'order_id': 7}

User message format::

    timeout (happened while: checking out => charging card)

Failures that cannot be shown to a user safely (exceptions, unknown
payloads) are logged in full under a short reference code and the user
only sees ``"There was an error. Refer to code: K3Q9ZT0A"``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import traceback
from typing import TYPE_CHECKING, Any

from verdict._codes import generate_code
from verdict.config import Config, LogMode, check_log_mode
from verdict.errors import InvalidResultShape
from verdict.logsink import LoggingSink, LogSink
from verdict.outcome import Error, Ok, Outcome, validate
from verdict.stacktrace import capture_stack, most_relevant
from verdict.validation import format_errors, is_validation_error
from verdict.wrapper import ContextWrapper, unwrap_chain

if TYPE_CHECKING:
    from collections.abc import Mapping

    from verdict.stacktrace import Origin

logger = logging.getLogger(__name__)

_CONTEXT_PREFIX = "    [CONTEXT]"


@dataclass(frozen=True, slots=True)
class LogEntry:
    """A rendered log line ready for a sink."""

    level: int
    message: str
    metadata: Mapping[str, Any]


def _exception_text(exc: BaseException) -> str:
    return "".join(traceback.format_exception_only(exc)).strip()


def _metadata_text(metadata: Mapping[Any, Any]) -> str:
    if not metadata:
        return ""
    return repr(dict(sorted(metadata.items(), key=lambda kv: str(kv[0]))))


def _layers(outcome: Outcome) -> list[ContextWrapper]:
    if outcome.arity == 1 and isinstance(outcome.value, ContextWrapper):
        return unwrap_chain(outcome.value)
    return []


class Renderer:
    """Classification and rendering engine.

    Configuration and the log sink are injected; nothing is read from
    global state after construction.
    """

    def __init__(self, config: Config | None = None, sink: LogSink | None = None):
        self.config = config if config is not None else Config()
        self.sink = sink if sink is not None else LoggingSink(self.config.logger_name)

    # --- Developer rendering ---

    def _payload_text(self, outcome: Outcome) -> str:
        if outcome.arity == 1:
            value = outcome.value
            if isinstance(value, str):
                return value
            if isinstance(value, BaseException):
                return _exception_text(value)
        return self.config.inspector(outcome)

    def _location(self, stack: tuple[Origin, ...]) -> str | None:
        origin = most_relevant(stack, self.config.app)
        return origin.location if origin is not None else None

    def _context_line(self, layer: ContextWrapper) -> str:
        details = " ".join(
            part for part in (layer.label, _metadata_text(layer.metadata)) if part
        )
        line = _CONTEXT_PREFIX
        location = self._location(layer.stack)
        if location is not None:
            line += f" {location}:" if details else f" {location}"
        if details:
            line += f" {details}"
        return line

    def describe(self, outcome: Outcome) -> str:
        """Render an outcome's payload plus one line per context layer."""
        layers = _layers(outcome)
        if not layers:
            return self._payload_text(outcome)
        lines = [self._payload_text(layers[-1].wrapped)]
        lines.extend(self._context_line(layer) for layer in layers)
        return "\n".join(lines)

    def render_log(
        self, outcome: object, *, stack: tuple[Origin, ...] | None = None
    ) -> LogEntry:
        """Render ``outcome`` as a log entry without emitting it.

        Accepts loosely tagged values (``("error", reason)``) for display.

        Args:
            outcome: The outcome to render.
            stack: Call stack for the ``[RESULT]`` location. Defaults to the
                caller's stack.

        Returns:
            LogEntry at ERROR for failures and INFO for successes. Its
            metadata merges every context layer's metadata (outer layers
            win) and adds a ``result_details`` summary.
        """
        view = validate(outcome, "loose")
        if stack is None:
            stack = capture_stack()

        body = self.describe(view)
        location = self._location(stack)
        message = f"[RESULT] {location}: {body}" if location else f"[RESULT] {body}"

        layers = _layers(view)
        metadata: dict[str, Any] = {}
        for layer in reversed(layers):
            metadata.update(layer.metadata)
        metadata["result_details"] = {
            "type": "error" if isinstance(view, Error) else "ok",
            "raised": bool(layers) and layers[-1].raised,
            "contexts": [
                {
                    "location": self._location(layer.stack),
                    "label": layer.label,
                    "metadata": dict(layer.metadata),
                }
                for layer in layers
            ],
        }

        level = logging.ERROR if isinstance(view, Error) else logging.INFO
        return LogEntry(level=level, message=message, metadata=metadata)

    def log[T](self, outcome: T, mode: LogMode | None = None) -> T:
        """Log an outcome and return it unchanged.

        ``mode="errors"`` (the default unless configured otherwise) only logs
        failures; ``mode="all"`` logs successes at INFO as well.

        Raises:
            InvalidResultShape: ``outcome`` is not even loosely an outcome.
            ConfigurationError: ``mode`` is not ``"errors"`` or ``"all"``.
        """
        view = validate(outcome, "loose")
        mode = check_log_mode(self.config.log_mode if mode is None else mode)
        if isinstance(view, Error) or mode == "all":
            self._emit(self.render_log(view, stack=capture_stack()))
        return outcome

    # --- User-facing rendering ---

    def user_message(self, outcome: Outcome) -> str:
        """Return a message that is safe to show an end user.

        - ``Error("text")`` returns the text.
        - ``Error(ValidationError)`` returns the formatted field errors.
        - ``Error(ContextWrapper)`` renders the root reason and appends
          ``" (happened while: a => b)"`` from the labelled layers.
        - Anything else is logged under a fresh reference code which is the
          only thing the user gets to see.

        Raises:
            InvalidResultShape: ``outcome`` is not an ``Error``.
        """
        validate(outcome)
        if isinstance(outcome, Ok):
            raise InvalidResultShape(
                outcome, f"user_message requires an Error outcome, got: {outcome!r}"
            )

        if outcome.arity == 1:
            reason = outcome.value
            if isinstance(reason, str):
                return reason
            if is_validation_error(reason):
                return format_errors(reason)
            if isinstance(reason, ContextWrapper):
                return self._wrapped_user_message(reason)
        return self._reference_message(outcome)

    def _wrapped_user_message(self, wrapper: ContextWrapper) -> str:
        layers = unwrap_chain(wrapper)
        message = self.user_message(layers[-1].wrapped)
        # Captured-fault layers carry a callable, which is internal detail.
        labels = [
            layer.context
            for layer in layers
            if isinstance(layer.context, str) and layer.context
        ]
        if labels:
            message += f" (happened while: {' => '.join(labels)})"
        return message

    def _reference_message(self, outcome: Error) -> str:
        code = generate_code(self.config.code_length)
        if outcome.arity == 1:
            reason = outcome.value
            detail = self.config.inspector(reason)
            if isinstance(reason, BaseException):
                detail += f" (message: {reason})"
        else:
            detail = self.config.inspector(outcome)

        self._emit(
            LogEntry(
                level=logging.ERROR,
                message=(
                    f"{code}: Could not generate user error message. "
                    f"Error was: {detail}"
                ),
                metadata={
                    "error_code": code,
                    "result_details": {"type": "error", "reason": detail},
                },
            )
        )
        return f"There was an error. Refer to code: {code}"

    def _emit(self, entry: LogEntry) -> None:
        try:
            self.sink.emit(entry.level, entry.message, entry.metadata)
        except Exception as e:
            logger.error(
                "Log sink '%s' failed: %s",
                type(self.sink).__name__,
                e,
                exc_info=True,
            )


def render_log(outcome: object) -> LogEntry:
    """Render with a default ``Renderer``; see ``Renderer.render_log``."""
    return Renderer().render_log(outcome)


def log[T](outcome: T, mode: LogMode | None = None) -> T:
    """Log with a default ``Renderer``; see ``Renderer.log``."""
    return Renderer().log(outcome, mode)


def user_message(outcome: Outcome) -> str:
    """Render with a default ``Renderer``; see ``Renderer.user_message``."""
    return Renderer().user_message(outcome)


__all__ = ["LogEntry", "Renderer", "log", "render_log", "user_message"]

"""Context layers attached to failures as they bubble up.

``wrap_context`` annotates an ``Error`` with what was being attempted, some
metadata and where it happened. Layers nest: wrapping an already wrapped
error adds one more layer around it. ``Ok`` outcomes are never touched.

The context label should describe the action being attempted in business
terms ("fetching user"), not the failure ("failed to fetch user").
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any

from verdict._validation import _freeze_mapping, _is_pairs
from verdict.errors import ConfigurationError
from verdict.outcome import Error, Outcome, validate
from verdict.stacktrace import (
    Origin,
    callable_label,
    capture_stack,
    stack_from_exception,
)

log = logging.getLogger(__name__)

type Context = str | Callable[..., Any] | None


@dataclass(frozen=True, slots=True)
class ContextWrapper:
    """One provenance layer around a failure.

    Attributes:
        wrapped: The ``Error`` being annotated. Its payload may itself be a
            ``ContextWrapper``.
        context: Label of the attempted action, or for captured faults the
            callable that raised.
        metadata: Read-only key/value pairs merged into log metadata.
        stack: Application frames at wrap (or raise) time, nearest first.
    """

    wrapped: Error
    context: Context = None
    metadata: Mapping[Any, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    stack: tuple[Origin, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze_mapping(self.metadata))

    @property
    def origin(self) -> Origin | None:
        return self.stack[0] if self.stack else None

    @property
    def raised(self) -> bool:
        """True when this layer records a captured exception."""
        return callable(self.context) and isinstance(
            self.wrapped.value, BaseException
        )

    @property
    def label(self) -> str | None:
        if self.context is None or isinstance(self.context, str):
            return self.context
        return callable_label(self.context)

    @property
    def inner(self) -> ContextWrapper | None:
        """The next layer down, if the wrapped error is itself wrapped."""
        if self.wrapped.arity == 1 and isinstance(self.wrapped.value, ContextWrapper):
            return self.wrapped.value
        return None

    @property
    def root(self) -> Error:
        """The innermost wrapped ``Error`` once every layer is peeled off."""
        return unwrap_chain(self)[-1].wrapped

    @property
    def root_reason(self) -> Any:
        return self.root.value

    @property
    def message(self) -> str:
        """Developer-facing rendering, the same text ``log`` emits.

        The log mode is pinned so a bad ``VERDICT_LOG_MODE`` cannot break
        ``str()``; ``VERDICT_APP`` still picks the reported frames.
        """
        from verdict.config import Config
        from verdict.render import Renderer

        return Renderer(config=Config(log_mode="errors")).describe(Error(self))

    def __str__(self) -> str:
        return self.message


def wrap_context(
    outcome: Outcome,
    context: str | Mapping[Any, Any] | list[tuple[Any, Any]] | None = None,
    metadata: Mapping[Any, Any] | list[tuple[Any, Any]] | None = None,
) -> Outcome:
    """Annotate a failure with context, leaving successes unchanged.

    Args:
        outcome: Any outcome. ``Ok`` values are returned as-is.
        context: What was being attempted. A mapping (or list of pairs) in
            this position is taken as ``metadata`` when ``metadata`` is
            not given.
        metadata: Extra key/value pairs for log output.

    Returns:
        The ``Ok`` unchanged, or ``Error(ContextWrapper(...))``.

    Example:
        wrap_context(Error("timeout"), "fetching user", {"user_id": 123})
    """
    validate(outcome)
    if metadata is None and (isinstance(context, Mapping) or _is_pairs(context)):
        context, metadata = None, context
    if context is not None and not isinstance(context, str):
        raise ConfigurationError(
            f"context must be a string, got: {context!r}",
            hint="Describe the action being attempted, e.g. 'fetching user'.",
        )
    if isinstance(outcome, Error):
        return Error(
            ContextWrapper(
                wrapped=outcome,
                context=context,
                metadata=_freeze_mapping(metadata),
                stack=capture_stack(),
            )
        )
    return outcome


def capture_fault(exc: Exception, func: Callable[..., Any]) -> Error:
    """Turn an exception raised by ``func`` into a wrapped failure."""
    log.debug(
        "Captured %s raised by %s", type(exc).__name__, callable_label(func)
    )
    return Error(
        ContextWrapper(
            wrapped=Error(exc),
            context=func,
            stack=stack_from_exception(exc),
        )
    )


def unwrap_chain(wrapper: ContextWrapper) -> list[ContextWrapper]:
    """Return every layer, outermost first, down to the root reason."""
    layers = [wrapper]
    while (inner := layers[-1].inner) is not None:
        layers.append(inner)
    return layers


__all__ = [
    "Context",
    "ContextWrapper",
    "capture_fault",
    "unwrap_chain",
    "wrap_context",
]

"""Call-site introspection for log lines and context layers.

Frames that belong to verdict itself are always skipped so every origin
points at application code.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
import sys
import traceback
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from types import FrameType, TracebackType

_PACKAGE = __name__.partition(".")[0]


@dataclass(frozen=True, slots=True)
class Origin:
    """A single source location."""

    filename: str
    lineno: int
    function: str
    module: str | None = None

    @property
    def location(self) -> str:
        """``"<path>:<line>"``, relative to the working directory when possible."""
        return f"{_display_path(self.filename)}:{self.lineno}"

    @property
    def label(self) -> str:
        if self.module:
            return f"{self.module}.{self.function}"
        return self.function


def _display_path(filename: str) -> str:
    try:
        rel = os.path.relpath(filename)
    except ValueError:
        # Different drive on Windows.
        return filename
    if rel.startswith(os.pardir):
        return filename
    return rel


def _in_app(module: str | None, app: str) -> bool:
    return module is not None and (module == app or module.startswith(app + "."))


def _is_internal(module: str | None) -> bool:
    return module is not None and _in_app(module, _PACKAGE)


def _origins(frames: Iterable[tuple[FrameType, int]]) -> Iterator[Origin]:
    for frame, lineno in frames:
        module = frame.f_globals.get("__name__")
        if _is_internal(module):
            continue
        yield Origin(
            filename=frame.f_code.co_filename,
            lineno=lineno,
            function=frame.f_code.co_qualname,
            module=module,
        )


def capture_stack() -> tuple[Origin, ...]:
    """Return the live call stack, nearest application frame first."""
    return tuple(_origins(traceback.walk_stack(sys._getframe(1))))


def stack_from_exception(exc: BaseException) -> tuple[Origin, ...]:
    """Return the frames an exception travelled through, innermost first."""
    tb: TracebackType | None = exc.__traceback__
    return tuple(reversed(list(_origins(traceback.walk_tb(tb)))))


def most_relevant(stack: Iterable[Origin], app: str | None = None) -> Origin | None:
    """Pick the frame worth reporting.

    Without ``app`` this is the nearest frame. With ``app`` (a module
    prefix such as ``"myservice"``) it is the nearest frame inside that
    package, or None when the stack never entered it.
    """
    for origin in stack:
        if app is None or _in_app(origin.module, app):
            return origin
    return None


def calling_origin(app: str | None = None) -> Origin | None:
    """Return the most relevant origin of whoever called into verdict."""
    return most_relevant(capture_stack(), app)


def callable_label(func: Callable[..., Any]) -> str:
    """Describe a callable as ``module.qualname`` for context lines."""
    module = getattr(func, "__module__", None)
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if name is None:
        name = type(func).__qualname__
    return f"{module}.{name}" if module else name


__all__ = [
    "Origin",
    "callable_label",
    "calling_origin",
    "capture_stack",
    "most_relevant",
    "stack_from_exception",
]

"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built. Functions here also serve as a
second module in the call stack for app-frame selection tests.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import re
from typing import Any

from verdict import LogEntry, Outcome, Renderer

CODE_PATTERN = re.compile(r"Refer to code: ([A-Z0-9]{8})")


@dataclass
class Scripted:
    """Callable that returns (or raises) a scripted sequence of items.

    Once the script is exhausted every call returns ``then``. Exceptions in
    the script are raised instead of returned.
    """

    script: list[Any] = field(default_factory=list)
    then: Any = None
    calls: int = 0
    args: list[tuple[Any, ...]] = field(default_factory=list)

    def __call__(self, *args: Any) -> Any:
        self.calls += 1
        self.args.append(args)
        item = self.script.pop(0) if self.script else self.then
        if isinstance(item, BaseException):
            raise item
        return item


def fails_times(times: int, failure: Any, success: Any) -> Scripted:
    """Fail ``times`` times, then succeed forever.

    ``failure`` may be a zero-argument factory so each attempt can raise a
    fresh exception instance.
    """
    script = [failure() if callable(failure) else failure for _ in range(times)]
    return Scripted(script=script, then=success)


@dataclass
class RecordingSink:
    """Log sink that keeps every emitted entry."""

    entries: list[LogEntry] = field(default_factory=list)

    def emit(self, level: int, message: str, metadata: Mapping[str, Any]) -> None:
        self.entries.append(LogEntry(level=level, message=message, metadata=metadata))

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]


def log_via_helper(renderer: Renderer, outcome: Outcome, mode: Any = None) -> Outcome:
    result = renderer.log(outcome, mode)
    return result


def call_through(func: Callable[[], Any]) -> Any:
    return func()


def raise_value_error(_: Any) -> Any:
    raise ValueError("amount too high")


def reference_code(message: str) -> str:
    match = CODE_PATTERN.search(message)
    assert match is not None, message
    return match.group(1)

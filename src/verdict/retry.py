"""Bounded, immediate retries around a single unit of work.

Design goals:
- One knob: how many extra attempts are allowed after the first.
- Explicit state (policy + remaining budget), attempts strictly sequential.
- Validation happens before the first attempt, never mid-flight.
- Programmer errors (``VerdictError``) are never captured or retried, even
  when a nested combinator raises them from inside the unit.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from verdict.errors import ConfigurationError, VerdictError
from verdict.outcome import Error, Outcome

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a failed unit of work is re-invoked."""

    retries: int = 0

    def __post_init__(self) -> None:
        """Reject anything but a non-negative integer."""
        # bool is an int subclass; retries=True is almost certainly a bug.
        if (
            isinstance(self.retries, bool)
            or not isinstance(self.retries, int)
            or self.retries < 0
        ):
            raise ConfigurationError(
                "invalid value for retries option: expected non negative integer, "
                f"got: {self.retries!r}",
                hint="Pass retries=0 (the default) or a positive whole number.",
            )


def attempt(
    unit: Callable[[], Outcome],
    *,
    policy: RetryPolicy,
    capture: Callable[[Exception], Outcome] | None = None,
) -> Outcome:
    """Run ``unit`` until it returns ``Ok`` or the retry budget is spent.

    Args:
        unit: Zero-argument callable producing an outcome.
        policy: The retry budget.
        capture: Converts a raised exception into an outcome. When omitted,
            exceptions propagate on the spot and are never retried.
            ``VerdictError`` always propagates.

    Returns:
        The first ``Ok``, or the last ``Error`` observed.
    """
    remaining = policy.retries
    while True:
        try:
            outcome = unit()
        except VerdictError:
            raise
        except Exception as exc:
            if capture is None:
                raise
            outcome = capture(exc)

        if remaining <= 0 or not isinstance(outcome, Error):
            return outcome

        remaining -= 1
        log.debug("Attempt failed with %r; %d retries left", outcome, remaining)

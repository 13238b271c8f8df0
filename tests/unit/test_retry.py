"""Retry loop: budget accounting, capture and logging."""

from __future__ import annotations

import logging

import pytest

from tests.helpers import Scripted
from verdict import ConfigurationError, Error, InvalidResultShape, Ok, RetryPolicy
from verdict.retry import attempt

pytestmark = pytest.mark.unit


def test_policy_defaults_to_a_single_attempt() -> None:
    assert RetryPolicy().retries == 0


@pytest.mark.parametrize("retries", [-1, False, 2.0, "1"])
def test_policy_rejects_non_natural_numbers(retries: object) -> None:
    with pytest.raises(ConfigurationError, match="non negative integer") as exc:
        RetryPolicy(retries=retries)  # type: ignore[arg-type]
    assert exc.value.hint is not None


def test_zero_retries_means_one_attempt() -> None:
    unit = Scripted(then=Error("x"))

    assert attempt(unit, policy=RetryPolicy(0)) == Error("x")
    assert unit.calls == 1


def test_stops_as_soon_as_an_attempt_succeeds() -> None:
    unit = Scripted(script=[Error(1), Ok("done")], then=Error("unreachable"))

    assert attempt(unit, policy=RetryPolicy(5)) == Ok("done")
    assert unit.calls == 2


def test_exceptions_propagate_without_capture() -> None:
    unit = Scripted(script=[ValueError("boom")], then=Ok())

    with pytest.raises(ValueError, match="boom"):
        attempt(unit, policy=RetryPolicy(3))
    assert unit.calls == 1


def test_capture_turns_exceptions_into_outcomes() -> None:
    unit = Scripted(script=[ValueError("a"), ValueError("b")], then=Ok())
    captured: list[str] = []

    def capture(exc: Exception) -> Error:
        captured.append(str(exc))
        return Error(exc)

    outcome = attempt(unit, policy=RetryPolicy(1), capture=capture)

    assert isinstance(outcome.value, ValueError)
    assert captured == ["a", "b"]


def test_base_exceptions_are_never_captured() -> None:
    unit = Scripted(script=[KeyboardInterrupt()])

    with pytest.raises(KeyboardInterrupt):
        attempt(unit, policy=RetryPolicy(2), capture=Error)


def test_verdict_errors_escape_capture() -> None:
    unit = Scripted(script=[InvalidResultShape(5, "bad shape")], then=Ok())
    captured: list[Exception] = []

    def capture(exc: Exception) -> Error:
        captured.append(exc)
        return Error(exc)

    with pytest.raises(InvalidResultShape, match="bad shape"):
        attempt(unit, policy=RetryPolicy(3), capture=capture)
    assert unit.calls == 1
    assert captured == []


def test_logs_each_retry_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="verdict.retry")
    unit = Scripted(script=[Error("a"), Error("b")], then=Ok())

    attempt(unit, policy=RetryPolicy(3))

    messages = [r.getMessage() for r in caplog.records if r.name == "verdict.retry"]
    assert messages == [
        "Attempt failed with Error('a'); 2 retries left",
        "Attempt failed with Error('b'); 1 retries left",
    ]

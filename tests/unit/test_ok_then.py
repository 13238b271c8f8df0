"""ok_then / ok_then_unsafe: chaining work onto successes."""

from __future__ import annotations

import pytest

from tests.helpers import Scripted, fails_times
from verdict import (
    ConfigurationError,
    ContextWrapper,
    Error,
    InvalidResultShape,
    Ok,
    map_if,
    ok_then,
    ok_then_unsafe,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
@pytest.mark.parametrize(
    ("outcome", "payload"),
    [(Ok(), None), (Ok(1), 1), (Ok(1, 2), (1, 2))],
)
def test_payload_depends_on_arity(func, outcome: Ok, payload: object) -> None:
    callback = Scripted(then=Ok())

    func(outcome, callback)

    assert callback.args == [(payload,)]


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
def test_errors_short_circuit(func) -> None:
    callback = Scripted(then=Ok())
    outcome = Error("nope")

    assert func(outcome, callback) is outcome
    assert callback.calls == 0


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
def test_plain_returns_become_ok(func) -> None:
    assert func(Ok(2), lambda v: v * 10) == Ok(20)
    assert func(Ok(2), lambda _: None) == Ok(None)


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
def test_outcome_returns_propagate(func) -> None:
    assert func(Ok(2), lambda v: Error("too small", v)) == Error("too small", 2)


def test_ok_then_unsafe_propagates_exceptions() -> None:
    with pytest.raises(KeyError):
        ok_then_unsafe(Ok({}), lambda d: d["missing"])


def test_ok_then_unsafe_does_not_retry_exceptions() -> None:
    callback = Scripted(script=[RuntimeError("boom")], then=Ok())

    with pytest.raises(RuntimeError):
        ok_then_unsafe(Ok(1), callback, retries=2)
    assert callback.calls == 1


def test_ok_then_captures_exceptions() -> None:
    def lookup(d: dict) -> object:
        return d["missing"]

    outcome = ok_then(Ok({}), lookup)

    wrapper = outcome.value
    assert isinstance(wrapper, ContextWrapper)
    assert wrapper.context is lookup
    assert isinstance(wrapper.root_reason, KeyError)


def test_retries_reuse_the_same_payload() -> None:
    callback = fails_times(2, Error("flaky"), Ok("done"))

    assert ok_then(Ok("order-7"), callback, retries=3) == Ok("done")
    assert callback.args == [("order-7",)] * 3


def test_captured_exceptions_count_against_the_budget() -> None:
    callback = fails_times(3, lambda: RuntimeError("flaky"), Ok("done"))

    outcome = ok_then(Ok(1), callback, retries=2)

    assert isinstance(outcome.value, ContextWrapper)
    assert callback.calls == 3


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
def test_rejects_non_outcome_input(func) -> None:
    with pytest.raises(InvalidResultShape):
        func(("ok", 1), lambda v: v)


@pytest.mark.parametrize("func", [ok_then, ok_then_unsafe])
def test_options_are_validated_before_input(func) -> None:
    """Invalid retries win over invalid input."""
    with pytest.raises(ConfigurationError):
        func("garbage", lambda v: v, retries=-2)


def test_invalid_retries_raise_even_on_error_input() -> None:
    with pytest.raises(ConfigurationError):
        ok_then(Error("x"), lambda v: v, retries=-1)


def test_nested_shape_violation_propagates_without_retry() -> None:
    calls: list[int] = []

    def step(value: int) -> object:
        calls.append(value)
        return map_if(value, Ok)

    with pytest.raises(InvalidResultShape):
        ok_then(Ok(5), step, retries=2)
    assert calls == [5]

"""Combinators for building pipelines out of outcomes.

Every combinator takes an outcome (or a plain sequence for the enumeration
helpers) and returns an outcome, so calls chain naturally::

    outcome = run(lambda: load_order(order_id))
    outcome = ok_then(outcome, charge_card, retries=2)
    outcome = wrap_context(outcome, "checking out", {"order_id": order_id})

Failures short-circuit: once an ``Error`` is in the pipeline, downstream
``ok_then`` callbacks are skipped and the error flows through unchanged.

``run`` and ``ok_then`` catch exceptions raised by the callback and return
them as ``Error(ContextWrapper)``. Their ``_unsafe`` twins let exceptions
propagate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from verdict._validation import _require_callable, _require_zero_arg_callable
from verdict.errors import InvalidResultShape
from verdict.outcome import Error, Ok, Outcome, classify, validate
from verdict.retry import RetryPolicy, attempt
from verdict.wrapper import capture_fault


def _coerce(value: Any) -> Outcome:
    # Bare return values count as success.
    if isinstance(value, (Ok, Error)):
        return value
    return Ok(value)


def _policy(retries: int) -> RetryPolicy:
    return RetryPolicy(retries=retries)


# --- Control flow ---


def run_unsafe(func: Callable[[], Any], *, retries: int = 0) -> Outcome:
    """Call ``func`` and return its outcome; exceptions propagate.

    A return value that is not an outcome becomes ``Ok(value)``. Error
    outcomes are retried up to ``retries`` times by calling ``func`` again.

    Example:
        run_unsafe(lambda: 42)              # Ok(42)
        run_unsafe(lambda: Error("nope"))   # Error('nope')
    """
    policy = _policy(retries)
    _require_zero_arg_callable(func, "func")
    return attempt(lambda: _coerce(func()), policy=policy)


def run(func: Callable[[], Any], *, retries: int = 0) -> Outcome:
    """Call ``func`` like ``run_unsafe`` but capture raised exceptions.

    An exception becomes ``Error(ContextWrapper)`` whose root reason is the
    exception and whose context is ``func``. Captured exceptions count
    against the retry budget like any other failure.

    Example:
        run(lambda: 1 / 0)  # Error(ContextWrapper(wrapped=Error(ZeroDivisionError(...)), ...))
    """
    policy = _policy(retries)
    _require_zero_arg_callable(func, "func")
    return attempt(
        lambda: _coerce(func()),
        policy=policy,
        capture=lambda exc: capture_fault(exc, func),
    )


def _ok_then(
    outcome: Outcome, func: Callable[[Any], Any], retries: int, *, safe: bool
) -> Outcome:
    policy = _policy(retries)
    _require_callable(func, "func")
    validate(outcome)
    if isinstance(outcome, Error):
        return outcome

    payload = outcome.value
    return attempt(
        lambda: _coerce(func(payload)),
        policy=policy,
        capture=(lambda exc: capture_fault(exc, func)) if safe else None,
    )


def ok_then_unsafe(
    outcome: Outcome, func: Callable[[Any], Any], *, retries: int = 0
) -> Outcome:
    """Feed a success payload into ``func``; errors pass straight through.

    ``Ok()`` hands ``None`` to ``func``, ``Ok(v)`` hands ``v`` and
    ``Ok(a, b)`` hands the tuple ``(a, b)``. Outcomes returned by ``func``
    propagate unchanged, anything else is wrapped in ``Ok``. Retries
    re-invoke only ``func`` with the same payload. Exceptions propagate.

    Raises:
        InvalidResultShape: ``outcome`` is not an outcome.
        ConfigurationError: ``retries`` is not a non-negative integer.
    """
    return _ok_then(outcome, func, retries, safe=False)


def ok_then(
    outcome: Outcome, func: Callable[[Any], Any], *, retries: int = 0
) -> Outcome:
    """Like ``ok_then_unsafe`` but capture exceptions raised by ``func``.

    A raised exception becomes ``Error(ContextWrapper)`` with ``func`` as its
    context, and is retried like any other failure.
    """
    return _ok_then(outcome, func, retries, safe=True)


def error_then(outcome: Outcome, func: Callable[[Any], Any]) -> Outcome:
    """Handle a failure, passing successes through untouched.

    ``func`` receives the reason (``None`` for ``Error()``). What it returns
    decides the result:

    - an outcome is returned as-is, so ``Ok(default)`` recovers;
    - ``None`` becomes ``Error()``;
    - any other value becomes ``Error(value)``, replacing the reason.

    Example:
        error_then(Error("unknown"), lambda _: "account_server_failure")
        # Error('account_server_failure')
    """
    _require_callable(func, "func")
    validate(outcome)
    if isinstance(outcome, Ok):
        return outcome

    result = func(outcome.value)
    if classify(result) != "invalid":
        return result
    if result is None:
        return Error()
    return Error(result)


def tap_ok(outcome: Outcome, func: Callable[[Any], Any]) -> Outcome:
    """Call ``func`` with a success payload for side effects only.

    The return value of ``func`` is ignored and ``outcome`` is returned
    unchanged.
    """
    _require_callable(func, "func")
    validate(outcome)
    if isinstance(outcome, Ok):
        func(outcome.value)
    return outcome


def tap_error(outcome: Outcome, func: Callable[[Any], Any]) -> Outcome:
    """Call ``func`` with a failure reason for side effects only."""
    _require_callable(func, "func")
    validate(outcome)
    if isinstance(outcome, Error):
        func(outcome.value)
    return outcome


# --- Enumeration ---


def _items(source: Outcome | Iterable[Any], name: str) -> Iterable[Any] | Error:
    """Resolve ``Ok(items)`` / bare iterables; errors are handed back."""
    if isinstance(source, Error):
        return source
    if isinstance(source, Ok):
        if source.arity != 1:
            raise InvalidResultShape(
                source,
                f"{name} requires Ok(iterable) or an iterable, got: {source!r}",
            )
        source = source.value
    if isinstance(source, (str, bytes)) or not isinstance(source, Iterable):
        raise InvalidResultShape(
            source, f"{name} requires Ok(iterable) or an iterable, got: {source!r}"
        )
    return source


def map_if(source: Outcome | Iterable[Any], func: Callable[[Any], Outcome]) -> Outcome:
    """Transform every item, or return the first failure.

    Returns ``Ok([transformed, ...])`` in input order when every callback
    succeeds. The first ``Error`` stops iteration and is returned; values
    already transformed are discarded. ``Error`` input is returned unchanged.
    """
    _require_callable(func, "func")
    items = _items(source, "map_if")
    if isinstance(items, Error):
        return items

    transformed: list[Any] = []
    for item in items:
        result = validate(func(item), label="Callback return")
        if isinstance(result, Error):
            return result
        transformed.append(result.value)
    return Ok(transformed)


def find_value(
    source: Outcome | Iterable[Any], func: Callable[[Any], Outcome]
) -> Outcome:
    """Return the first success produced by ``func``.

    Iteration stops at the first ``Ok``, which is returned as-is. When every
    callback fails the result is ``Error([reason, ...])`` in iteration
    order, with ``None`` standing in for ``Error()``.
    """
    _require_callable(func, "func")
    items = _items(source, "find_value")
    if isinstance(items, Error):
        return items

    reasons: list[Any] = []
    for item in items:
        result = validate(func(item), label="Callback return")
        if isinstance(result, Ok):
            return result
        reasons.append(result.value)
    return Error(reasons)


def all_ok(source: Outcome | Iterable[Any], func: Callable[[Any], Outcome]) -> Outcome:
    """Check that ``func`` succeeds for every item.

    Returns ``Ok()`` when it does; success values are discarded since this
    validates rather than transforms (see ``map_if``). The first ``Error``
    stops iteration and is returned.
    """
    _require_callable(func, "func")
    items = _items(source, "all_ok")
    if isinstance(items, Error):
        return items

    for item in items:
        result = validate(func(item), label="Callback return")
        if isinstance(result, Error):
            return result
    return Ok()


__all__ = [
    "all_ok",
    "error_then",
    "find_value",
    "map_if",
    "ok_then",
    "ok_then_unsafe",
    "run",
    "run_unsafe",
    "tap_error",
    "tap_ok",
]

"""Outcome model: the tagged success/failure values every combinator speaks.

An outcome is either ``Ok`` or ``Error`` carrying zero or more payload
values::

    Ok()                 # success, no payload
    Ok(user)             # success with a value
    Ok(user, token)      # success with several values
    Error()              # failure, no reason
    Error("not found")   # failure with a reason
    Error(code, detail)  # failure with several values

Outcomes are immutable, compare by payload and support pattern matching::

    match fetch_user(42):
        case Ok(user):
            ...
        case Error(reason):
            ...
"""

from __future__ import annotations

import dataclasses
from typing import Any, Literal

from verdict.errors import ConfigurationError, InvalidResultShape

type Classification = Literal["ok", "error", "invalid"]
type ValidationMode = Literal["strict", "loose"]

_SHAPES = "Ok(...) / Ok() / Error(...) / Error()"


class _Tagged:
    """Behaviour shared by ``Ok`` and ``Error``."""

    __slots__ = ()
    __match_args__ = ("value",)

    values: tuple[Any, ...]

    def __init__(self, *values: Any) -> None:
        object.__setattr__(self, "values", values)

    @property
    def value(self) -> Any:
        """The payload: ``None`` for none, the value for one, a tuple for several."""
        if not self.values:
            return None
        if len(self.values) == 1:
            return self.values[0]
        return self.values

    @property
    def arity(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        inner = ", ".join(repr(v) for v in self.values)
        return f"{type(self).__name__}({inner})"


@dataclasses.dataclass(
    frozen=True, slots=True, init=False, repr=False, match_args=False
)
class Ok(_Tagged):
    """A successful outcome."""

    values: tuple[Any, ...]


@dataclasses.dataclass(
    frozen=True, slots=True, init=False, repr=False, match_args=False
)
class Error(_Tagged):
    """A failed outcome. The payload is the failure reason."""

    values: tuple[Any, ...]

    @property
    def reason(self) -> Any:
        return self.value


type Outcome = Ok | Error

_TAGS: dict[str, Outcome] = {"ok": Ok(), "error": Error()}


def classify(value: object) -> Classification:
    """Return ``"ok"``, ``"error"`` or ``"invalid"`` for any value."""
    if isinstance(value, Ok):
        return "ok"
    if isinstance(value, Error):
        return "error"
    return "invalid"


def _shape_error(value: object, label: str) -> InvalidResultShape:
    return InvalidResultShape(
        value,
        f"{label} must be {_SHAPES}, got: {value!r}",
        hint="Return Ok(value) or Error(reason) instead of a raw value.",
    )


def to_outcome(value: object) -> Outcome | None:
    """Normalize a loosely tagged value into an outcome view.

    Accepts outcomes plus the raw ``"ok"`` / ``"error"`` tags and tuples
    whose first element is one of those tags. Returns ``None`` when the
    value is not recognisable.
    """
    if isinstance(value, (Ok, Error)):
        return value
    if isinstance(value, str):
        return _TAGS.get(value)
    if isinstance(value, tuple) and value and isinstance(value[0], str):
        tag, *rest = value
        if tag in _TAGS:
            return type(_TAGS[tag])(*rest)
    return None


def validate(
    value: object,
    mode: ValidationMode = "strict",
    *,
    label: str = "Argument",
) -> Outcome:
    """Check that ``value`` is an outcome.

    Args:
        value: Anything.
        mode: ``"strict"`` accepts only ``Ok``/``Error`` instances.
            ``"loose"`` also tolerates raw tagged tuples for display paths
            and returns a normalized view; the caller's value is untouched.
        label: Prefix for the error message, e.g. ``"Callback return"``.

    Returns:
        The outcome (strict) or its normalized view (loose).

    Raises:
        InvalidResultShape: ``value`` is not an acceptable outcome.
        ConfigurationError: ``mode`` is not a known validation mode.
    """
    if mode == "strict":
        if isinstance(value, (Ok, Error)):
            return value
        raise _shape_error(value, label)
    if mode == "loose":
        view = to_outcome(value)
        if view is None:
            raise _shape_error(value, label)
        return view
    raise ConfigurationError(
        f"invalid value for mode: expected one of ['strict', 'loose'], got: {mode!r}"
    )


def is_ok(value: object) -> bool:
    """Return True for ``Ok`` of any arity, False for ``Error``."""
    return classify(validate(value)) == "ok"


def is_error(value: object) -> bool:
    """Return True for ``Error`` of any arity, False for ``Ok``."""
    return classify(validate(value)) == "error"


__all__ = [
    "Classification",
    "Error",
    "Ok",
    "Outcome",
    "ValidationMode",
    "classify",
    "is_error",
    "is_ok",
    "to_outcome",
    "validate",
]

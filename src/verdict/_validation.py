"""Internal validation helpers shared by the combinator and wrapper modules.

These centralize argument checks so error types and messages stay
consistent across the public surface.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import inspect
from types import MappingProxyType
import typing

from verdict.errors import ConfigurationError

T = typing.TypeVar("T")


def _freeze_mapping(
    m: Mapping[typing.Any, T] | Iterable[tuple[typing.Any, T]] | None,
    *,
    field_name: str = "metadata",
) -> Mapping[typing.Any, T]:
    """Return an immutable mapping view built from a mapping or key/value pairs."""
    if m is None:
        return MappingProxyType({})
    if isinstance(m, MappingProxyType):
        return m
    if isinstance(m, Mapping):
        return MappingProxyType(dict(m))
    if isinstance(m, (str, bytes)):
        raise ConfigurationError(
            f"{field_name} must be a mapping or a sequence of pairs, got: {m!r}",
            hint="Pass metadata={'user_id': 123} or [('user_id', 123)].",
        )
    try:
        return MappingProxyType(dict(m))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"{field_name} must be a mapping or a sequence of pairs, got: {m!r}",
            hint="Pass metadata={'user_id': 123} or [('user_id', 123)].",
        ) from exc


def _is_pairs(value: object) -> bool:
    """Return True for a non-string sequence made only of 2-tuples."""
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        return False
    return all(isinstance(item, tuple) and len(item) == 2 for item in value)


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_callable(func: typing.Any, field_name: str) -> None:
    _require(
        condition=callable(func),
        message=f"must be callable, got: {func!r}",
        field_name=field_name,
        exc=TypeError,
    )


def _require_zero_arg_callable(func: typing.Any, field_name: str) -> None:
    """Validate callable takes no arguments for predictable execution."""
    _require_callable(func, field_name)

    try:
        sig = inspect.signature(func)
    except (ValueError, TypeError):
        # Builtins and some C callables have no introspectable signature.
        return
    has_required_params = any(
        p.default is p.empty
        and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        for p in sig.parameters.values()
    )
    _require(
        condition=not has_required_params,
        message="must be a zero-argument callable",
        field_name=field_name,
        exc=TypeError,
    )

"""Render pydantic validation errors as a single user-facing sentence."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from pydantic import ValidationError


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _message(error: dict[str, Any]) -> str:
    # Validators raising ValueError get a "Value error, " prefix from pydantic.
    if error.get("type") == "value_error":
        cause = (error.get("ctx") or {}).get("error")
        if cause is not None:
            return str(cause)
    return str(error.get("msg", ""))


def format_errors(error: ValidationError) -> str:
    """Format a ``ValidationError`` as ``"field: msg, msg; other: msg"``.

    Fields are sorted by name. Errors without a location (model-level
    validators) render without a prefix and sort first. Messages for the
    same field are sorted and comma-joined.

    Example:
        "age: Input should be greater than 18; email: Field required"
    """
    grouped: defaultdict[str, list[str]] = defaultdict(list)
    for item in error.errors(include_url=False):
        grouped[_field_name(tuple(item.get("loc", ())))].append(_message(item))

    parts = []
    for field in sorted(grouped):
        messages = ", ".join(sorted(grouped[field]))
        parts.append(f"{field}: {messages}" if field else messages)
    return "; ".join(parts)


def is_validation_error(value: object) -> bool:
    return isinstance(value, ValidationError)

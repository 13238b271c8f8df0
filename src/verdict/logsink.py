"""Log sink: where rendered result log lines end up."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Duck-typed protocol for log destinations."""

    def emit(self, level: int, message: str, metadata: Mapping[str, Any]) -> None: ...  # noqa: D102


class LoggingSink:
    """Forward result log lines to a standard-library logger.

    Metadata travels on the record as ``record.result_metadata`` so
    formatters and JSON handlers can pick it up without colliding with
    built-in ``LogRecord`` attributes.
    """

    __slots__ = ("logger",)

    def __init__(self, logger: logging.Logger | str = "verdict") -> None:
        self.logger = (
            logging.getLogger(logger) if isinstance(logger, str) else logger
        )

    def emit(self, level: int, message: str, metadata: Mapping[str, Any]) -> None:
        self.logger.log(level, message, extra={"result_metadata": dict(metadata)})

    def __repr__(self) -> str:
        return f"LoggingSink(logger={self.logger.name!r})"

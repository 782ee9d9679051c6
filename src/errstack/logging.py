"""Diagnostics for errstack's own degraded paths.

errstack never logs the errors it wraps. It reports only what went wrong
inside itself: a stack that could not be captured, a cyclic cause chain, or
unusable ERRSTACK_* settings. Each report is a `Diagnostic`, written by the
active renderer as one line of text (stderr) or one JSON object (stdout).

Defaults come from `LoggingSettings` (ERRSTACK_LOG_LEVEL, ERRSTACK_LOG_FORMAT);
`configure_logging()` overrides them for the current context.

    >>> configure_logging("json", "DEBUG")
    >>> get_logger("errstack.cause").warning("cause chain cycle detected", depth=3)
    {"timestamp":"...","level":"warning","logger":"errstack.cause","event":"cause chain cycle detected","depth":3}
"""

from __future__ import annotations

import logging
import sys
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO

import orjson

from .settings import get_settings


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One event errstack reports about itself."""

    logger: str
    level: int
    event: str
    fields: dict[str, Any]
    timestamp: float = field(default_factory=time.time)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level).lower()

    def as_dict(self) -> dict[str, Any]:
        return {
            "timestamp": datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat(),
            "level": self.level_name,
            "logger": self.logger,
            "event": self.event,
            **self.fields,
        }


class Renderer(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None: ...


@dataclass(frozen=True, slots=True)
class TextRenderer:
    """`errstack.cause [warning] cause chain cycle detected depth=2 error_type='Node'`"""

    output: TextIO | None = None  # None = sys.stderr at emit time

    def emit(self, diagnostic: Diagnostic) -> None:
        pairs = "".join(f" {k}={v!r}" for k, v in diagnostic.fields.items())
        print(f"{diagnostic.logger} [{diagnostic.level_name}] {diagnostic.event}{pairs}",
              file=self.output or sys.stderr)


@dataclass(frozen=True, slots=True)
class JsonRenderer:
    """JSON Lines, one object per diagnostic. Values orjson can't encode are stringified."""

    output: TextIO | None = None  # None = sys.stdout at emit time

    def emit(self, diagnostic: Diagnostic) -> None:
        print(orjson.dumps(diagnostic.as_dict(), default=str).decode(), file=self.output or sys.stdout)


class NullRenderer:
    def emit(self, diagnostic: Diagnostic) -> None:
        pass


_active: ContextVar[tuple[Renderer, int] | None] = ContextVar("errstack_diagnostics", default=None)


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str = "WARNING",
    *,
    output: TextIO | None = None,
) -> Renderer:
    """Route diagnostics for the current context. Format: "console", "json" or "none"."""
    match format:
        case "console": renderer: Renderer = TextRenderer(output)
        case "json": renderer = JsonRenderer(output)
        case "none": renderer = NullRenderer()
        case _: raise ValueError(f"Unknown format: {format}. Use 'console', 'json', or 'none'")
    _active.set((renderer, getattr(logging, level.upper(), logging.WARNING)))
    return renderer


def reset_logging() -> None:
    """Forget configure_logging() so ERRSTACK_LOG_* settings apply again."""
    _active.set(None)


def _renderer_and_threshold() -> tuple[Renderer, int]:
    if (active := _active.get()) is None:
        settings = get_settings().logging
        configure_logging(settings.format, settings.level)
        active = _active.get()
    return active  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class DiagnosticLogger:
    name: str

    def _emit(self, level: int, event: str, fields: dict[str, Any]) -> None:
        renderer, threshold = _renderer_and_threshold()
        if level >= threshold:
            renderer.emit(Diagnostic(self.name, level, event, fields))

    def debug(self, event: str, **fields: Any) -> None:
        self._emit(logging.DEBUG, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit(logging.WARNING, event, fields)


def get_logger(name: str) -> DiagnosticLogger:
    return DiagnosticLogger(name)

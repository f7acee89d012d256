"""Diagnostic sinks for recoverable stream failures."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional, Protocol

from mangle_ir.errors import ExtractionError


logger = logging.getLogger("mangle_ir.stream")


@dataclass(frozen=True)
class Diagnostic:
    """A rejected candidate or leftover stream content.

    Attributes:
        message: Human-readable summary.
        candidate: The text that was rejected or left over.
        error: The extraction error, or None for trailing data.
    """

    message: str
    candidate: str
    error: Optional[ExtractionError] = None


class DiagnosticSink(Protocol):
    def report(self, diagnostic: Diagnostic) -> None: ...


class LoggingSink:
    """Default sink: forwards diagnostics to the ``mangle_ir.stream`` logger."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def report(self, diagnostic: Diagnostic) -> None:
        if diagnostic.error is None:
            self.log.warning("%s: %r", diagnostic.message, diagnostic.candidate)
            return
        self.log.error(
            "%s: %r (%s)", diagnostic.message, diagnostic.candidate, diagnostic.error
        )


@dataclass
class CollectingSink:
    """Keep every diagnostic in memory."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    @property
    def errors(self) -> list[ExtractionError]:
        return [d.error for d in self.diagnostics if d.error is not None]

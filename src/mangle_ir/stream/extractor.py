"""Incremental extraction of JSON objects from a chunked text stream.

Objects are delimited by counting braces. Braces inside string values are
counted as well, so a ``{`` or ``}`` inside a quoted field corrupts the depth
tracking for that object. Payloads produced by the generative service do not
contain braces in their string values.
"""

from __future__ import annotations

import json
import warnings
from typing import AsyncIterable, AsyncIterator, Generic, Iterable, Iterator, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from mangle_ir.config import ExtractorConfig
from mangle_ir.diagnostics import Diagnostic, DiagnosticSink, LoggingSink
from mangle_ir.errors import (
    DecodeError,
    ExtractionError,
    IncompleteTrailingDataWarning,
    ShapeValidationError,
)
from mangle_ir.stream.shapes import MangleSchemaPayload


ModelT = TypeVar("ModelT", bound=BaseModel)


class ObjectScanner(Generic[ModelT]):
    """Brace-depth scanner with explicit state.

    Attributes:
        buffer: Text received but not yet consumed by a complete object.
        depth: Current brace nesting depth.
        start: Buffer offset of the open top-level object, or None.
    """

    def __init__(
        self,
        model: type[ModelT] = MangleSchemaPayload,
        *,
        sink: Optional[DiagnosticSink] = None,
        config: Optional[ExtractorConfig] = None,
    ) -> None:
        self.model = model
        self.sink = sink if sink is not None else LoggingSink()
        self.config = config or ExtractorConfig()
        self.buffer = ""
        self.depth = 0
        self.start: Optional[int] = None
        self._pos = 0
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, chunk: str) -> list[ModelT]:
        """Append ``chunk`` and return every object completed by it, in order."""

        if self._finished:
            raise RuntimeError("ObjectScanner has already finished.")
        if not isinstance(chunk, str):
            raise TypeError(f"Stream chunks must be str, got {type(chunk).__name__}.")
        self.buffer += chunk
        completed: list[ModelT] = []
        i = self._pos
        while i < len(self.buffer):
            char = self.buffer[i]
            if char == "{":
                if self.depth == 0:
                    self.start = i
                self.depth += 1
            elif char == "}":
                if self.depth > 0:
                    self.depth -= 1
                if self.depth == 0 and self.start is not None:
                    obj = self._accept(self.buffer[self.start : i + 1])
                    if obj is not None:
                        completed.append(obj)
                    self.buffer = self.buffer[i + 1 :]
                    self.start = None
                    i = 0
                    continue
            i += 1
        self._pos = i
        return completed

    def finish(self) -> str:
        """Close the scanner and return any leftover buffered text."""

        if self._finished:
            return self.buffer
        self._finished = True
        leftover = self.buffer
        if not leftover.strip():
            return leftover
        message = f"Stream ended with unprocessed data in buffer ({len(leftover)} chars)"
        self.sink.report(Diagnostic(message=message, candidate=leftover))
        policy = self.config.trailing_data_policy
        if policy == "warn":
            warnings.warn(message, IncompleteTrailingDataWarning, stacklevel=2)
        elif policy == "error":
            raise IncompleteTrailingDataWarning(message)
        return leftover

    def decode(self, text: str) -> ModelT:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"Failed to parse JSON object: {exc}") from exc
        try:
            return self.model.model_validate(payload)
        except PydanticValidationError as exc:
            raise ShapeValidationError(
                f"Schema validation failed for {self.model.__name__}: "
                f"{exc.error_count()} error(s)"
            ) from exc

    def _accept(self, candidate: str) -> Optional[ModelT]:
        try:
            return self.decode(candidate)
        except ExtractionError as exc:
            self.sink.report(Diagnostic(message=str(exc), candidate=candidate, error=exc))
            return None


def extract_objects(
    chunks: Iterable[str],
    model: type[ModelT] = MangleSchemaPayload,
    *,
    sink: Optional[DiagnosticSink] = None,
    config: Optional[ExtractorConfig] = None,
) -> Iterator[ModelT]:
    """Yield validated objects from ``chunks`` as soon as each one closes.

    The chunk source is closed (when it has a ``close`` method) on exhaustion,
    on upstream errors and when the consumer stops iterating.
    """

    scanner = ObjectScanner(model, sink=sink, config=config)
    source = iter(chunks)
    try:
        for chunk in source:
            yield from scanner.feed(chunk)
        scanner.finish()
    finally:
        close = getattr(source, "close", None)
        if close is not None:
            close()


async def aextract_objects(
    chunks: AsyncIterable[str],
    model: type[ModelT] = MangleSchemaPayload,
    *,
    sink: Optional[DiagnosticSink] = None,
    config: Optional[ExtractorConfig] = None,
) -> AsyncIterator[ModelT]:
    """Async variant of :func:`extract_objects`.

    Wrap the generator in ``contextlib.aclosing`` when stopping early so the
    source is released deterministically.
    """

    scanner = ObjectScanner(model, sink=sink, config=config)
    source = aiter(chunks)
    try:
        async for chunk in source:
            for obj in scanner.feed(chunk):
                yield obj
        scanner.finish()
    finally:
        aclose = getattr(source, "aclose", None)
        if aclose is not None:
            await aclose()

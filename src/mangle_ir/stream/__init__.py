"""Streaming extraction of structured objects from chunked text."""

from mangle_ir.stream.shapes import MangleSchemaPayload
from mangle_ir.stream.extractor import ObjectScanner, extract_objects, aextract_objects

__all__ = [
    "MangleSchemaPayload",
    "ObjectScanner",
    "extract_objects",
    "aextract_objects",
]

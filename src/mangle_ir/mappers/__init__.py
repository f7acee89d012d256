"""Target-language mappers."""

from mangle_ir.mappers.mangle import MangleRenderer, compile_query, unbound_projection

__all__ = [
    "MangleRenderer",
    "compile_query",
    "unbound_projection",
]

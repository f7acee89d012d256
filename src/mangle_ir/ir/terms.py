"""Terms: variable references, string literals, numbers and booleans."""

from __future__ import annotations

import math
import re
from typing import Union

from mangle_ir.errors import SchemaError


VARIABLE_MARKER = "?"

Term = Union[str, int, float, bool]

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_variable(term: object) -> bool:
    """Return True when ``term`` is a variable reference such as ``?X``."""

    return isinstance(term, str) and term.startswith(VARIABLE_MARKER)


def strip_marker(text: str) -> str:
    """Drop the variable marker if present; other text is returned unchanged."""

    if text.startswith(VARIABLE_MARKER):
        return text[len(VARIABLE_MARKER):]
    return text


def validate_term(term: object, *, context: str) -> Term:
    if isinstance(term, float) and not math.isfinite(term):
        raise SchemaError(f"Term in {context} must be a finite number, got {term!r}.")
    if isinstance(term, (str, bool, int, float)):
        return term
    raise SchemaError(
        f"Term in {context} must be a string, number or boolean, got {type(term).__name__}."
    )


def validate_identifier(name: object, *, what: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise SchemaError(f"{what} must be a non-empty identifier, got {name!r}.")
    return name

"""IR types for Mangle rules and queries."""

from mangle_ir.ir.terms import (
    VARIABLE_MARKER,
    Term,
    is_variable,
    strip_marker,
)
from mangle_ir.ir.program import (
    COMPARISON_OPERATORS,
    AtomClause,
    ComparisonClause,
    Clause,
    RuleHead,
    Rule,
    FinalQuery,
    Program,
    clause_from_dict,
)

__all__ = [
    "VARIABLE_MARKER",
    "Term",
    "is_variable",
    "strip_marker",
    "COMPARISON_OPERATORS",
    "AtomClause",
    "ComparisonClause",
    "Clause",
    "RuleHead",
    "Rule",
    "FinalQuery",
    "Program",
    "clause_from_dict",
]

"""Mangle IR: compile rule/query IR to Mangle source and extract streamed objects."""

from mangle_ir.config import CompilerConfig, ExtractorConfig
from mangle_ir.diagnostics import Diagnostic, DiagnosticSink, LoggingSink, CollectingSink
from mangle_ir.errors import (
    IRBaseError,
    SchemaError,
    RenderError,
    QueryNotFoundError,
    ProjectionNotBoundError,
    ValidationError,
    ExtractionError,
    DecodeError,
    ShapeValidationError,
    IncompleteTrailingDataWarning,
)
from mangle_ir.ir import (
    AtomClause,
    ComparisonClause,
    Clause,
    RuleHead,
    Rule,
    FinalQuery,
    Program,
)
from mangle_ir.mappers import MangleRenderer, compile_query
from mangle_ir.rules import ProgramValidator
from mangle_ir.stream import MangleSchemaPayload, ObjectScanner, extract_objects, aextract_objects

__all__ = [
    "CompilerConfig",
    "ExtractorConfig",
    "Diagnostic",
    "DiagnosticSink",
    "LoggingSink",
    "CollectingSink",
    "IRBaseError",
    "SchemaError",
    "RenderError",
    "QueryNotFoundError",
    "ProjectionNotBoundError",
    "ValidationError",
    "ExtractionError",
    "DecodeError",
    "ShapeValidationError",
    "IncompleteTrailingDataWarning",
    "AtomClause",
    "ComparisonClause",
    "Clause",
    "RuleHead",
    "Rule",
    "FinalQuery",
    "Program",
    "MangleRenderer",
    "compile_query",
    "ProgramValidator",
    "MangleSchemaPayload",
    "ObjectScanner",
    "extract_objects",
    "aextract_objects",
]

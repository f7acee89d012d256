"""Program validation and generative-service payload schemas."""

from mangle_ir.rules.constraint_schemas import (
    BaseFactPredicate,
    ProgramModel,
    PredicateDiscovery,
    build_program_response_schema,
    build_predicate_discovery_schema,
    parse_program_response,
    parse_predicate_discovery,
    describe_base_facts,
)
from mangle_ir.rules.validator import ProgramValidator, unbound_head_variables

__all__ = [
    "BaseFactPredicate",
    "ProgramModel",
    "PredicateDiscovery",
    "build_program_response_schema",
    "build_predicate_discovery_schema",
    "parse_program_response",
    "parse_predicate_discovery",
    "describe_base_facts",
    "ProgramValidator",
    "unbound_head_variables",
]

"""Mangle Datalog renderer for the rule/query IR."""

from __future__ import annotations

from decimal import Decimal
import math
from typing import Optional, assert_never

from mangle_ir.config import CompilerConfig
from mangle_ir.errors import ProjectionNotBoundError, QueryNotFoundError, RenderError
from mangle_ir.ir.program import AtomClause, Clause, ComparisonClause, FinalQuery, Program, Rule
from mangle_ir.ir.terms import Term, is_variable, strip_marker


NEGATION_MARKER = "!"


class MangleRenderer:
    """Render rules and one named query as Mangle source text.

    The renderer holds no per-call state; rendering the same program twice
    yields the same text.
    """

    backend = "mangle"

    def __init__(self, config: Optional[CompilerConfig] = None) -> None:
        self.config = config or CompilerConfig()

    def render_program(self, program: Program, query_name: str) -> str:
        query = program.query(query_name)
        if query is None:
            raise QueryNotFoundError(query_name)
        if self.config.check_projection:
            unbound = unbound_projection(query)
            if unbound:
                raise ProjectionNotBoundError(query.name, unbound)
        rules_text = self.config.rule_separator.join(
            self.render_rule(rule) for rule in program.rules
        )
        query_text = self.render_query(query)
        if rules_text:
            return f"{rules_text}{self.config.rule_separator}{query_text}"
        return query_text

    def render_rule(self, rule: Rule) -> str:
        # Head args are declared variables: never quoted, marker stripped if present.
        head_args = ", ".join(strip_marker(arg) for arg in rule.head.args)
        head = f"{rule.head.predicate}({head_args})"
        body = ", ".join(self.render_clause(clause) for clause in rule.body)
        return f"{head} :- {body}."

    def render_query(self, query: FinalQuery) -> str:
        return ", ".join(self.render_atom(atom) for atom in query.where) + "."

    def render_clause(self, clause: Clause) -> str:
        if isinstance(clause, AtomClause):
            return self.render_atom(clause)
        if isinstance(clause, ComparisonClause):
            return self.render_comparison(clause)
        assert_never(clause)

    def render_atom(self, atom: AtomClause) -> str:
        args = ", ".join(self.render_term(arg) for arg in atom.args)
        text = f"{atom.predicate}({args})"
        return f"{NEGATION_MARKER}{text}" if atom.is_negated else text

    def render_comparison(self, comparison: ComparisonClause) -> str:
        variable = strip_marker(comparison.variable)
        return f"{variable} {comparison.operator} {self.render_term(comparison.value)}"

    def render_term(self, term: Term) -> str:
        if isinstance(term, bool):
            return "true" if term else "false"
        if isinstance(term, int):
            return str(term)
        if isinstance(term, float):
            return _format_float(term)
        if isinstance(term, str):
            if is_variable(term):
                return strip_marker(term)
            # Embedded double quotes are not escaped.
            return f'"{term}"'
        raise RenderError(f"Unsupported term type: {type(term)}")


def _format_float(value: float) -> str:
    # Fixed-point only: 1e16 renders as 10000000000000000.
    if not math.isfinite(value):
        raise RenderError(f"Unsupported non-finite number: {value!r}")
    text = repr(value)
    if "e" not in text and "E" not in text:
        return text
    return format(Decimal(text), "f")


def unbound_projection(query: FinalQuery) -> list[str]:
    """Return ``find`` variables that do not occur in the query's where atoms."""

    bound = {
        strip_marker(arg)
        for atom in query.where
        for arg in atom.args
        if is_variable(arg)
    }
    missing: list[str] = []
    for var in query.find:
        name = strip_marker(var)
        if name not in bound and name not in missing:
            missing.append(name)
    return missing


def compile_query(
    program: Program,
    query_name: str,
    config: Optional[CompilerConfig] = None,
) -> str:
    """Compile every rule of ``program`` plus the query named ``query_name``."""

    return MangleRenderer(config).render_program(program, query_name)

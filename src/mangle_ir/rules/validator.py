"""Safety checks for Mangle programs."""

from __future__ import annotations

from mangle_ir.errors import ProjectionNotBoundError, ValidationError
from mangle_ir.ir.program import AtomClause, ComparisonClause, FinalQuery, Program, Rule
from mangle_ir.ir.terms import is_variable, strip_marker
from mangle_ir.mappers.mangle import unbound_projection


def positive_variables(rule: Rule) -> set[str]:
    """Variables bound by non-negated atoms of the rule body, marker stripped."""

    bound: set[str] = set()
    for clause in rule.body:
        if isinstance(clause, AtomClause) and not clause.is_negated:
            bound.update(strip_marker(arg) for arg in clause.args if is_variable(arg))
    return bound


def unbound_head_variables(rule: Rule) -> list[str]:
    bound = positive_variables(rule)
    missing: list[str] = []
    for arg in rule.head.args:
        name = strip_marker(arg)
        if name not in bound and name not in missing:
            missing.append(name)
    return missing


class ProgramValidator:
    """Check the safety condition on rules and projections on queries.

    Not run by the compiler; callers opt in before compiling untrusted IR.
    """

    def validate(self, program: Program) -> None:
        for rule in program.rules:
            self.validate_rule(rule)
        for query in program.queries:
            self.validate_query(query)

    def validate_rule(self, rule: Rule) -> None:
        missing = unbound_head_variables(rule)
        if missing:
            raise ValidationError(
                f"Unsafe rule {rule.name}: head variables {missing} "
                "do not appear in a positive body atom."
            )
        bound = positive_variables(rule)
        for index, clause in enumerate(rule.body):
            if isinstance(clause, ComparisonClause):
                self._check_bound(clause.variable, bound, rule.name, index)
                if is_variable(clause.value):
                    self._check_bound(clause.value, bound, rule.name, index)
            elif isinstance(clause, AtomClause) and clause.is_negated:
                for arg in clause.args:
                    if is_variable(arg):
                        self._check_bound(arg, bound, rule.name, index)

    def validate_query(self, query: FinalQuery) -> None:
        missing = unbound_projection(query)
        if missing:
            raise ProjectionNotBoundError(query.name, missing)

    def _check_bound(self, variable: str, bound: set[str], rule_name: str, index: int) -> None:
        name = strip_marker(variable)
        if name not in bound:
            raise ValidationError(
                f"Unsafe rule {rule_name}: variable {name} at body {index} "
                "is not bound by a positive body atom."
            )

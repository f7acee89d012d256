"""Rule/query IR for Mangle programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union
import json

from mangle_ir.errors import SchemaError
from mangle_ir.ir.terms import Term, validate_identifier, validate_term


ComparisonOperator = Literal["<", ">", "<=", ">=", "==", "!="]
COMPARISON_OPERATORS: tuple[str, ...] = ("<", ">", "<=", ">=", "==", "!=")


@dataclass(frozen=True)
class AtomClause:
    """Predicate applied to terms, optionally negated."""

    predicate: str
    args: list[Term] = field(default_factory=list)
    is_negated: bool = False

    def __post_init__(self) -> None:
        validate_identifier(self.predicate, what="Atom predicate")
        if not isinstance(self.args, (list, tuple)):
            raise SchemaError(f"Atom {self.predicate} args must be a list.")
        for arg in self.args:
            validate_term(arg, context=f"atom {self.predicate}")
        if not isinstance(self.is_negated, bool):
            raise SchemaError("Atom isNegated must be a boolean.")
        object.__setattr__(self, "args", list(self.args))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "atom",
            "predicate": self.predicate,
            "args": list(self.args),
            "isNegated": self.is_negated,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AtomClause":
        if not isinstance(data, dict):
            raise SchemaError("Atom payload must be a dict.")
        kind = data.get("type", "atom")
        if kind != "atom":
            raise SchemaError(f"Expected atom clause, got type {kind!r}.")
        return AtomClause(
            predicate=data.get("predicate"),
            args=data.get("args", []),
            is_negated=data.get("isNegated", False),
        )


@dataclass(frozen=True)
class ComparisonClause:
    """Infix comparison between a variable and a term, e.g. ``Price <= 500``."""

    variable: str
    operator: ComparisonOperator
    value: Term

    def __post_init__(self) -> None:
        if not isinstance(self.variable, str) or not self.variable:
            raise SchemaError("Comparison variable must be a non-empty string.")
        if self.operator not in COMPARISON_OPERATORS:
            raise SchemaError(
                f"Unknown comparison operator: {self.operator!r}. "
                f"Expected one of {list(COMPARISON_OPERATORS)}."
            )
        validate_term(self.value, context=f"comparison on {self.variable}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "comparison",
            "variable": self.variable,
            "operator": self.operator,
            "value": self.value,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ComparisonClause":
        if "value" not in data:
            raise SchemaError("Comparison clause requires a value.")
        return ComparisonClause(
            variable=data.get("variable"),
            operator=data.get("operator"),
            value=data["value"],
        )


Clause = Union[AtomClause, ComparisonClause]


def clause_from_dict(data: dict[str, Any]) -> Clause:
    if not isinstance(data, dict):
        raise SchemaError("Clause payload must be a dict.")
    kind = data.get("type")
    if kind == "atom":
        return AtomClause.from_dict(data)
    if kind == "comparison":
        return ComparisonClause.from_dict(data)
    raise SchemaError(f"Unknown clause type: {kind}")


@dataclass(frozen=True)
class RuleHead:
    """Head of a rule. Arguments are declared variables (``?X`` or ``X``)."""

    predicate: str
    args: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        validate_identifier(self.predicate, what="Rule head predicate")
        if not isinstance(self.args, (list, tuple)):
            raise SchemaError("Rule head args must be a list.")
        for arg in self.args:
            if not isinstance(arg, str):
                raise SchemaError(
                    f"Rule head {self.predicate} args must be variable names."
                )
        object.__setattr__(self, "args", list(self.args))

    def to_dict(self) -> dict[str, Any]:
        return {"predicate": self.predicate, "args": list(self.args)}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "RuleHead":
        if not isinstance(data, dict):
            raise SchemaError("Rule head payload must be a dict.")
        return RuleHead(predicate=data.get("predicate"), args=data.get("args", []))


@dataclass(frozen=True)
class Rule:
    """Named derivation of a head predicate from a conjunction of clauses."""

    name: str
    head: RuleHead
    body: list[Clause]
    natural_language_goal: str = ""

    def __post_init__(self) -> None:
        validate_identifier(self.name, what="Rule name")
        if not isinstance(self.natural_language_goal, str):
            raise SchemaError(f"Rule {self.name} naturalLanguageGoal must be a string.")
        if not isinstance(self.head, RuleHead):
            raise SchemaError(f"Rule {self.name} head must be a RuleHead.")
        if not self.body:
            raise SchemaError(f"Rule {self.name} requires at least one body clause.")
        for clause in self.body:
            if not isinstance(clause, (AtomClause, ComparisonClause)):
                raise SchemaError(
                    f"Rule {self.name} body entries must be AtomClause or ComparisonClause."
                )
        object.__setattr__(self, "body", list(self.body))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "naturalLanguageGoal": self.natural_language_goal,
            "head": self.head.to_dict(),
            "body": [clause.to_dict() for clause in self.body],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Rule":
        if not isinstance(data, dict):
            raise SchemaError("Rule payload must be a dict.")
        body = data.get("body", [])
        if not isinstance(body, list):
            raise SchemaError("Rule body must be a list.")
        return Rule(
            name=data.get("name"),
            natural_language_goal=data.get("naturalLanguageGoal", ""),
            head=RuleHead.from_dict(data.get("head")),
            body=[clause_from_dict(c) for c in body],
        )


@dataclass(frozen=True)
class FinalQuery:
    """Named query. ``find`` lists the variables of interest; only ``where`` is rendered."""

    name: str
    where: list[AtomClause]
    find: list[str] = field(default_factory=list)
    description: str = ""

    def __post_init__(self) -> None:
        validate_identifier(self.name, what="Query name")
        if not isinstance(self.description, str):
            raise SchemaError(f"Query {self.name} description must be a string.")
        if not self.where:
            raise SchemaError(f"Query {self.name} requires at least one where clause.")
        for clause in self.where:
            if not isinstance(clause, AtomClause):
                raise SchemaError(f"Query {self.name} where entries must be AtomClause.")
        if not isinstance(self.find, (list, tuple)):
            raise SchemaError(f"Query {self.name} find must be a list.")
        for var in self.find:
            if not isinstance(var, str) or not var:
                raise SchemaError(f"Query {self.name} find entries must be variable names.")
        object.__setattr__(self, "where", list(self.where))
        object.__setattr__(self, "find", list(self.find))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "find": list(self.find),
            "where": [clause.to_dict() for clause in self.where],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "FinalQuery":
        if not isinstance(data, dict):
            raise SchemaError("Query payload must be a dict.")
        where = data.get("where", [])
        if not isinstance(where, list):
            raise SchemaError("Query where must be a list.")
        return FinalQuery(
            name=data.get("name"),
            description=data.get("description", ""),
            find=data.get("find", []),
            where=[AtomClause.from_dict(c) for c in where],
        )


@dataclass(frozen=True)
class Program:
    """Ordered rules plus named queries."""

    rules: list[Rule] = field(default_factory=list)
    queries: list[FinalQuery] = field(default_factory=list)

    def __post_init__(self) -> None:
        for rule in self.rules:
            if not isinstance(rule, Rule):
                raise SchemaError("Program rules must be Rule instances.")
        seen: set[str] = set()
        for query in self.queries:
            if not isinstance(query, FinalQuery):
                raise SchemaError("Program queries must be FinalQuery instances.")
            if query.name in seen:
                raise SchemaError(f"Duplicate query name: {query.name}")
            seen.add(query.name)
        object.__setattr__(self, "rules", list(self.rules))
        object.__setattr__(self, "queries", list(self.queries))

    def query(self, name: str) -> Optional[FinalQuery]:
        for query in self.queries:
            if query.name == name:
                return query
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "rules": [rule.to_dict() for rule in self.rules],
            "queries": [query.to_dict() for query in self.queries],
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        """Serialize the program to JSON."""

        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Program":
        if not isinstance(data, dict):
            raise SchemaError("Program payload must be a dict.")
        rules = data.get("rules", [])
        queries = data.get("queries", [])
        if not isinstance(rules, list):
            raise SchemaError("Program rules must be a list.")
        if not isinstance(queries, list):
            raise SchemaError("Program queries must be a list.")
        return Program(
            rules=[Rule.from_dict(r) for r in rules],
            queries=[FinalQuery.from_dict(q) for q in queries],
        )

    @staticmethod
    def from_json(payload: str) -> "Program":
        """Deserialize a program from JSON."""

        return Program.from_dict(json.loads(payload))

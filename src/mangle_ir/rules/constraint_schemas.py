"""Structured-output schemas for the generative service.

The service answers with JSON in the shapes below. The pydantic models check
those shapes and convert them into IR; ``build_*_schema`` return the JSON
Schema handed to the service.
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from mangle_ir.errors import DecodeError, SchemaError, ShapeValidationError
from mangle_ir.ir.program import AtomClause, ComparisonClause, FinalQuery, Program, Rule, RuleHead


TermModel = Union[StrictStr, StrictInt, StrictFloat, StrictBool]


class AtomModel(BaseModel):
    type: Literal["atom"] = "atom"
    predicate: str = Field(description="The name of the predicate to call.")
    args: list[TermModel] = Field(
        description=(
            "The arguments for the predicate, which can be variables (e.g., '?HID') "
            "or string/number literals."
        )
    )
    isNegated: bool = Field(
        default=False,
        description="If true, this atom clause is negated (e.g., !is_a_parent(P)).",
    )

    def to_ir(self) -> AtomClause:
        return AtomClause(predicate=self.predicate, args=list(self.args), is_negated=self.isNegated)


class ComparisonModel(BaseModel):
    type: Literal["comparison"]
    variable: str = Field(
        description="The variable on the left side of the comparison (e.g., '?Price')."
    )
    operator: Literal["<", ">", "<=", ">=", "==", "!="]
    value: TermModel = Field(description="The value or variable to compare against.")

    def to_ir(self) -> ComparisonClause:
        return ComparisonClause(variable=self.variable, operator=self.operator, value=self.value)


ClauseModel = Annotated[Union[AtomModel, ComparisonModel], Field(discriminator="type")]


class RuleHeadModel(BaseModel):
    predicate: str = Field(description="The name of the predicate being defined.")
    headArguments: list[str] = Field(
        description="Capitalized variable names used in the rule's head, like 'HID' or 'Price'."
    )


class RuleModel(BaseModel):
    name: str = Field(description="A short, snake_case name for the rule predicate.")
    naturalLanguageGoal: str = Field(
        description="A plain English question this rule is designed to answer."
    )
    ruleHead: RuleHeadModel
    ruleBody: list[ClauseModel]

    def to_ir(self) -> Rule:
        return Rule(
            name=self.name,
            natural_language_goal=self.naturalLanguageGoal,
            head=RuleHead(predicate=self.ruleHead.predicate, args=list(self.ruleHead.headArguments)),
            body=[clause.to_ir() for clause in self.ruleBody],
        )


class QueryModel(BaseModel):
    name: str = Field(description="A short, unique, snake_case name for this query.")
    description: str
    find: list[str] = Field(description="Variable names to return in the result.")
    where: list[AtomModel]

    def to_ir(self) -> FinalQuery:
        return FinalQuery(
            name=self.name,
            description=self.description,
            find=list(self.find),
            where=[atom.to_ir() for atom in self.where],
        )


class ProgramModel(BaseModel):
    rules: list[RuleModel]
    queries: list[QueryModel]

    def to_program(self) -> Program:
        return Program(
            rules=[rule.to_ir() for rule in self.rules],
            queries=[query.to_ir() for query in self.queries],
        )


class BaseFactPredicate(BaseModel):
    model_config = ConfigDict(frozen=True)

    predicateName: str = Field(
        description='The snake_case name of the fact, e.g. "hotel_price".'
    )
    arguments: list[str] = Field(
        description='Capitalized argument names, e.g. ["HID", "Price"].'
    )
    description: str = Field(description="What this fact represents.")


class PredicateDiscovery(BaseModel):
    baseFactSchema: list[BaseFactPredicate]


def build_program_response_schema() -> dict[str, Any]:
    """JSON Schema for a full rule/query program response."""

    return ProgramModel.model_json_schema()


def build_predicate_discovery_schema() -> dict[str, Any]:
    """JSON Schema for the base-fact discovery response."""

    return PredicateDiscovery.model_json_schema()


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Response is not valid JSON: {exc}") from exc


def parse_program_response(text: str) -> Program:
    """Parse a program response into IR.

    Raises:
        DecodeError: The text is not JSON.
        ShapeValidationError: The JSON does not match the program shape, or
            violates an IR invariant such as a duplicate query name.
    """

    payload = _load(text)
    try:
        model = ProgramModel.model_validate(payload)
    except PydanticValidationError as exc:
        raise ShapeValidationError(f"Program response has {exc.error_count()} error(s).") from exc
    try:
        return model.to_program()
    except SchemaError as exc:
        raise ShapeValidationError(str(exc)) from exc


def parse_predicate_discovery(text: str) -> list[BaseFactPredicate]:
    payload = _load(text)
    try:
        return list(PredicateDiscovery.model_validate(payload).baseFactSchema)
    except PydanticValidationError as exc:
        raise ShapeValidationError(
            f"Predicate discovery response has {exc.error_count()} error(s)."
        ) from exc


def describe_base_facts(facts: list[BaseFactPredicate]) -> str:
    """One ``predicate(?Arg, ...): description`` line per base fact."""

    lines: list[str] = []
    for fact in facts:
        args = ", ".join(f"?{arg}" for arg in fact.arguments)
        lines.append(f"{fact.predicateName}({args}): {fact.description}")
    return "\n".join(lines)

"""Shapes of objects streamed back by the generative service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class MangleSchemaPayload(BaseModel):
    """Guiding questions plus fact and rule signatures for a research goal."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    guiding_questions: list[StrictStr]
    mangle_facts: list[StrictStr]
    mangle_rules: list[StrictStr]

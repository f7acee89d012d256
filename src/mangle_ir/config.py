"""Compiler and extractor configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


TrailingDataPolicy = Literal["warn", "error", "ignore"]


@dataclass(frozen=True)
class CompilerConfig:
    """Options for rendering a program into Mangle source.

    Attributes:
        check_projection: Reject queries whose ``find`` variables do not occur
            in their ``where`` atoms.
        rule_separator: Text placed between rendered statements.
    """

    check_projection: bool = False
    rule_separator: str = "\n\n"


@dataclass(frozen=True)
class ExtractorConfig:
    """Options for the streaming object extractor."""

    trailing_data_policy: TrailingDataPolicy = "warn"

    def __post_init__(self) -> None:
        if self.trailing_data_policy not in ("warn", "error", "ignore"):
            raise ValueError(
                f"Unknown trailing data policy: {self.trailing_data_policy}. "
                "Expected one of ['error', 'ignore', 'warn']."
            )

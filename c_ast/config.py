"""Extraction configuration (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NestedInitializerPolicy(Enum):
    """How a nested brace-initializer inside a struct initializer is bound."""

    FLATTEN = "flatten"
    AGGREGATE = "aggregate"


@dataclass(frozen=True)
class ExtractorConfig:
    """Groups extraction behaviour switches."""

    nested_initializers: NestedInitializerPolicy = NestedInitializerPolicy.FLATTEN
    match_designators: bool = False
    strict: bool = False

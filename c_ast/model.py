"""Extraction data model — expressions, struct types, values and issues."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceLocation(BaseModel):
    """Structured source span from tree-sitter AST nodes."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def from_node(cls, node) -> SourceLocation:
        s, e = node.start_point, node.end_point
        return cls(
            start_line=s[0] + 1,
            start_col=s[1],
            end_line=e[0] + 1,
            end_col=e[1],
        )

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


# ── Expressions ──────────────────────────────────────────────────


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Integer(_Frozen):
    kind: Literal["integer"] = "integer"
    text: str

    def __str__(self) -> str:
        return f'Integer("{self.text}")'


class Float(_Frozen):
    kind: Literal["float"] = "float"
    text: str

    def __str__(self) -> str:
        return f'Float("{self.text}")'


class CharacterText(_Frozen):
    """Payload of a character constant, without prefix or quotes."""

    kind: Literal["character"] = "character"
    text: str

    def __str__(self) -> str:
        return f'Character("{self.text}")'


class StringLiteralParts(_Frozen):
    """Adjacent string-literal tokens, one part per token, never concatenated."""

    kind: Literal["string"] = "string"
    parts: list[str]

    def __str__(self) -> str:
        inner = ", ".join(f'"{p}"' for p in self.parts)
        return f"StringLiteral([{inner}])"


class Unrecognized(_Frozen):
    """Any expression form the simplifier does not interpret."""

    kind: Literal["unrecognized"] = "unrecognized"
    node_type: str
    text: str

    def __str__(self) -> str:
        return f"Unrecognized({self.node_type}: {self.text})"


class Aggregate(_Frozen):
    """A nested brace-initializer kept as structure instead of flattened."""

    kind: Literal["aggregate"] = "aggregate"
    items: list[Expression]

    def __str__(self) -> str:
        return "Aggregate([" + ", ".join(str(i) for i in self.items) + "])"


Expression = Annotated[
    Union[Integer, Float, CharacterText, StringLiteralParts, Unrecognized, Aggregate],
    Field(discriminator="kind"),
]

Aggregate.model_rebuild()


# ── Struct types ─────────────────────────────────────────────────


class StructTypeDefinition(BaseModel):
    tag_name: str
    fields: list[str] = []

    def __str__(self) -> str:
        return f"struct {self.tag_name} {{ {', '.join(self.fields)} }}"


# ── Values ───────────────────────────────────────────────────────


class ScalarValue(_Frozen):
    kind: Literal["scalar"] = "scalar"
    name: str
    expression: Expression

    def __str__(self) -> str:
        return f"{self.name} = {self.expression}"


class StructInstance(_Frozen):
    """A struct-typed variable and its (field, expression) bindings, in bind order."""

    kind: Literal["struct"] = "struct"
    type_name: str
    instance_name: str
    field_bindings: list[tuple[str, Expression]] = []

    def __str__(self) -> str:
        lines = [f"struct {self.type_name} {self.instance_name}"]
        lines.extend(f"  .{name} = {expr}" for name, expr in self.field_bindings)
        return "\n".join(lines)


Value = Annotated[Union[ScalarValue, StructInstance], Field(discriminator="kind")]

ValueKey = tuple[Union[str, None], str]


# ── Issues ───────────────────────────────────────────────────────


class IssueKind(str, Enum):
    UNEXPECTED_DECLARATOR = "UNEXPECTED_DECLARATOR"
    UNKNOWN_STRUCT_TYPE = "UNKNOWN_STRUCT_TYPE"
    UNKNOWN_DESIGNATOR = "UNKNOWN_DESIGNATOR"
    SYNTAX_ERROR = "SYNTAX_ERROR"


class ExtractionIssue(BaseModel):
    """A declaration the extractor could not interpret and skipped."""

    kind: IssueKind
    message: str
    location: SourceLocation = NO_SOURCE_LOCATION

    def __str__(self) -> str:
        if self.location.is_unknown():
            return f"{self.kind.value}: {self.message}"
        return f"{self.location}: {self.kind.value}: {self.message}"

"""Struct Type and Value catalogs, built incrementally during one traversal."""

from __future__ import annotations

import logging
from typing import Iterator

from . import constants
from .initializers import InitializerFlattener
from .model import (
    ExtractionIssue,
    IssueKind,
    ScalarValue,
    SourceLocation,
    StructInstance,
    StructTypeDefinition,
    Value,
    ValueKey,
)
from .simplifier import ExpressionSimplifier

logger = logging.getLogger(__name__)


class StructTypeCatalog:
    """Struct tag -> ordered field names, in first-seen order."""

    def __init__(self):
        self._types: dict[str, StructTypeDefinition] = {}

    def record_field(self, current_tag: str | None, field_name: str) -> None:
        if current_tag is None:
            logger.warning(
                "Field '%s' seen outside of any tagged struct, ignoring", field_name
            )
            return
        definition = self._types.setdefault(
            current_tag, StructTypeDefinition(tag_name=current_tag)
        )
        if field_name in definition.fields:
            logger.debug("struct %s: field '%s' already recorded", current_tag, field_name)
            return
        definition.fields.append(field_name)

    def get(self, tag: str) -> StructTypeDefinition | None:
        return self._types.get(tag)

    def __contains__(self, tag: str) -> bool:
        return tag in self._types

    def __iter__(self) -> Iterator[StructTypeDefinition]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def to_dict(self) -> dict[str, list[str]]:
        return {tag: list(d.fields) for tag, d in self._types.items()}


def declarator_name(
    declarator, simplifier: ExpressionSimplifier, identifier_type: str = constants.IDENTIFIER
) -> str | None:
    """Name of a declarator that is a plain identifier under pointer/array wrappers.

    Returns None for parenthesized or function declarators.
    """
    node = declarator
    while node is not None and node.type in constants.TRANSPARENT_DECLARATOR_TYPES:
        node = node.child_by_field_name("declarator")
    if node is None or node.type != identifier_type:
        return None
    return simplifier.node_text(node)


class ValueCatalog:
    """(struct tag | None, name) -> Value. The first declaration of a key wins."""

    def __init__(
        self,
        struct_types: StructTypeCatalog,
        simplifier: ExpressionSimplifier,
        flattener: InitializerFlattener,
    ):
        self._struct_types = struct_types
        self._simplifier = simplifier
        self._flattener = flattener
        self._values: dict[ValueKey, Value] = {}

    def record_init_declarator(
        self, current_tag: str | None, node
    ) -> list[ExtractionIssue]:
        """Record an init_declarator; declarations without an initializer are skipped."""
        initializer = node.child_by_field_name("value")
        if initializer is None:
            return []
        declarator = node.child_by_field_name("declarator")
        name = declarator_name(declarator, self._simplifier) if declarator else None
        if name is None:
            shown = self._simplifier.node_text(declarator) if declarator else "?"
            return [
                ExtractionIssue(
                    kind=IssueKind.UNEXPECTED_DECLARATOR,
                    message=f"expected an identifier declarator, got '{shown}'",
                    location=SourceLocation.from_node(node),
                )
            ]
        return self.record_declaration(current_tag, name, initializer)

    def record_declaration(
        self, current_tag: str | None, name: str, initializer
    ) -> list[ExtractionIssue]:
        key: ValueKey = (current_tag, name)
        if key in self._values:
            logger.debug("Value %s already recorded, keeping the first", key)
            return []

        if initializer.type != constants.INITIALIZER_LIST:
            self._values[key] = ScalarValue(
                name=name, expression=self._simplifier.simplify(initializer)
            )
            return []

        if current_tag is None:
            logger.debug("Brace initializer for '%s' has no struct type, ignoring", name)
            return []

        struct_type = self._struct_types.get(current_tag)
        if struct_type is None:
            return [
                ExtractionIssue(
                    kind=IssueKind.UNKNOWN_STRUCT_TYPE,
                    message=f"struct type '{current_tag}' of '{name}' not found",
                    location=SourceLocation.from_node(initializer),
                )
            ]
        bindings, issues = self._flattener.bind(initializer, struct_type.fields)
        self._values[key] = StructInstance(
            type_name=current_tag, instance_name=name, field_bindings=bindings
        )
        return issues

    def get(self, current_tag: str | None, name: str) -> Value | None:
        return self._values.get((current_tag, name))

    def __contains__(self, key: ValueKey) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values.values())

    def __len__(self) -> int:
        return len(self._values)

    def items(self):
        return self._values.items()

    def to_dict(self) -> dict[ValueKey, Value]:
        return dict(self._values)

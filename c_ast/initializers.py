"""Brace-initializer binding against a struct's field list."""

from __future__ import annotations

import logging
from typing import Iterator

from . import constants
from .config import ExtractorConfig, NestedInitializerPolicy
from .model import Aggregate, Expression, ExtractionIssue, IssueKind, SourceLocation
from .simplifier import ExpressionSimplifier

logger = logging.getLogger(__name__)

Binding = tuple[str, Expression]


def initializer_elements(list_node) -> list:
    """Top-level elements of an initializer_list, in source order."""
    return [c for c in list_node.named_children if c.type not in constants.COMMENT_TYPES]


def designated_value(element):
    """The value part of `.f = v` / `[i] = v`; any other element is its own value."""
    if element.type == constants.INITIALIZER_PAIR:
        value = element.child_by_field_name("value")
        if value is not None:
            return value
    return element


class InitializerFlattener:
    """Pairs initializer elements with field names.

    Matching is positional unless ``match_designators`` is set. A nested
    initializer_list either collapses all of its leaves onto the outer field
    name (FLATTEN) or is kept as one Aggregate expression (AGGREGATE).
    """

    def __init__(self, simplifier: ExpressionSimplifier, config: ExtractorConfig):
        self._simplifier = simplifier
        self._config = config

    def bind(
        self, list_node, fields: list[str]
    ) -> tuple[list[Binding], list[ExtractionIssue]]:
        bindings: list[Binding] = []
        issues: list[ExtractionIssue] = []
        if self._config.match_designators:
            self._bind_designated(list_node, fields, bindings, issues)
        else:
            for element, field_name in zip(initializer_elements(list_node), fields):
                self._bind_element(field_name, element, bindings)
        return bindings, issues

    def leaves(self, list_node) -> Iterator:
        """Depth-first leaf expressions of a (possibly nested) initializer_list."""
        for element in initializer_elements(list_node):
            value = designated_value(element)
            if value.type == constants.INITIALIZER_LIST:
                yield from self.leaves(value)
            else:
                yield value

    def aggregate(self, list_node) -> Aggregate:
        items: list[Expression] = []
        for element in initializer_elements(list_node):
            value = designated_value(element)
            if value.type == constants.INITIALIZER_LIST:
                items.append(self.aggregate(value))
            else:
                items.append(self._simplifier.simplify(value))
        return Aggregate(items=items)

    def _bind_element(self, field_name: str, element, bindings: list[Binding]):
        value = designated_value(element)
        if value.type != constants.INITIALIZER_LIST:
            bindings.append((field_name, self._simplifier.simplify(value)))
        elif self._config.nested_initializers is NestedInitializerPolicy.AGGREGATE:
            bindings.append((field_name, self.aggregate(value)))
        else:
            bindings.extend(
                (field_name, self._simplifier.simplify(leaf))
                for leaf in self.leaves(value)
            )

    def _bind_designated(
        self,
        list_node,
        fields: list[str],
        bindings: list[Binding],
        issues: list[ExtractionIssue],
    ):
        cursor = 0
        for element in initializer_elements(list_node):
            name = self._designated_field(element)
            if name is not None:
                if name not in fields:
                    issues.append(
                        ExtractionIssue(
                            kind=IssueKind.UNKNOWN_DESIGNATOR,
                            message=f"designator '.{name}' names no known field",
                            location=SourceLocation.from_node(element),
                        )
                    )
                    continue
                cursor = fields.index(name)
            if cursor >= len(fields):
                logger.debug(
                    "Dropping excess initializer %s", self._simplifier.node_text(element)
                )
                continue
            self._bind_element(fields[cursor], element, bindings)
            cursor += 1

    def _designated_field(self, element) -> str | None:
        """Field named by the first designator of *element*, if it is a field designator."""
        if element.type != constants.INITIALIZER_PAIR:
            return None
        designator = element.child_by_field_name("designator")
        if designator is None:
            return None
        if designator.type == constants.FIELD_IDENTIFIER:
            # GNU `field: value`
            return self._simplifier.node_text(designator)
        if designator.type == constants.FIELD_DESIGNATOR:
            ident = next(
                (c for c in designator.named_children if c.type == constants.FIELD_IDENTIFIER),
                None,
            )
            return self._simplifier.node_text(ident) if ident else None
        return None

"""StructExtractor: depth-first walk over a tree-sitter C translation unit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from . import constants
from .catalogs import StructTypeCatalog, ValueCatalog, declarator_name
from .config import ExtractorConfig
from .errors import ExtractionError
from .initializers import InitializerFlattener
from .model import ExtractionIssue, IssueKind, SourceLocation
from .simplifier import ExpressionSimplifier

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """The two catalogs of one translation unit plus the declarations skipped."""

    struct_types: StructTypeCatalog
    values: ValueCatalog
    issues: list[ExtractionIssue] = field(default_factory=list)


class StructExtractor:
    """Collects struct shapes and initialized values from a C syntax tree.

    The tag of the innermost enclosing struct body is passed down as the
    ``scope`` argument of every visit; it is never stored on the instance,
    so leaving a struct body restores the enclosing tag.
    """

    def __init__(self, config: ExtractorConfig = ExtractorConfig()):
        self._config = config
        self._typedefs: dict[str, str] = {}
        self._simplifier = ExpressionSimplifier(b"")
        self._result: ExtractionResult | None = None
        self._stack: list[tuple[Callable, object, str | None]] = []
        self._DISPATCH: dict[str, Callable] = {
            **{t: self._visit_struct_specifier for t in constants.STRUCT_SPECIFIER_TYPES},
            constants.FIELD_DECLARATION: self._visit_field_declaration,
            constants.DECLARATION: self._visit_declaration,
            constants.TYPE_DEFINITION: self._visit_type_definition,
        }

    # ── entry point ──────────────────────────────────────────────

    def extract(self, tree, source: bytes) -> ExtractionResult:
        self._typedefs = {}
        self._simplifier = ExpressionSimplifier(source)
        struct_types = StructTypeCatalog()
        self._result = ExtractionResult(
            struct_types=struct_types,
            values=ValueCatalog(
                struct_types,
                self._simplifier,
                InitializerFlattener(self._simplifier, self._config),
            ),
        )
        self._walk(tree.root_node)
        logger.info(
            "Extracted %d struct types, %d values, %d issues",
            len(self._result.struct_types),
            len(self._result.values),
            len(self._result.issues),
        )
        return self._result

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._simplifier.node_text(node)

    def _report(self, issues: list[ExtractionIssue]):
        for issue in issues:
            if self._config.strict:
                raise ExtractionError(issue)
            logger.warning("Skipping declaration: %s", issue)
            self._result.issues.append(issue)

    def _declared_tag(self, type_node) -> str | None:
        """Struct tag named by a declaration's type specifier, through typedef aliases."""
        if type_node is None:
            return None
        if type_node.type in constants.STRUCT_SPECIFIER_TYPES:
            name_node = type_node.child_by_field_name("name")
            return self._node_text(name_node) if name_node else None
        if type_node.type == constants.TYPE_IDENTIFIER:
            return self._typedefs.get(self._node_text(type_node))
        return None

    # ── work stack ───────────────────────────────────────────────
    #
    # Every step is an (action, node, scope) entry popped off one explicit
    # stack, so deeply nested statements and expressions never grow the
    # Python call stack. Later steps are pushed first.

    def _walk(self, root):
        self._stack = [(self._visit, root, None)]
        while self._stack:
            action, node, scope = self._stack.pop()
            action(node, scope)

    def _schedule(self, action: Callable, node, scope: str | None):
        self._stack.append((action, node, scope))

    def _schedule_children(self, node, scope: str | None):
        for child in reversed(node.named_children):
            self._schedule(self._visit, child, scope)

    def _visit(self, node, scope: str | None):
        if not node.is_named or node.type in constants.COMMENT_TYPES:
            return
        if node.type == constants.ERROR_NODE_TYPE:
            self._report([
                ExtractionIssue(
                    kind=IssueKind.SYNTAX_ERROR,
                    message=f"unparsable source '{self._node_text(node)[:40]}'",
                    location=SourceLocation.from_node(node),
                )
            ])
            return
        handler = self._DISPATCH.get(node.type)
        if handler:
            handler(node, scope)
            return
        self._schedule_children(node, scope)

    # ── struct bodies and fields ─────────────────────────────────

    def _visit_struct_specifier(self, node, scope: str | None):
        body = node.child_by_field_name("body")
        if body is None:
            # `struct S` used as a type: a reference, not a definition
            return
        name_node = node.child_by_field_name("name")
        tag = self._node_text(name_node) if name_node else None
        self._schedule_children(body, tag)

    def _visit_field_declaration(self, node, scope: str | None):
        self._schedule(self._record_field_declarators, node, scope)
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            self._schedule(self._visit, type_node, scope)

    def _record_field_declarators(self, node, scope: str | None):
        for declarator in node.children_by_field_name("declarator"):
            name = declarator_name(
                declarator, self._simplifier, constants.FIELD_IDENTIFIER
            )
            if name is not None:
                self._result.struct_types.record_field(scope, name)
            else:
                logger.debug(
                    "Skipping %s field declarator '%s'",
                    declarator.type,
                    self._node_text(declarator),
                )

    # ── declarations ─────────────────────────────────────────────

    def _visit_declaration(self, node, scope: str | None):
        # the type may define the struct its own initializers refer to
        self._schedule(self._record_declarators, node, scope)
        type_node = node.child_by_field_name("type")
        if type_node is not None:
            self._schedule(self._visit, type_node, scope)

    def _record_declarators(self, node, scope: str | None):
        tag = self._declared_tag(node.child_by_field_name("type"))
        nested = []
        for declarator in node.children_by_field_name("declarator"):
            if declarator.type == constants.INIT_DECLARATOR:
                self._report(
                    self._result.values.record_init_declarator(tag, declarator)
                )
            else:
                nested.append(declarator)
        for declarator in reversed(nested):
            self._schedule(self._visit, declarator, scope)

    def _visit_type_definition(self, node, scope: str | None):
        type_node = node.child_by_field_name("type")
        aliases = [
            self._node_text(d)
            for d in node.children_by_field_name("declarator")
            if d.type == constants.TYPE_IDENTIFIER
        ]
        if type_node is None:
            return
        tag = self._declared_tag(type_node)
        body = (
            type_node.child_by_field_name("body")
            if type_node.type in constants.STRUCT_SPECIFIER_TYPES
            else None
        )
        if tag is None and body is not None and aliases:
            # typedef struct { ... } Point;  -> catalogued as Point
            tag = aliases[0]
            self._schedule_children(body, tag)
        else:
            self._schedule(self._visit, type_node, scope)
        if tag is None:
            return
        for alias in aliases:
            self._typedefs[alias] = tag

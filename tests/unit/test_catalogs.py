"""Tests for StructTypeCatalog, ValueCatalog and declarator name resolution."""

from __future__ import annotations

import logging

import tree_sitter_language_pack

from c_ast.catalogs import StructTypeCatalog, ValueCatalog, declarator_name
from c_ast.config import ExtractorConfig
from c_ast.initializers import InitializerFlattener
from c_ast.model import Integer, IssueKind, ScalarValue
from c_ast.simplifier import ExpressionSimplifier


def _init_declarator(source: str):
    source_bytes = source.encode("utf-8")
    tree = tree_sitter_language_pack.get_parser("c").parse(source_bytes)
    declaration = tree.root_node.named_children[-1]
    return declaration.child_by_field_name("declarator"), ExpressionSimplifier(source_bytes)


def _value_catalog(simplifier: ExpressionSimplifier, struct_types=None) -> ValueCatalog:
    return ValueCatalog(
        struct_types or StructTypeCatalog(),
        simplifier,
        InitializerFlattener(simplifier, ExtractorConfig()),
    )


class TestStructTypeCatalog:
    def test_record_field_creates_definition(self):
        catalog = StructTypeCatalog()
        catalog.record_field("S", "a")
        catalog.record_field("S", "b")
        assert "S" in catalog
        assert catalog.get("S").fields == ["a", "b"]

    def test_no_tag_is_a_warning_only(self, caplog):
        catalog = StructTypeCatalog()
        with caplog.at_level(logging.WARNING, logger="c_ast.catalogs"):
            catalog.record_field(None, "orphan")
        assert len(catalog) == 0
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING

    def test_duplicate_field_ignored(self):
        catalog = StructTypeCatalog()
        catalog.record_field("S", "a")
        catalog.record_field("S", "a")
        assert catalog.to_dict() == {"S": ["a"]}

    def test_iteration_in_first_seen_order(self):
        catalog = StructTypeCatalog()
        for tag in ("Z", "A", "M"):
            catalog.record_field(tag, "f")
        assert [d.tag_name for d in catalog] == ["Z", "A", "M"]

    def test_rendering(self):
        catalog = StructTypeCatalog()
        catalog.record_field("S", "a")
        catalog.record_field("S", "b")
        assert str(catalog.get("S")) == "struct S { a, b }"


class TestDeclaratorName:
    def test_plain_identifier(self):
        node, simplifier = _init_declarator("int x = 1;")
        assert declarator_name(node.child_by_field_name("declarator"), simplifier) == "x"

    def test_through_pointer_and_array(self):
        node, simplifier = _init_declarator("char *names[2] = {0};")
        assert declarator_name(node.child_by_field_name("declarator"), simplifier) == "names"

    def test_function_pointer_rejected(self):
        node, simplifier = _init_declarator("void (*fp)(void) = 0;")
        assert declarator_name(node.child_by_field_name("declarator"), simplifier) is None


class TestValueCatalog:
    def test_record_declaration_scalar(self):
        node, simplifier = _init_declarator("int n = 5;")
        catalog = _value_catalog(simplifier)
        issues = catalog.record_declaration(None, "n", node.child_by_field_name("value"))
        assert issues == []
        assert catalog.get(None, "n") == ScalarValue(name="n", expression=Integer(text="5"))
        assert (None, "n") in catalog

    def test_same_name_different_scope_are_distinct(self):
        node, simplifier = _init_declarator("int n = 5;")
        catalog = _value_catalog(simplifier)
        value = node.child_by_field_name("value")
        catalog.record_declaration(None, "n", value)
        catalog.record_declaration("S", "n", value)
        assert len(catalog) == 2

    def test_unknown_struct_type_issue(self):
        node, simplifier = _init_declarator("struct T t = {1};")
        catalog = _value_catalog(simplifier)
        issues = catalog.record_init_declarator("T", node)
        assert [i.kind for i in issues] == [IssueKind.UNKNOWN_STRUCT_TYPE]
        assert len(catalog) == 0

    def test_struct_instance_against_known_type(self):
        node, simplifier = _init_declarator("struct T t = {1, 2};")
        struct_types = StructTypeCatalog()
        struct_types.record_field("T", "first")
        catalog = _value_catalog(simplifier, struct_types)
        assert catalog.record_init_declarator("T", node) == []
        assert catalog.get("T", "t").field_bindings == [("first", Integer(text="1"))]
        assert str(catalog.get("T", "t")) == 'struct T t\n  .first = Integer("1")'

    def test_unexpected_declarator_issue(self):
        node, simplifier = _init_declarator("void (*fp)(void) = 0;")
        catalog = _value_catalog(simplifier)
        issues = catalog.record_init_declarator(None, node)
        assert [i.kind for i in issues] == [IssueKind.UNEXPECTED_DECLARATOR]
        assert issues[0].location.start_line == 1

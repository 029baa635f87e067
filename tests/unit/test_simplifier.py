"""Tests for ExpressionSimplifier — tree-sitter C expression -> Expression."""

from __future__ import annotations

import pytest
import tree_sitter_language_pack

from c_ast.model import (
    CharacterText,
    Float,
    Integer,
    StringLiteralParts,
    Unrecognized,
)
from c_ast.simplifier import ExpressionSimplifier, is_float_literal


def _simplify(expr: str):
    source = f"int v = {expr};".encode("utf-8")
    tree = tree_sitter_language_pack.get_parser("c").parse(source)
    declaration = tree.root_node.named_children[0]
    init_declarator = declaration.child_by_field_name("declarator")
    return ExpressionSimplifier(source).simplify(
        init_declarator.child_by_field_name("value")
    )


class _LiteralNode:
    """Stand-in for a tree-sitter node spanning ``source[start:end]``."""

    is_named = True

    def __init__(self, node_type: str, start_byte: int, end_byte: int):
        self.type = node_type
        self.start_byte = start_byte
        self.end_byte = end_byte
        self.named_children = []


class TestNumericConstants:
    def test_hex_integer_keeps_lexical_text(self):
        assert _simplify("0x1A") == Integer(text="0x1A")

    def test_decimal_and_hex_stay_distinct(self):
        assert _simplify("16") == Integer(text="16")
        assert _simplify("0x10") == Integer(text="0x10")

    def test_integer_suffix_kept(self):
        assert _simplify("10UL") == Integer(text="10UL")

    def test_float_with_suffix(self):
        assert _simplify("3.14f") == Float(text="3.14f")

    def test_float_exponent(self):
        assert _simplify("1e10") == Float(text="1e10")


class TestIsFloatLiteral:
    @pytest.mark.parametrize("text", ["1.0", ".5", "1e3", "2E-1", "0x1p4", "0x1.8P1"])
    def test_floats(self, text):
        assert is_float_literal(text)

    @pytest.mark.parametrize("text", ["0", "42u", "0x1E", "0XEE", "017"])
    def test_integers(self, text):
        assert not is_float_literal(text)


class TestCharactersAndStrings:
    def test_character_payload(self):
        assert _simplify("'x'") == CharacterText(text="x")

    def test_escaped_character_kept_raw(self):
        assert _simplify("'\\n'") == CharacterText(text="\\n")

    def test_wide_character_prefix_dropped(self):
        assert _simplify("L'x'") == CharacterText(text="x")

    def test_single_string_literal(self):
        assert _simplify('"hi"') == StringLiteralParts(parts=["hi"])

    def test_adjacent_literals_kept_separate(self):
        assert _simplify('"ab" "cd"') == StringLiteralParts(parts=["ab", "cd"])


class TestUnrecognized:
    def test_function_call(self):
        result = _simplify("compute(1, 2)")
        assert isinstance(result, Unrecognized)
        assert result.node_type == "call_expression"
        assert result.text == "compute(1, 2)"

    def test_negative_number_is_not_evaluated(self):
        result = _simplify("-1")
        assert isinstance(result, Unrecognized)
        assert result.text == "-1"

    def test_signed_number_literal_is_unrecognized(self):
        # grammars that fold the sign into number_literal must not yield Integer
        source = b"-1"
        node = _LiteralNode("number_literal", 0, len(source))
        result = ExpressionSimplifier(source).simplify(node)
        assert result == Unrecognized(node_type="number_literal", text="-1")

    def test_plus_signed_float_is_unrecognized(self):
        source = b"+1.5"
        node = _LiteralNode("number_literal", 0, len(source))
        assert isinstance(ExpressionSimplifier(source).simplify(node), Unrecognized)

    def test_concatenation_with_macro_is_unrecognized(self):
        result = _simplify('"%" PRIu64 "\\n"')
        assert result == Unrecognized(
            node_type="concatenated_string", text='"%" PRIu64 "\\n"'
        )

    def test_identifier(self):
        assert _simplify("OTHER") == Unrecognized(node_type="identifier", text="OTHER")

    def test_rendering_is_non_empty(self):
        assert str(_simplify("a + b")) == "Unrecognized(binary_expression: a + b)"

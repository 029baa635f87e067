"""ExpressionSimplifier — tree-sitter C expression node -> simplified Expression."""

from __future__ import annotations

from typing import Callable

from . import constants
from .model import (
    CharacterText,
    Expression,
    Float,
    Integer,
    StringLiteralParts,
    Unrecognized,
)

_HEX_PREFIXES = ("0x", "0X")


def is_float_literal(text: str) -> bool:
    """True when *text* is a C floating constant rather than an integer one."""
    if text.startswith(_HEX_PREFIXES):
        return any(c in text for c in ".pP")
    return any(c in text for c in ".eE")


def _quoted_payload(text: str, quote: str) -> str:
    """Strip an optional encoding prefix (L, u, U, u8) and the enclosing quotes."""
    start = text.find(quote)
    end = text.rfind(quote)
    if start == -1 or end <= start:
        return text
    return text[start + 1 : end]


class ExpressionSimplifier:
    """Maps expression nodes onto the small set of Expression kinds.

    Total: every node yields an Expression, falling back to Unrecognized with
    the node type and its source text.
    """

    def __init__(self, source: bytes):
        self._source = source
        self._DISPATCH: dict[str, Callable] = {
            constants.NUMBER_LITERAL: self._simplify_number,
            constants.CHAR_LITERAL: self._simplify_char,
            constants.STRING_LITERAL: self._simplify_string,
            constants.CONCATENATED_STRING: self._simplify_concatenated,
        }

    def node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode(
            "utf-8", errors="replace"
        )

    def simplify(self, node) -> Expression:
        handler = self._DISPATCH.get(node.type)
        if handler:
            return handler(node)
        return self._unrecognized(node)

    def _unrecognized(self, node) -> Unrecognized:
        return Unrecognized(node_type=node.type, text=self.node_text(node))

    def _simplify_number(self, node) -> Expression:
        text = self.node_text(node)
        if text.startswith(("+", "-")):
            # some grammar versions fold a sign into the literal
            return self._unrecognized(node)
        if is_float_literal(text):
            return Float(text=text)
        return Integer(text=text)

    def _simplify_char(self, node) -> Expression:
        return CharacterText(text=_quoted_payload(self.node_text(node), "'"))

    def _simplify_string(self, node) -> Expression:
        return StringLiteralParts(parts=[_quoted_payload(self.node_text(node), '"')])

    def _simplify_concatenated(self, node) -> Expression:
        pieces = [c for c in node.named_children if c.type not in constants.COMMENT_TYPES]
        if any(c.type != constants.STRING_LITERAL for c in pieces):
            # e.g. "%" PRIu64 "\n": macro pieces cannot be kept as literal text
            return self._unrecognized(node)
        return StringLiteralParts(
            parts=[_quoted_payload(self.node_text(c), '"') for c in pieces]
        )

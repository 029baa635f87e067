"""Named constants — tree-sitter node types and CLI defaults."""

from __future__ import annotations

LANGUAGE = "c"

DEFAULT_SOURCE_PATH = "./main.c"
DEFAULT_PREPROCESS_COMMAND: tuple[str, ...] = ("cc", "-E", "-P")

# Node types that open a struct-like body
STRUCT_SPECIFIER_TYPES = frozenset({"struct_specifier", "union_specifier"})

FIELD_DECLARATION = "field_declaration"
FIELD_IDENTIFIER = "field_identifier"
DECLARATION = "declaration"
INIT_DECLARATOR = "init_declarator"
TYPE_DEFINITION = "type_definition"
TYPE_IDENTIFIER = "type_identifier"
IDENTIFIER = "identifier"

# Declarator wrappers that still name a plain identifier (char *s, int a[3])
TRANSPARENT_DECLARATOR_TYPES = frozenset({"pointer_declarator", "array_declarator"})

INITIALIZER_LIST = "initializer_list"
INITIALIZER_PAIR = "initializer_pair"
FIELD_DESIGNATOR = "field_designator"

NUMBER_LITERAL = "number_literal"
CHAR_LITERAL = "char_literal"
STRING_LITERAL = "string_literal"
CONCATENATED_STRING = "concatenated_string"

COMMENT_TYPES = frozenset({"comment"})

ERROR_NODE_TYPE = "ERROR"

SECTION_STRUCT_TYPES = "═══ Struct Types ═══"
SECTION_VALUES = "═══ Values ═══"

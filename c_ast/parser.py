"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from . import constants
from .errors import PreprocessorError, SourceSyntaxError
from .model import SourceLocation

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


class Parser:
    """Thin wrapper around a parser factory, fixed to the C grammar."""

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()

    def parse(self, source: bytes, check_errors: bool = True):
        parser = self._factory.get_parser(constants.LANGUAGE)
        tree = parser.parse(source)
        if check_errors:
            error_node = find_syntax_error(tree)
            if error_node is not None:
                raise SourceSyntaxError(
                    _describe_error(error_node), SourceLocation.from_node(error_node)
                )
        return tree


def find_syntax_error(tree):
    """Return the first ERROR or missing node in document order, or None."""
    root = tree.root_node
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == constants.ERROR_NODE_TYPE or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return root


def _describe_error(node) -> str:
    if node.is_missing:
        return f"missing {node.type}"
    return "syntax error"


def preprocess(path: Path, command: Sequence[str] = constants.DEFAULT_PREPROCESS_COMMAND) -> bytes:
    """Run the C preprocessor over *path* and return the expanded source."""
    argv = [*command, str(path)]
    logger.info("Preprocessing %s with %s", path, " ".join(command))
    try:
        completed = subprocess.run(argv, capture_output=True, check=False)
    except OSError as exc:
        raise PreprocessorError(f"cannot run {command[0]!r}: {exc}") from exc
    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        raise PreprocessorError(
            f"{command[0]} exited with status {completed.returncode}: {stderr}"
        )
    return completed.stdout

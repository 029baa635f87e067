"""Composable API functions for the extraction pipeline.

Each function corresponds to a CLI workflow (text dump, --json) but is
callable programmatically without argparse.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from .config import ExtractorConfig
from .errors import SourcePathError
from .extractor import ExtractionResult, StructExtractor
from .parser import Parser, preprocess
from . import constants

logger = logging.getLogger(__name__)


def extract_source(
    source: str | bytes,
    config: ExtractorConfig = ExtractorConfig(),
    parser: Parser | None = None,
) -> ExtractionResult:
    """Parse C source text and extract its struct types and initialized values.

    Args:
        source: The C source text.
        config: Extraction behaviour switches.
        parser: Parser to use; a tree-sitter backed one by default.

    Returns:
        An ExtractionResult with both catalogs and any skipped declarations.

    Raises:
        SourceSyntaxError: In strict mode, the source does not parse.
            Otherwise unparsable regions are skipped and reported as
            SYNTAX_ERROR issues.
        ExtractionError: In strict mode, for the first declaration that
            cannot be extracted.
    """
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    logger.info("Parsing %d bytes of C source", len(source_bytes))
    tree = (parser or Parser()).parse(source_bytes, check_errors=config.strict)
    return StructExtractor(config).extract(tree, source_bytes)


def extract_file(
    path: str | Path,
    config: ExtractorConfig = ExtractorConfig(),
    preprocess_command: Sequence[str] | None = None,
) -> ExtractionResult:
    """Read (optionally preprocess) a C file and extract it.

    Args:
        path: The C source file.
        config: Extraction behaviour switches.
        preprocess_command: If given, the file is run through this
            preprocessor command (e.g. ``["cc", "-E", "-P"]``) first.
    """
    path = Path(path)
    if preprocess_command:
        return extract_source(preprocess(path, preprocess_command), config)
    try:
        source = path.read_bytes()
    except OSError as exc:
        raise SourcePathError(f"cannot read {path}: {exc}") from exc
    logger.info("Extracting %s", path)
    return extract_source(source, config)


def dump_catalogs(result: ExtractionResult) -> str:
    """Render both catalogs as human-readable text."""
    lines = [constants.SECTION_STRUCT_TYPES]
    lines.extend(str(definition) for definition in result.struct_types)
    lines.append("")
    lines.append(constants.SECTION_VALUES)
    lines.extend(str(value) for value in result.values)
    return "\n".join(lines)


def dump_json(result: ExtractionResult) -> str:
    """Render the result as a JSON document."""
    document = {
        "struct_types": [d.model_dump(mode="json") for d in result.struct_types],
        "values": [
            {"scope": tag, **value.model_dump(mode="json")}
            for (tag, _), value in result.values.items()
        ],
        "issues": [issue.model_dump(mode="json") for issue in result.issues],
    }
    return json.dumps(document, indent=2)

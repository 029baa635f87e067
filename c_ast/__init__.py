"""C struct shape and initializer extraction."""

from .api import (  # noqa: F401
    extract_source,
    extract_file,
    dump_catalogs,
    dump_json,
)
from .config import ExtractorConfig, NestedInitializerPolicy  # noqa: F401
from .extractor import ExtractionResult, StructExtractor  # noqa: F401

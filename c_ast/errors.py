"""Exceptions raised by the parsing layer and the extractor."""

from __future__ import annotations

from .model import NO_SOURCE_LOCATION, ExtractionIssue, SourceLocation


class CAstError(Exception):
    """Base class for every error reported by c_ast."""


class SourcePathError(CAstError):
    """The source path could not be expanded or read."""


class PreprocessorError(CAstError):
    """The external C preprocessor failed or could not be started."""


class SourceSyntaxError(CAstError):
    """The C parser reported a syntax error."""

    def __init__(self, message: str, location: SourceLocation = NO_SOURCE_LOCATION):
        super().__init__(f"{location}: {message}")
        self.location = location


class ExtractionError(CAstError):
    """Raised in strict mode for the first declaration that cannot be extracted."""

    def __init__(self, issue: ExtractionIssue):
        super().__init__(str(issue))
        self.issue = issue

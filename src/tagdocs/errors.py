"""Fatal errors for a tagdocs run.

Anything recoverable is recorded as a Diagnostic instead and never raised.
"""

from __future__ import annotations

from pathlib import Path


class TagdocsError(Exception):
    """Base exception for tagdocs operations."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class SourceRootError(TagdocsError):
    """Raised when the source root does not exist or is not a directory."""

    pass


class NoSourceFilesError(TagdocsError):
    """Raised when discovery finds nothing to document."""

    pass


class TemplateBundleError(TagdocsError):
    """Raised when the template bundle or its page template is missing."""

    pass


class OutputRootError(TagdocsError):
    """Raised when the output root cannot be replaced or written."""

    pass


class ModelLoadError(TagdocsError):
    """Raised when docs.json cannot be parsed back into a DocumentModel."""

    pass

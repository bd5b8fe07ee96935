"""Exceptions raised by the import preview pipeline.

Only structural problems are raised. Cell and schema problems found while
validating are returned as ``ValidationError`` records instead.
"""

from __future__ import annotations

from typing import Optional


class ImportPreviewError(Exception):
    """Base exception for all import preview errors."""


class EmptyFileError(ImportPreviewError):
    """The decoded document has no non-blank line."""

    def __init__(self, message: str = "empty file") -> None:
        super().__init__(message)


class FetchError(ImportPreviewError):
    """A remote file could not be downloaded."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class UnknownRuleSetError(ImportPreviewError):
    """No rule set is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown rule set: {name}")

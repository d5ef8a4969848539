"""Errors raised while loading benchmark results.

Kept separate so the CLI and the dashboards can catch data failures without
importing pandas.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class LatencyDataError(Exception):
    """Base for all results-file errors."""

    def __init__(self, message: str, *, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class FileError(LatencyDataError):
    """Raised when the results file is missing, a directory, or unreadable."""


class ParseError(LatencyDataError):
    """Raised when the results file is empty or not well-formed delimited text."""


class SchemaError(ParseError):
    """Raised when the results file parses but lacks a required column."""

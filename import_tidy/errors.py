"""Exceptions raised by import-tidy.

Errors a user can act on (bad configuration, invalid Go source) derive from
ImportTidyError and are reported without a traceback by the CLI.
"""

from __future__ import annotations


class ImportTidyError(Exception):
    """Base class for user-facing import-tidy errors."""


class ConfigError(ImportTidyError):
    """Missing or malformed configuration."""


class SourceParseError(ImportTidyError):
    """Go source that could not be parsed."""

    def __init__(self, message: str, lineno: int = 0):
        super().__init__(message)
        self.lineno = lineno


__all__ = ["ImportTidyError", "ConfigError", "SourceParseError"]

# backend/src/nosqlmanager/errors.py
from __future__ import annotations


class NoSQLManagerError(Exception):
    """Base class for every error raised by the document manager."""


class InvalidArgument(NoSQLManagerError, ValueError):
    """Null document, null id, or id text that is not an integer."""


class NotFound(NoSQLManagerError, KeyError):
    """Target id is not in the index."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "not found"


class CorruptFile(NoSQLManagerError, ValueError):
    """Persistence file is non-empty but does not decode."""


class IoFailure(NoSQLManagerError, OSError):
    """File read or write failed at the OS level."""

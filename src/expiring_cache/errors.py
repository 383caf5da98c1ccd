from __future__ import annotations


class CacheError(Exception):
    """Base error for the expiring cache."""


class ValidationError(CacheError, ValueError):
    """Raised when a caller passes an invalid argument."""


class ImportFormatError(CacheError, ValueError):
    """Raised when an exported payload cannot be imported."""

"""Resolver subsystem exceptions.

Not-found outcomes are never raised: lookups return ``None`` or an empty
list. Only caller mistakes and unsupported operations surface as errors.
"""
from __future__ import annotations

from typing import Any, Mapping

from ibiblio.core.exceptions import IbiblioError


class ResolverError(IbiblioError):
    """Base exception for resolver subsystem errors."""


class InvalidArgumentError(ResolverError, ValueError):
    """Raised when an explicit root or pattern is missing or empty."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ResolverError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class UnsupportedOperationError(ResolverError, NotImplementedError):
    """Raised for operations a read-only repository cannot perform."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ResolverError.__init__(self, message, context=context)
        NotImplementedError.__init__(self, message)


class SettingsError(ResolverError):
    """Raised when repository settings files are unreadable or invalid."""


class TransportError(ResolverError):
    """Raised when a resource cannot be fetched from a repository."""


__all__ = [
    "ResolverError",
    "InvalidArgumentError",
    "UnsupportedOperationError",
    "SettingsError",
    "TransportError",
]

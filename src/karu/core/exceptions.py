"""
Custom exceptions for Karu.

Modified: 2025-11-12
"""


class KaruError(Exception):
    """Base exception for all Karu errors."""

    pass


class IoFailure(KaruError):
    """Raised when a filesystem, trash, opener or decode operation fails."""

    pass


class InvalidInput(KaruError):
    """Raised when user input cannot be acted on (empty name, parent entry, ...)."""

    pass


class PreviewUnavailable(KaruError):
    """Raised when a preview cannot be produced; rendered as a fallback, not a banner."""

    pass


class ConfigurationError(KaruError):
    """Raised when configuration is invalid."""

    pass

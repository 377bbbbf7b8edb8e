"""Exception hierarchy for the composition engine and service."""

from __future__ import annotations


class ComposerError(Exception):
    """Base exception for all composer errors."""


class RetrievalError(ComposerError):
    """Raised when a figure cannot be fetched from the image source."""


class InvalidFigureError(RetrievalError):
    """Raised when a fetched payload is not a usable SVG document."""


class PreconditionError(ComposerError):
    """Raised when an export is requested while a figure is missing."""


class ValidationError(ComposerError):
    """Raised when a placement or canvas setting is invalid."""


class SessionNotFoundError(ComposerError):
    """Raised when a composition session id is unknown."""

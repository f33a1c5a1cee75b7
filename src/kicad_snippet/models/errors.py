"""Custom exception hierarchy for the KiCad snippet toolkit."""

from __future__ import annotations


class KiCadSnippetError(Exception):
    """Base exception for all KiCad snippet errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class SExpressionError(KiCadSnippetError):
    """Text is not a well-formed S-expression."""


class UnbalancedParenthesesError(SExpressionError):
    """Opening and closing parentheses do not pair up."""


class FormatCompatibilityError(KiCadSnippetError):
    """Well-formed input that is not a supported KiCad schematic."""


class UnsupportedVersionError(FormatCompatibilityError):
    """Schematic version is missing or older than KiCad 6."""


class InvalidPathError(KiCadSnippetError):
    """File path is invalid or inaccessible."""

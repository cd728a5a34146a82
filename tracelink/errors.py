"""tracelink error hierarchy and exceptions."""

from __future__ import annotations


class TracelinkError(Exception):
    """Base exception for all tracelink errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(TracelinkError):
    """Raised when configuration is invalid or conflicting."""
    pass


class DecodeError(TracelinkError, ValueError):
    """Raised when a header value is not validly URL-escaped."""

    def __init__(self, message: str, header: str = None, value: str = None):
        details = {}
        if header is not None:
            details["header"] = header
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.header = header
        self.value = value


class PropagationError(TracelinkError):
    """Raised when identity/attribute maps cannot be turned into a span."""
    pass

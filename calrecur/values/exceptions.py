"""Recurrence-specific exceptions for error handling."""

from typing import Optional


class RecurrenceError(Exception):
    """Base exception for recurrence-related errors."""

    def __init__(self, message: str, fragment: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.fragment = fragment


class RecurrenceParseError(RecurrenceError):
    """Exception raised when a content line or one of its parts cannot be parsed."""

    def __init__(self, message: str, fragment: Optional[str] = None):
        if fragment is not None:
            message = f"{message} [{fragment}]"
        super().__init__(message, fragment)


class RecurrenceRoleError(RecurrenceError, ValueError):
    """Exception raised when a rule or date list is added under the wrong role."""


class UnsupportedFrequencyError(RecurrenceError, ValueError):
    """Exception raised for frequencies the engine does not expand."""

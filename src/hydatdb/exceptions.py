"""
Exceptions for hydatdb operations.
"""

from typing import Optional


class HydatDBError(Exception):
    """Base exception for hydatdb errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class HydatValidationError(HydatDBError, ValueError):
    """Raised when a query argument is invalid. Nothing has been queried yet."""

    pass


class HydatNoDataError(HydatDBError):
    """Raised when a well-formed query returns no rows."""

    pass


class HydatConnectionError(HydatDBError):
    """Error opening the HYDAT database."""

    pass

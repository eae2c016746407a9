"""
Exceptions for realtime Datamart operations.
"""

from ..exceptions import HydatDBError


class RealtimeError(HydatDBError):
    """Base exception for realtime-related errors."""

    pass


class RealtimeConnectionError(RealtimeError):
    """Error reaching the MSC Datamart."""

    pass


class RealtimeQueryError(RealtimeError):
    """Requested file is missing or its content could not be parsed."""

    pass

"""
Domain exceptions for schedule operations.

The router maps each exception to an HTTP status code through its
``status_code`` attribute.
"""

from typing import Optional


class ScheduleError(Exception):
    """Base class for all schedule errors."""

    status_code: int = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ScheduleValidationError(ScheduleError, ValueError):
    """Malformed or incomplete schedule input."""

    status_code = 400


class ScheduleNotFoundError(ScheduleError, LookupError):
    """No schedule matches the requested key."""

    status_code = 404

    def __init__(self, message: str = "Schedule not found", error: Optional[str] = None):
        super().__init__(message, error)


class StoreError(ScheduleError, RuntimeError):
    """
    Wraps connectivity or operation failures of the schedule store.

    Read paths surface as 500; write paths (create/update) surface as 400,
    which covers unique-id violations raised by concurrent creates.
    """

    def __init__(self, message: str, error: Optional[str] = None, status_code: int = 500):
        super().__init__(message, error)
        self.status_code = status_code

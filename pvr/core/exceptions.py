"""Exceptions raised by recorded content operations

Lookup failures on the primary target of an operation are fatal and reach the
caller as one of these. Physical file errors stay in the builtin OSError family
and store errors stay sqlite3.Error.
"""

from typing import Any, Dict, Optional


class PVRError(Exception):
    """Base exception for recorded content operations"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.details = details or {}

    def __str__(self):
        if self.operation:
            return f"{self.operation}: {super().__str__()}"
        return super().__str__()


class NotFoundError(PVRError):
    """Requested entity does not exist"""
    pass


class RecordedNotFoundError(NotFoundError):
    """Recorded id is not in the store"""
    pass


class VideoFileNotFoundError(NotFoundError):
    """Video file id is not in the store or cannot be located"""
    pass


class ReserveNotFoundError(NotFoundError):
    """Reservation is not currently recording"""
    pass


class RowNotFoundError(NotFoundError):
    """Store delete/update touched no row"""
    pass


class PathUnresolvedError(PVRError):
    """Alias or id cannot be mapped to a filesystem path"""
    pass


class ParentDirectoryUnresolvedError(PathUnresolvedError):
    """Parent directory alias is not configured"""
    pass

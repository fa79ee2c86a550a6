"""Error taxonomy surfaced to callers of the user directory."""

from __future__ import annotations


class DirectoryError(Exception):
    """Base class for user directory errors."""

    code = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(DirectoryError):
    """Raised when a required identifier list is empty."""

    code = "invalid_argument"


class NotFoundError(DirectoryError):
    """Raised when a point lookup matches no row."""

    code = "not_found"


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__(f"User [{user_id}] not found")
        self.user_id = user_id


class StorageError(DirectoryError):
    """Raised on connectivity failures, constraint violations and aborted transactions."""

    code = "storage_error"

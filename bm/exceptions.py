"""
Error kinds raised by the bookmark repository.

Callers catch BookmarkError to handle every repository failure, or one of
the subclasses to react to a specific condition.
"""
from typing import Optional


class BookmarkError(Exception):
    """Base exception for bookmark repository errors."""
    pass


class DuplicateName(BookmarkError):
    """Raised when adding a bookmark whose name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"name already exists: {name}")


class NotFound(BookmarkError):
    """Raised when the named bookmark does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"bookmark not found: {name}")


class NoFieldsToUpdate(BookmarkError):
    """Raised when an update request changes nothing."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no fields to update for bookmark: {name}")


class StorageError(BookmarkError):
    """Raised when the underlying storage engine fails."""
    pass


class RollbackError(StorageError):
    """Raised when rolling back after a failure fails as well."""

    def __init__(self, original: BaseException, rollback_error: BaseException):
        self.original = original
        self.rollback_error = rollback_error
        super().__init__(f"{original}; rollback failed: {rollback_error}")


def describe(error: BaseException) -> str:
    """Return a one-line message for an error, including its cause if any."""
    cause: Optional[BaseException] = error.__cause__
    if cause is not None and str(cause) and str(cause) not in str(error):
        return f"{error} ({cause})"
    return str(error)

"""
Domain error taxonomy.

Services raise these; the exception handler in `src.main` turns them into
`{"success": false, "error": ..., "message": ...}` responses.
"""
from typing import Optional


class PosError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "pos_error"
    status_code = 400

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> dict:
        return {"success": False, "error": self.code, "message": self.message}


class ValidationError(PosError):
    """Caller supplied malformed input. Raised before any write."""

    code = "validation_error"
    status_code = 400


class NotFoundError(PosError):
    """A referenced order, menu item or category does not exist."""

    code = "not_found"
    status_code = 404


class StorageError(PosError):
    """The database rejected or failed a write; the unit of work was rolled back."""

    code = "storage_error"
    status_code = 500

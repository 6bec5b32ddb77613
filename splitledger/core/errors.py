"""Error hierarchy for the ledger engine.

Every error carries a machine-readable ``code``, a ``category`` and the HTTP
status the API layer answers with. Validation errors are raised before any
storage write. ``StorageFailure`` is never retried here: a double-entry write
is not idempotent, so the caller's transaction boundary decides.
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"
    DATABASE = "database"


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Validation (400) ───────────────────────────────────────────

class InvalidRequest(LedgerError):
    """Malformed input that is not about splitting money."""
    def __init__(self, message: str, code: str = "INVALID_REQUEST", **details: Any):
        super().__init__(message, code, ErrorCategory.VALIDATION, 400, details)


class InvalidSplit(InvalidRequest):
    """Bad split policy, mismatched sums or percentages, non-positive amounts."""
    def __init__(self, message: str, **details: Any):
        super().__init__(message, "INVALID_SPLIT", **details)


class SelfReference(LedgerError):
    """An operation that pairs a user with themself."""
    def __init__(self, message: str, user_id: str, code: str = "SELF_REFERENCE"):
        super().__init__(
            message, code, ErrorCategory.VALIDATION, 400, {"user_id": user_id},
        )
        self.user_id = user_id


class SelfSettlement(SelfReference):
    def __init__(self, user_id: str):
        super().__init__(
            f"Cannot settle with yourself (user {user_id})", user_id, "SELF_SETTLEMENT",
        )


# ─── Lookup / conflict ──────────────────────────────────────────

class NotFound(LedgerError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND, 404,
            {"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class AlreadyExists(LedgerError):
    def __init__(self, message: str, code: str = "ALREADY_EXISTS"):
        super().__init__(message, code, ErrorCategory.CONFLICT, 409)


class DuplicateRelationship(AlreadyExists):
    """Friendship or group membership that is already recorded."""
    def __init__(self, message: str):
        super().__init__(message, "DUPLICATE_RELATIONSHIP")


class Unauthorized(LedgerError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION, 401)


# ─── Infrastructure (503) ───────────────────────────────────────

class StorageFailure(LedgerError):
    """Store collaborator I/O error."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.DATABASE, 503,
        )
        self.operation = operation

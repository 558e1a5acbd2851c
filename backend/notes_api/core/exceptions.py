"""Application exception hierarchy.

Services raise these; the handlers registered in ``notes_api.api.errors`` turn
them into JSON error responses.

    NotesApiError (base)
    ├── ValidationError   → 400
    ├── AuthError         → 401
    ├── NotFoundError     → 404
    └── UpstreamError     → 400 when the caller can fix the request, else 500
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from notes_api.db.outcome import RemoteError

# Postgres SQLSTATE classes the caller can correct: data exceptions and
# integrity constraint violations.
CLIENT_SQLSTATE_CLASSES = ("22", "23")


class NotesApiError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str = "An unexpected error occurred", context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(NotesApiError):
    """Missing or malformed client input."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        details: list[dict[str, Any]] | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        if self.details:
            body["details"] = self.details
        return body


class AuthError(NotesApiError):
    """Missing, invalid or expired credentials."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", context: dict[str, Any] | None = None):
        super().__init__(message=message, context=context)


class NotFoundError(NotesApiError):
    """No matching record owned by the caller."""

    status_code = 404

    def __init__(self, resource: str = "resource", resource_id: str | None = None):
        super().__init__(
            message=f"{resource.capitalize()} not found",
            context={"resource": resource, "resource_id": resource_id},
        )


class UpstreamError(NotesApiError):
    """A call to the remote auth/database service failed.

    ``step`` names the operation that failed so callers of multi-step flows can
    tell which write did not happen.
    """

    def __init__(
        self,
        step: str,
        message: str,
        *,
        client_error: bool = False,
        code: str | None = None,
    ):
        super().__init__(
            message=f"Failed to {step}: {message}",
            context={"step": step, "code": code},
        )
        self.step = step
        self.code = code
        self.client_error = client_error
        self.status_code = 400 if client_error else 500

    @classmethod
    def from_remote(cls, step: str, error: RemoteError) -> UpstreamError:
        return cls(step, error.message, client_error=error.is_client_error, code=error.code)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "step": self.step}

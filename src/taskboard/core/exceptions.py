"""Error taxonomy shared by the authorization engine, gateway and mutation actions.

Every error carries a ``user_message`` suitable for a transient status signal.
Mutation actions catch these at their boundary; nothing here is allowed to
escape into the store.
"""

from typing import Any


class TaskboardError(Exception):
    """Base class for all handled errors."""

    kind: str = "error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, detail: str | None = None, *, user_message: str | None = None):
        self.detail = detail or self.default_message
        self.user_message = user_message or self.default_message
        super().__init__(self.detail)


class PayloadValidationError(TaskboardError):
    """Missing or malformed input. Raised before any network call."""

    kind = "validation"
    default_message = "Some fields are missing or invalid."

    def __init__(self, detail: str | None = None, *, fields: list[str] | None = None):
        super().__init__(detail, user_message=detail or self.default_message)
        self.fields = fields or []


class PermissionDeniedError(TaskboardError):
    """Authorization denial, either local (engine) or remote (gateway 403)."""

    kind = "permission"
    default_message = "You do not have permission to perform this action."

    def __init__(self, detail: str | None = None, *, remote: bool = False):
        super().__init__(detail)
        self.remote = remote


class AuthError(TaskboardError):
    """Expired or invalid session. Re-authenticate rather than retry."""

    kind = "auth"
    default_message = "Session expired or invalid. Please login again."


class ConflictError(TaskboardError):
    """Duplicate unique field on creation (gateway 409)."""

    kind = "conflict"
    default_message = "A record with the same unique value already exists."

    def __init__(self, detail: str | None = None):
        super().__init__(detail, user_message=detail or self.default_message)


class DependencyError(TaskboardError):
    """Delete blocked by a referential guard."""

    kind = "dependency"
    default_message = "This record is still referenced and cannot be deleted."

    def __init__(self, detail: str | None = None):
        super().__init__(detail, user_message=detail or self.default_message)


class NotFoundError(TaskboardError):
    """Referenced entity is not present in the snapshot or the gateway."""

    kind = "not_found"
    default_message = "The requested record could not be found."


class TransportError(TaskboardError):
    """Unreachable gateway or any unexpected failure."""

    kind = "transport"
    default_message = "An unexpected error occurred."


def error_for_status(status_code: int, detail: str | None = None) -> TaskboardError:
    """Map a gateway or provisioning-function HTTP status to a handled error."""
    if status_code in (400, 422):
        return PayloadValidationError(detail)
    if status_code == 401:
        return AuthError(detail)
    if status_code == 403:
        return PermissionDeniedError(detail, remote=True)
    if status_code in (404, 406):
        return NotFoundError(detail)
    if status_code == 409:
        return ConflictError(detail)
    return TransportError(detail or f"Gateway responded with HTTP {status_code}")


def extract_error_detail(body: Any) -> str | None:
    """Pull a human-readable reason out of an error response body."""
    if isinstance(body, dict):
        for key in ("error", "message", "msg", "details", "hint"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    if isinstance(body, str) and body:
        return body[:500]
    return None

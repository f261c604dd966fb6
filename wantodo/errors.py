"""Error taxonomy for task operations.

Every error carries a numeric code and the HTTP status the transport
layer maps it to. Validation errors are raised before any mutation.
"""

from typing import Optional


class WantodoError(Exception):
    """Base exception for all Wantodo domain and storage errors."""

    code: int = 10000
    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class ValidationFailed(WantodoError):
    """One or more request fields were rejected."""

    code = 10001
    http_status = 400

    def __init__(self, violations: list):
        self.violations = list(violations)
        super().__init__(", ".join(str(v) for v in self.violations))

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["details"] = [
            {"field": v.field, "reason": v.reason} for v in self.violations
        ]
        return body


class NotFound(WantodoError):
    """The task id does not resolve to any task."""

    code = 10002
    http_status = 404

    def __init__(self, task_id: str):
        super().__init__(f"Task '{task_id}' not found")
        self.task_id = task_id


class Forbidden(WantodoError):
    """The task exists but belongs to another owner."""

    code = 10003
    http_status = 403

    def __init__(self, task_id: str):
        super().__init__(f"Not authorized to access task '{task_id}'")
        self.task_id = task_id


class PersistenceError(WantodoError):
    """A storage operation failed."""

    code = 10004
    http_status = 503

    def __init__(self, operation: str, detail: Optional[str] = None):
        message = f"Storage {operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation

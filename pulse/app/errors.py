"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``pulse.app.main`` renders every one of them as
``{"error": <category>, "detail": <message>}`` with the matching status code.
"""

from typing import Literal


class PulseError(Exception):
    status_code: int = 500
    error: str = "server_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AuthError(PulseError):
    """Missing or unverifiable bearer credential."""

    status_code = 401
    error = "unauthorized"

    def __init__(self, reason: Literal["missing", "invalid"], detail: str | None = None) -> None:
        if detail is None:
            detail = "Missing bearer token" if reason == "missing" else "Could not validate credentials"
        super().__init__(detail)
        self.reason = reason


class ValidationError(PulseError):
    status_code = 400
    error = "validation_error"


class NotFoundError(PulseError):
    status_code = 404
    error = "not_found"


class ConflictError(PulseError):
    status_code = 409
    error = "conflict"


class PersistenceError(PulseError):
    """Unexpected storage failure. The detail is always a generic message."""

    status_code = 500
    error = "server_error"

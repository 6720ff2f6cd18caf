"""Error taxonomy shared by the engine and the HTTP layer.

Every failure the service reports maps to exactly one of these classes, and
each class carries the HTTP status the error handler answers with.
"""

from __future__ import annotations

import enum


class AppError(Exception):
    """Base class for all expected application failures."""

    status_code: int = 500
    code: str = "internal"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail()
        super().__init__(self.detail)

    def default_detail(self) -> str:
        return self.code.replace("_", " ").capitalize()


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"


class AuthFailure(str, enum.Enum):
    """Why a session token was rejected."""

    MISSING = "missing"
    MALFORMED = "malformed"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"


class AuthError(UnauthorizedError):
    """Session token could not be verified."""

    def __init__(self, reason: AuthFailure, detail: str | None = None) -> None:
        self.reason = reason
        super().__init__(detail or f"Session token rejected: {reason.value}")


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        detail = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(detail)


class BadRequestError(AppError):
    status_code = 400
    code = "bad_request"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"


class InternalError(AppError):
    status_code = 500
    code = "internal"


class StoreError(InternalError):
    """A store operation failed. Carries the operation name and entity id."""

    code = "store_error"

    def __init__(self, op: str, entity_id: str | None = None, reason: str | None = None) -> None:
        self.op = op
        self.entity_id = entity_id
        msg = f"{op} failed"
        if entity_id is not None:
            msg += f" for {entity_id}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StoreTimeoutError(StoreError):
    """A store operation exceeded its deadline."""

    code = "store_timeout"

    def __init__(self, op: str, entity_id: str | None = None, timeout: float | None = None) -> None:
        reason = f"timed out after {timeout}s" if timeout is not None else "timed out"
        super().__init__(op, entity_id, reason)
        self.timeout = timeout

"""Global error handlers: every failure is answered as {"detail", "error"} JSON."""

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from skillbuilder.errors import AppError, AuthError, StoreError

logger = structlog.get_logger()

_HTTP_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def _error_body(detail: object, code: str) -> dict[str, object]:
    return {"detail": detail, "error": code}


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "request_failed",
                path=request.url.path,
                method=request.method,
                error=exc.code,
                op=getattr(exc, "op", None),
                entity_id=getattr(exc, "entity_id", None),
                exc_info=exc,
            )
            detail = "Internal server error" if isinstance(exc, StoreError) else exc.detail
            return JSONResponse(status_code=exc.status_code, content=_error_body(detail, exc.code))

        headers = {"WWW-Authenticate": "Cookie"} if isinstance(exc, AuthError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, exc.code),
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, _HTTP_CODES.get(exc.status_code, "http_error")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed payloads are bad requests."""
        return JSONResponse(
            status_code=400,
            content={**_error_body("Validation error", "bad_request"), "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions; always JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=_error_body("Internal server error", "internal"))

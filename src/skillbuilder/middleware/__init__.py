"""Middleware registration."""

from fastapi import FastAPI
from starlette.middleware.gzip import GZipMiddleware

from skillbuilder.config import Settings
from skillbuilder.middleware.cors import setup_cors
from skillbuilder.middleware.error_handler import setup_error_handlers
from skillbuilder.middleware.logging import setup_logging
from skillbuilder.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in order.

    Starlette runs middleware in reverse-add order (last added = outermost).
    CORS is added last so it also wraps error responses.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)

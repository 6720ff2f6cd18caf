"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from skillbuilder.auth.router import router as auth_router
from skillbuilder.auth.session import SessionAuthenticator
from skillbuilder.catalog.router import router as catalog_router
from skillbuilder.catalog.seed import seed_material_types
from skillbuilder.config import get_settings
from skillbuilder.database import close_db, get_session_factory, init_db
from skillbuilder.health.router import router as health_router
from skillbuilder.middleware import setup_middleware
from skillbuilder.progress.router import router as progress_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)

    # Seed material types (idempotent)
    try:
        async with get_session_factory()() as db:
            await seed_material_types(db)
    except SQLAlchemyError:
        logger.warning("material_type_seeding_failed", exc_info=True)

    yield
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Skillbuilder API",
        description="Learning-progress tracker: collections, materials and earned XP",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.authenticator = SessionAuthenticator.from_settings(settings)

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(progress_router)

    return app


app = create_app()

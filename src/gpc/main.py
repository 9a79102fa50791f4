"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from gpc.config import get_settings
from gpc.contributions.router import router as contributions_router
from gpc.database import close_db, init_db
from gpc.health.router import router as health_router
from gpc.middleware import setup_middleware
from gpc.organizations.router import router as organizations_router
from gpc.volunteer.router import router as self_reported_router
from gpc.volunteer.router import validation_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    yield
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Give Protocol Contributions API",
        description="Contribution tracking, volunteer hours validation and leaderboards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(self_reported_router)
    app.include_router(validation_router)
    app.include_router(contributions_router)
    app.include_router(organizations_router)

    return app


app = create_app()

"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modules.admin.routes import router as admin_router
from modules.auth.routes import csrf_router, router as auth_router
from modules.community.routes import router as community_router
from modules.inquiries.routes import router as inquiries_router
from modules.leaderboard.routes import router as leaderboard_router
from modules.profiles.routes import router as profiles_router
from modules.ratelimit import run_periodic_sweep
from modules.ships.routes import router as ships_router
from modules.steam.routes import router as steam_router
from shared.config import get_settings

from .dependencies import get_container
from .errors import register_exception_handlers
from .middleware.guard import RouteGuardMiddleware
from .routes import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Starts the rate-limit sweeper and stops it on shutdown.
    """
    settings = get_settings()
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)

    sweeper = asyncio.create_task(
        run_periodic_sweep(get_container().rate_limiter, settings.rate_limit_sweep_interval)
    )
    yield
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Accounts, community and leaderboard API for the Explore the Universe 2175 website",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Added first so it runs inside CORS
    app.add_middleware(RouteGuardMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(csrf_router, prefix="/api", tags=["auth"])
    app.include_router(steam_router, prefix="/api/steam", tags=["steam"])
    app.include_router(leaderboard_router, prefix="/api", tags=["leaderboard"])
    app.include_router(community_router, prefix="/api", tags=["community"])
    app.include_router(profiles_router, prefix="/api/profile", tags=["profiles"])
    app.include_router(inquiries_router, prefix="/api", tags=["inquiries"])
    app.include_router(ships_router, prefix="/api", tags=["ships"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    return app


# Application instance for uvicorn
app = create_app()

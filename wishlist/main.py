"""Wishlist - FastAPI Application Factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wishlist.api import api_router
from wishlist.api.health import router as health_router
from wishlist.core import Settings, settings
from wishlist.core.lifespan import common_shutdown, common_startup
from wishlist.core.logging import get_logger
from wishlist.middleware import AuthGateMiddleware, SecurityHeadersMiddleware
from wishlist.middleware.auth_gate import DOCS_PATHS, PUBLIC_PATHS

# Import all models to ensure they're registered with Base before create_all
from wishlist.models import Gift, RevokedToken, User, Volunteer  # noqa: F401
from wishlist.services.token_blacklist import TokenBlacklist
from wishlist.services.tokens import TokenIssuer, TokenVerifier

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    config: Settings = app.state.settings
    logger.info(f"Starting {config.app_name} v{config.app_version}")

    tasks = await common_startup(config, app.state.token_blacklist, logger)

    yield

    logger.info("Shutting down...")
    await common_shutdown(logger, tasks)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors like any other ValidationError."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(config: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The token blacklist, issuer and verifier are built here, once per
    application, and shared through ``app.state`` and middleware arguments.
    """
    config = config or settings

    app = FastAPI(
        title=config.app_name,
        description="Gift registry: wishlists and anonymous claims",
        version=config.app_version,
        lifespan=lifespan,
        # API docs stay off unless DEBUG is set; they would otherwise need an
        # unauthenticated hole in the auth gate
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
        openapi_url="/openapi.json" if config.debug else None,
    )

    blacklist = TokenBlacklist(sweep_interval_seconds=config.blacklist_sweep_interval_seconds)
    verifier = TokenVerifier(config.jwt, blacklist)
    app.state.settings = config
    app.state.token_blacklist = blacklist
    app.state.token_issuer = TokenIssuer(config.jwt)
    app.state.token_verifier = verifier

    public_paths = PUBLIC_PATHS | DOCS_PATHS if config.debug else PUBLIC_PATHS

    # Default-deny bearer authentication for everything not explicitly public
    app.add_middleware(AuthGateMiddleware, verifier=verifier, public_paths=public_paths)

    # Security headers middleware
    app.add_middleware(SecurityHeadersMiddleware, docs_paths=DOCS_PATHS)

    # CORS middleware - MUST be outermost (added last in Starlette LIFO order)
    # so that CORS headers are present on ALL responses, including 401 from the auth gate.
    if config.cors.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "Accept"],
        )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(health_router)  # Health at root level
    app.include_router(api_router)

    return app


# Application instance
app = create_app()

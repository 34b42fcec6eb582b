from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from notevault.app import App
from notevault.config import Config
from notevault.errors import UserError
from notevault.web.error_handlers import general_exception_handler, request_validation_handler, user_error_handler
from notevault.web.gate import RequestGateMiddleware
from notevault.web.openapi import set_custom_openapi
from notevault.web.rate_limit import FixedWindowRateLimiter, MemoryRateLimitStore, RateLimitStore
from notevault.web.routers import auth_router, export_router, notes_router, profile_router


def create_fastapi_app(app_instance: App, config: Config, rate_limit_store: RateLimitStore | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    rate_limit_store defaults to process-local counters; pass a shared store
    when running several instances.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="NoteVault API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )
    # Store app instance and config in app state
    app.state.app = app_instance
    app.state.config = config

    rate_limiter = FixedWindowRateLimiter(
        rate_limit_store or MemoryRateLimitStore(),
        max_requests=config.rate_limit_max_requests,
        window_seconds=config.rate_limit_window_seconds,
    )
    app.add_middleware(RequestGateMiddleware, rate_limiter=rate_limiter)

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(profile_router, prefix="/api")
    app.include_router(export_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app

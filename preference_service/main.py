from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from fastapi import FastAPI
import uvicorn
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.middleware.cors import CORSMiddleware

from preference_service.core import health, openapi
from preference_service.core.database import create_db_engine_from_settings
from preference_service.core.exceptions import register_exception_handlers
from preference_service.core.logging import setup_logging
from preference_service.core.settings import Settings, get_settings

from preference_service.features import models  # noqa: F401
from preference_service.features import api
from preference_service.features.preferences.bootstrap import initialize_preferences_from_settings
from preference_service.features.preferences.errors import register_preference_error_handler


def create_fastapi_app(settings: Settings) -> FastAPI:
    setup_logging(settings)

    # Tables and seed definitions must exist before any preference is read or written.
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if settings.preferences_bootstrap_on_startup:
            session_maker = async_sessionmaker(create_db_engine_from_settings(settings))
            async with session_maker() as session:
                await initialize_preferences_from_settings(session, settings)
        yield

    app = FastAPI(
        title="Preferences API",
        description="User and organization scoped preferences with default values.",
        version="1.0.0",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.openapi = openapi.custom(app)

    app.include_router(health.router)
    app.include_router(api.router)

    register_exception_handlers(app)
    register_preference_error_handler(app)

    # Enforces that all incoming requests must be https.
    # https://fastapi.tiangolo.com/advanced/middleware/#integrated-middlewares
    if not settings.debug:
        app.add_middleware(HTTPSRedirectMiddleware)

    # Enforces that all incoming requests have a correctly set Host header (to guard against HTTP Host Header attacks).
    # https://fastapi.tiangolo.com/advanced/middleware/#trustedhostmiddleware
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

    # Add appropriate CORS headers to outgoing responses in order to allow cross-origin requests from browsers.
    # https://www.starlette.dev/middleware/
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


# Main entry point
# ----------------------------------------------------------------------------------------------------------------------


if __name__ == "__main__":
    uvicorn.run(create_fastapi_app(get_settings()), host="0.0.0.0", port=8000)

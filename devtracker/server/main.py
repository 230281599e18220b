"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request monitoring), registers exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devtracker.core.database import dispose_engine, init_db
from devtracker.core.logging_config import get_logger, setup_logging
from devtracker.core.monitoring import initialize_logfire

from .api.v1 import auth, health, oauth2
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import get_github_client, get_redis_client

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    On startup: create tables when auto-create is enabled and connect Redis.
    Failures are logged rather than raised so the health endpoint can report
    them. On shutdown: close Redis, the GitHub HTTP client and the database pool.
    """
    logger.info("Starting up DevTracker API Server...")
    try:
        if await init_db():
            logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    redis = get_redis_client()
    try:
        await redis.start()
    except Exception as e:
        logger.error(f"Redis connection failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down DevTracker API Server...")
    await redis.stop()
    await get_github_client().aclose()
    await dispose_engine()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    DevTracker API

    Backend services for DevTracker: local and GitHub sign-in, JWT access and
    refresh tokens, and account profile data.
    """,
    version=constant.API_VERSION,
    license_info={"name": "MIT License", "url": "https://opensource.org/licenses/MIT"},
    openapi_url=constant.OPENAPI_URL,
    docs_url=constant.DOCS_URL,
    redoc_url=constant.REDOC_URL,
    lifespan=lifespan,
)

setup_exception_handlers(app)

app.add_middleware(LogfireMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
    max_age=settings.cors.max_age,
)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(oauth2.router, prefix="/oauth2", tags=["oauth2"])

initialize_logfire(app)


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    uvicorn.run(
        "devtracker.server.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()

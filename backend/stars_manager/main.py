"""FastAPI application entry point."""

import logging

from stars_manager.config import settings

# ENV=dev: LOG_LEVEL (default INFO) with detailed format
# ENV=prod/staging: WARNING level, minimal logs
_is_dev = settings.ENV.lower() == "dev"
_log_level = (
    getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    if _is_dev
    else logging.WARNING
)

logging.basicConfig(
    level=_log_level,
    format=(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if _is_dev
        else "%(levelname)s | %(message)s"
    ),
    datefmt="%H:%M:%S",
)

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from stars_manager.api import auth, repos, sync, websocket
from stars_manager.middleware.exception_handlers import (
    github_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from stars_manager.middleware.request_logging import RequestLoggingMiddleware
from stars_manager.services.github.exceptions import GithubError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="GitHub Stars Manager API",
    description="Sync, browse and annotate your GitHub starred repositories",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials="*" not in settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(GithubError, github_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(repos.router, prefix="/api", tags=["Repositories"])
app.include_router(sync.router, prefix="/api", tags=["Sync"])
app.include_router(websocket.router, prefix="/api", tags=["WebSocket"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


@app.on_event("startup")
async def startup_event():
    """Application startup tasks."""
    try:
        from stars_manager.database.ensure_indexes import ensure_indexes
        from stars_manager.database.mongo import get_database

        ensure_indexes(get_database())
    except Exception as e:
        logger.warning(f"Failed to ensure database indexes: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Release the MongoDB and Redis connections."""
    from stars_manager.core.redis import RedisClient
    from stars_manager.database.mongo import close_client

    close_client()
    RedisClient.close()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("stars_manager.main:app", host="0.0.0.0", port=settings.SERVER_PORT)

"""FastAPI application for Bookmark AI.

Provides a REST API for browser extensions and bookmarklets to classify
bookmarks against a personal category tree, manage that tree, and forward
bookmarks to Instapaper and Todoist.

Usage:
    uvicorn api.main:app --reload --port 8787

Documentation:
    - Swagger UI: http://localhost:8787/docs
    - ReDoc: http://localhost:8787/redoc
    - OpenAPI JSON: http://localhost:8787/openapi.json
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.errors import register_exception_handlers
from api.middleware import RequestTimingMiddleware, SecurityHeadersMiddleware
from api.ratelimit import API_KEY_HEADER, limiter, rate_limit_exceeded_handler
from bookmark_ai import __version__
from bookmark_ai.config import get_config
from bookmark_ai.db import get_db

logger = logging.getLogger(__name__)

# API metadata for OpenAPI documentation
API_TITLE = "Bookmark AI API"
API_VERSION = __version__
API_DESCRIPTION = """
# Bookmark AI - Bookmark Classification API

Classifies bookmarked URLs with Claude: is it an article, what kind of page
is it, what is it about, and which of *your* categories does it belong in.

## Features

- **Analysis**: Title, summary, tags, and a best-match category path
- **Category Trees**: Submit your taxonomy as JSON or YAML
- **Integrations**: Save articles to Instapaper, create Todoist tasks

## Authentication

Register once with `POST /auth/register` to receive an API key, then send it
in the `X-API-Key` header on every request.
"""

API_TAGS_METADATA = [
    {
        "name": "health",
        "description": "Service health status.",
    },
    {
        "name": "auth",
        "description": "Account registration.",
    },
    {
        "name": "users",
        "description": "Profile, integration settings, and API keys.",
    },
    {
        "name": "categories",
        "description": "Category tree storage and candidate preview.",
    },
    {
        "name": "bookmarks",
        "description": "Bookmark analysis.",
    },
]

API_LICENSE = {
    "name": "MIT License",
    "url": "https://opensource.org/licenses/MIT",
}


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncIterator[None]:
    """Lifecycle event handler for the FastAPI application."""
    db = get_db()
    db.init_schema()
    logger.info("Database ready at %s", db.db_path)

    yield

    db.close()


def _configure_middleware(app_instance: FastAPI) -> None:
    """Configure middleware for the FastAPI application."""
    config = get_config()

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", API_KEY_HEADER],
    )
    app_instance.add_middleware(GZipMiddleware, minimum_size=500)
    app_instance.add_middleware(SlowAPIMiddleware)
    app_instance.add_middleware(SecurityHeadersMiddleware)
    app_instance.add_middleware(RequestTimingMiddleware)


def _register_routers(app_instance: FastAPI) -> None:
    """Register API routers."""
    from api.routers.auth import router as auth_router
    from api.routers.bookmarks import router as bookmarks_router
    from api.routers.categories import router as categories_router
    from api.routers.health import router as health_router
    from api.routers.users import router as users_router

    app_instance.include_router(health_router)
    app_instance.include_router(auth_router)
    app_instance.include_router(users_router)
    app_instance.include_router(categories_router)
    app_instance.include_router(bookmarks_router)


def create_app() -> FastAPI:
    """Application factory for creating configured FastAPI instances."""
    app_instance = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=API_TAGS_METADATA,
        license_info=API_LICENSE,
        lifespan=lifespan,
    )

    limiter.enabled = get_config().rate_limit.enabled
    app_instance.state.limiter = limiter
    app_instance.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    _configure_middleware(app_instance)
    _register_routers(app_instance)
    register_exception_handlers(app_instance)

    return app_instance


app = create_app()

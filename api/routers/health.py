"""Health check API endpoints.

Provides service health status including database reachability and
reasoning engine configuration.
"""

from __future__ import annotations

import logging
import os

import psutil
from fastapi import APIRouter, Depends

from api.dependencies import get_database
from api.schemas import HealthResponse
from bookmark_ai import __version__
from bookmark_ai.config import get_config
from bookmark_ai.db import BookmarkDB

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Constants
BYTES_PER_MB = 1024 * 1024


def _get_process_memory() -> float:
    """Get server process resident memory in MB (0.0 if unavailable)."""
    try:
        return psutil.Process(os.getpid()).memory_info().rss / BYTES_PER_MB
    except psutil.Error as e:
        logger.debug("Could not read process memory: %s", e)
        return 0.0


@router.get("/health", response_model=HealthResponse)
def get_health(db: BookmarkDB = Depends(get_database)) -> HealthResponse:
    """Get service health status.

    - **unhealthy**: the database does not answer queries
    - **degraded**: the database works but ANTHROPIC_API_KEY is not set,
      so bookmark analysis will fail
    - **healthy**: everything needed to serve requests is in place
    """
    database_ok = db.ping()
    engine_configured = get_config().anthropic_api_key is not None

    details: dict[str, str] = {}
    if not database_ok:
        details["database"] = "Database is not reachable"
    if not engine_configured:
        details["engine"] = "ANTHROPIC_API_KEY is not set"

    if not database_ok:
        status = "unhealthy"
    elif not engine_configured:
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(
        status=status,
        version=__version__,
        database=database_ok,
        engine_configured=engine_configured,
        process_rss_mb=round(_get_process_memory(), 2),
        details=details or None,
    )

"""System models.

Contains schemas for health checks and error responses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Service health status response.

    Example:
        ```json
        {
            "status": "healthy",
            "version": "1.0.0",
            "database": true,
            "engine_configured": true,
            "process_rss_mb": 84.2
        }
        ```
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "database": True,
                "engine_configured": True,
                "process_rss_mb": 84.2,
                "details": None,
            }
        }
    )

    status: str = Field(
        ...,
        description="Overall health status: 'healthy', 'degraded', or 'unhealthy'",
        examples=["healthy", "degraded", "unhealthy"],
    )
    version: str = Field(..., description="API version", examples=["1.0.0"])
    database: bool = Field(..., description="True if the database answers queries")
    engine_configured: bool = Field(
        ...,
        description="True if reasoning engine credentials are present",
    )
    process_rss_mb: float = Field(
        default=0.0,
        description="Server process Resident Set Size in MB",
        ge=0,
    )
    details: dict[str, str] | None = Field(
        default=None,
        description="Additional details about any issues detected",
        examples=[{"engine": "ANTHROPIC_API_KEY is not set"}],
    )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "InvalidCategoryTreeError",
                "code": "CAT_INVALID_STRUCTURE",
                "detail": (
                    "Invalid category tree structure. Must be a nested object "
                    "with string arrays as leaf nodes."
                ),
            }
        }
    )

    error: str = Field(..., description="Error class name")
    code: str = Field(..., description="Machine-readable error code")
    detail: str = Field(..., description="Human-readable message")
    details: dict[str, Any] | None = Field(default=None, description="Extra context")

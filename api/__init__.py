"""FastAPI backend for Bookmark AI.

Provides REST endpoints for bookmark analysis, category trees, and accounts.

Usage:
    # Development server
    uvicorn api.main:app --reload --port 8787

    # Or via the console script
    bookmark-ai serve --port 8787
"""

from .main import app

__all__ = ["app"]

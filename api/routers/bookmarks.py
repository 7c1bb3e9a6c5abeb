"""Bookmark analysis API endpoints.

Classifies a URL against the caller's category tree using the reasoning
engine, then forwards it to Instapaper and/or Todoist when configured.
Nothing is stored.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_bookmark_analyzer, get_current_user, get_database
from api.ratelimit import get_analyze_limit, limiter
from api.schemas import AnalyzeBookmarkRequest, AnalyzeBookmarkResponse, ErrorResponse
from api.services.bookmark_service import analyze_for_user
from bookmark_ai.analysis import BookmarkAnalyzer
from bookmark_ai.config import get_config
from bookmark_ai.db import BookmarkDB, User

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post(
    "/analyze",
    response_model=AnalyzeBookmarkResponse,
    response_model_exclude_none=True,
    summary="Analyze a bookmark",
    responses={
        400: {"description": "Invalid request body", "model": ErrorResponse},
        404: {"description": "No category tree stored", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded"},
        500: {"description": "Malformed engine response", "model": ErrorResponse},
        502: {"description": "Reasoning engine call failed", "model": ErrorResponse},
    },
)
@limiter.limit(get_analyze_limit)
async def analyze_bookmark(
    request: Request,
    body: AnalyzeBookmarkRequest,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
    analyzer: BookmarkAnalyzer = Depends(get_bookmark_analyzer),
) -> AnalyzeBookmarkResponse:
    """Classify a bookmark.

    When ``title`` is omitted the page is fetched (best effort) and its HTML
    is shown to the engine. Non-articles always get a ``matchedCategory``:
    one of the caller's category paths, or ``"Other"``.

    **Example Request:**
    ```json
    {"url": "https://github.com/psf/requests", "createTodoistTask": true}
    ```

    Articles are saved to Instapaper when credentials are stored; a Todoist
    task is created when ``createTodoistTask`` is true and a token is stored.
    Integration failures are reported in the response, not as errors.
    """
    return await analyze_for_user(
        db,
        analyzer,
        user,
        body.url,
        body.title,
        body.create_todoist_task,
        get_config(),
    )

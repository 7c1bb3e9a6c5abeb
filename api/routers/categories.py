"""Category tree API endpoints.

Each user owns exactly one category tree. It can be replaced wholesale
(as a JSON object or as YAML/JSON text), read back, and previewed as the
flat list of paths the classifier chooses from.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_current_user, get_database
from api.ratelimit import get_write_limit, limiter
from api.schemas import (
    CategoryCandidatesResponse,
    CategoryTreeResponse,
    CategoryTreeUpdateRequest,
    ErrorResponse,
)
from bookmark_ai.categories import flatten_categories, load_category_tree
from bookmark_ai.config import get_config
from bookmark_ai.db import BookmarkDB, User
from bookmark_ai.errors import category_tree_not_found

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=CategoryTreeResponse,
    summary="Get the category tree",
    responses={404: {"description": "No tree stored", "model": ErrorResponse}},
)
def get_categories(
    request: Request,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> CategoryTreeResponse:
    """Return the caller's stored tree exactly as it was saved."""
    record = db.get_category(user.id)
    if record is None:
        raise category_tree_not_found(user.id)
    return CategoryTreeResponse(category_tree=record.category_tree, updated_at=record.updated_at)


@router.put(
    "",
    response_model=CategoryTreeResponse,
    summary="Replace the category tree",
    responses={
        400: {"description": "Unparseable text or invalid tree", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(get_write_limit)
def update_categories(
    request: Request,
    body: CategoryTreeUpdateRequest,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> CategoryTreeResponse:
    """Replace (or create) the caller's tree.

    ``categoryTree`` may be a JSON object or a string. Strings are parsed as
    YAML, which also accepts JSON text. Branches are objects; leaves are
    arrays of strings.

    **Example Request:**
    ```json
    {"categoryTree": "Work:\\n  Docs: []\\nArchive: []\\n"}
    ```

    Raises:
        CategoryTreeParseError (400): The text is not valid YAML/JSON.
        InvalidCategoryTreeError (400): The value is not a valid tree.
    """
    limits = get_config().categories
    tree = load_category_tree(
        body.category_tree,
        max_depth=limits.max_depth,
        max_nodes=limits.max_nodes,
    )
    record = db.save_category_tree(user.id, tree)
    logger.info("User %s replaced their category tree", user.id)
    return CategoryTreeResponse(category_tree=record.category_tree, updated_at=record.updated_at)


@router.get(
    "/candidates",
    response_model=CategoryCandidatesResponse,
    summary="List classifier candidate paths",
    responses={404: {"description": "No tree stored", "model": ErrorResponse}},
)
def get_category_candidates(
    request: Request,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> CategoryCandidatesResponse:
    """Flatten the caller's tree into the paths offered to the classifier.

    Labels have underscores replaced by spaces, and a top-level
    ``*_Bookmarks`` wrapper key is left out.
    """
    record = db.get_category(user.id)
    if record is None:
        raise category_tree_not_found(user.id)
    return CategoryCandidatesResponse(categories=flatten_categories(record.tree))

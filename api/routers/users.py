"""Current-user API endpoints.

Profile and integration settings, account deletion, and API key
management for the authenticated caller.
"""

import logging
from dataclasses import replace
from datetime import UTC

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import get_current_user, get_database
from api.ratelimit import get_write_limit, limiter
from api.schemas import (
    APIKeyCreateRequest,
    APIKeyCreateResponse,
    APIKeyInfo,
    APIKeyListResponse,
    ErrorResponse,
    UserResponse,
    UserUpdateRequest,
)
from bookmark_ai.db import BookmarkDB, User, UserSettings, utcnow
from bookmark_ai.errors import APIKeyNotFoundError, UserNotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users/me", tags=["users"])


def _merge_settings(current: UserSettings, update: UserUpdateRequest) -> UserSettings | None:
    """Apply the provided settings fields; None when nothing changed."""
    if update.settings is None:
        return None
    changes = update.settings.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return None
    return replace(current, **changes)


@router.get("", response_model=UserResponse, summary="Get the current user")
def get_me(request: Request, user: User = Depends(get_current_user)) -> UserResponse:
    """Return the caller's profile. Stored credentials are never returned."""
    return UserResponse.from_user(user)


@router.put(
    "",
    response_model=UserResponse,
    summary="Update the current user",
    responses={400: {"description": "Invalid fields", "model": ErrorResponse}},
)
@limiter.limit(get_write_limit)
def update_me(
    request: Request,
    body: UserUpdateRequest,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> UserResponse:
    """Update the profile name and/or integration settings.

    Omitted fields keep their current values.

    **Example Request:**
    ```json
    {"settings": {"instapaperUsername": "ada@example.com", "instapaperPassword": "..."}}
    ```
    """
    updated = db.update_user(
        user.id,
        full_name=body.full_name,
        settings=_merge_settings(user.settings, body),
    )
    return UserResponse.from_user(updated)


@router.delete(
    "",
    status_code=204,
    summary="Delete the current user",
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
@limiter.limit(get_write_limit)
def delete_me(
    request: Request,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> Response:
    """Delete the account with its category tree and all API keys."""
    if not db.delete_user(user.id):
        raise UserNotFoundError(details={"user_id": user.id})
    return Response(status_code=204)


@router.get("/api-keys", response_model=APIKeyListResponse, summary="List API keys")
def list_api_keys(
    request: Request,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> APIKeyListResponse:
    """List the caller's API keys, newest first. Keys themselves are not shown."""
    return APIKeyListResponse(
        api_keys=[APIKeyInfo.from_record(record) for record in db.list_api_keys(user.id)]
    )


@router.post(
    "/api-keys",
    response_model=APIKeyCreateResponse,
    status_code=201,
    summary="Create an API key",
    responses={400: {"description": "Invalid name or expiry", "model": ErrorResponse}},
)
@limiter.limit(get_write_limit)
def create_api_key(
    request: Request,
    body: APIKeyCreateRequest,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> APIKeyCreateResponse:
    """Issue a new API key. The plaintext key is returned only in this response."""
    expires_at = body.expires_at
    if expires_at is not None:
        if expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(UTC).replace(tzinfo=None)
        if expires_at <= utcnow():
            raise ValidationError(
                "expiresAt must be in the future", field="expiresAt", value=body.expires_at
            )

    generated, record = db.create_api_key(user.id, name=body.name, expires_at=expires_at)
    logger.info("User %s created API key %s", user.id, record.id)
    return APIKeyCreateResponse(api_key=generated.key, key_info=APIKeyInfo.from_record(record))


@router.delete(
    "/api-keys/{key_id}",
    status_code=204,
    summary="Delete an API key",
    responses={404: {"description": "Key not found", "model": ErrorResponse}},
)
@limiter.limit(get_write_limit)
def delete_api_key(
    key_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    db: BookmarkDB = Depends(get_database),
) -> Response:
    """Delete one of the caller's API keys. Deleting the key in use is allowed."""
    if not db.delete_api_key(user.id, key_id):
        raise APIKeyNotFoundError(details={"key_id": key_id})
    logger.info("User %s deleted API key %s", user.id, key_id)
    return Response(status_code=204)

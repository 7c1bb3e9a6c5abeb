"""Account registration endpoint.

Accounts authenticate with API keys only. Registering returns the first key
once; further keys are managed under /users/me/api-keys.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_database
from api.ratelimit import get_client_address, get_register_limit, limiter
from api.schemas import ErrorResponse, RegisterRequest, RegisterResponse, UserResponse
from bookmark_ai.categories import default_category_tree
from bookmark_ai.config import get_config
from bookmark_ai.db import BookmarkDB
from bookmark_ai.errors import RegistrationDisabledError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

DEFAULT_KEY_NAME = "Default"


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    summary="Create an account",
    responses={
        400: {"description": "Invalid email or name", "model": ErrorResponse},
        403: {"description": "Registration is disabled", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded"},
    },
)
# Keyed by address: an unchecked X-API-Key would give each request a fresh bucket.
@limiter.limit(get_register_limit, key_func=get_client_address)
def register(
    request: Request,
    body: RegisterRequest,
    db: BookmarkDB = Depends(get_database),
) -> RegisterResponse:
    """Create an account, seed the starter category tree, and issue an API key.

    The returned ``apiKey`` is shown only once. Send it as ``X-API-Key`` on
    every other request.

    Raises:
        RegistrationDisabledError (403): Sign-up is turned off.
        EmailAlreadyRegisteredError (409): The email already has an account.
    """
    if not get_config().registration_enabled:
        raise RegistrationDisabledError()

    user, generated = db.register_user(
        body.email,
        default_category_tree(),
        full_name=body.full_name,
        key_name=DEFAULT_KEY_NAME,
    )

    logger.info("Registered user %s", user.id)
    return RegisterResponse(user=UserResponse.from_user(user), api_key=generated.key)

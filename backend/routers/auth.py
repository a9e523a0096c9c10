import logging

from fastapi import APIRouter, Depends, Request, Response

from config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_EXPIRE_DAYS, SESSION_RATE_LIMIT
from models.user import User
from routers.commands import limiter
from schemas.auth import SessionCreateRequest, UserResponse
from schemas.common import MessageResponse
from services.auth import (
    create_session_token,
    get_current_user,
    identity_profile,
    verify_identity_token,
)
from services.storage_service import StorageService, get_storage


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/session", response_model=UserResponse)
@limiter.limit(SESSION_RATE_LIMIT)
def create_session(
    request: Request,
    response: Response,
    payload: SessionCreateRequest,
    storage: StorageService = Depends(get_storage),
):
    """
    Sign in with an ID token from the identity provider.

    Body: idToken
    Returns: the signed-in user; the session token is set as an HttpOnly cookie
    Raises: 401 if the ID token is invalid, expired or for another audience
    """
    claims = verify_identity_token(payload.id_token)
    user = storage.upsert_user(**identity_profile(claims))

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user),
        max_age=SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info("User %s signed in", user.id)
    return user


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """
    End the browser session by clearing the session cookie.

    Note: session tokens are stateless; a copied token stays valid until it expires.
    """
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Successfully logged out"}


@router.get("/user", response_model=UserResponse)
def get_user(current_user: User = Depends(get_current_user)):
    """
    Retrieve the currently authenticated user's profile.

    Raises: 401 if not authenticated or the session is invalid
    """
    return current_user

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from config import (
    ALGORITHM,
    OIDC_ALGORITHMS,
    OIDC_CLIENT_ID,
    OIDC_ISSUER,
    OIDC_SIGNING_KEY,
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_EXPIRE_DAYS,
)
from database import get_db
from models.user import User

# Browsers send the session cookie; API clients may send the same token as a Bearer header
session_cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)

SESSION_TOKEN_TYPE = "session"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_session_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create the signed session token stored in the session cookie."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=SESSION_EXPIRE_DAYS)
    )
    to_encode = {"sub": user.id, "exp": expire, "type": SESSION_TOKEN_TYPE}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a session token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise _unauthorized("Invalid or expired session")


def verify_identity_token(id_token: str) -> dict:
    """Validate an ID token issued by the external identity provider.

    Checks signature, expiry, audience (our client id) and, when configured,
    the issuer. Returns the token claims.
    """
    try:
        claims = jwt.decode(
            id_token,
            OIDC_SIGNING_KEY,
            algorithms=OIDC_ALGORITHMS,
            audience=OIDC_CLIENT_ID,
            issuer=OIDC_ISSUER,
        )
    except JWTError:
        raise _unauthorized("Invalid identity token")

    if not claims.get("sub"):
        raise _unauthorized("Identity token has no subject")

    return claims


def identity_profile(claims: dict) -> dict:
    """Map provider claims onto User columns.

    Accepts both the provider's short names and the standard OpenID ones.
    """
    return {
        "user_id": str(claims["sub"]),
        "email": claims.get("email"),
        "first_name": claims.get("first_name") or claims.get("given_name"),
        "last_name": claims.get("last_name") or claims.get("family_name"),
        "profile_image_url": claims.get("profile_image_url") or claims.get("picture"),
    }


def get_current_user(
    request: Request,
    session_token: Optional[str] = Depends(session_cookie_scheme),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Get the current authenticated user from the session cookie or Bearer token."""
    token = session_token or (credentials.credentials if credentials else None)
    if not token:
        raise _unauthorized("Not authenticated")

    payload = decode_token(token)

    # Ensure it's one of our session tokens
    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise _unauthorized("Invalid token type")

    user_id = payload.get("sub")
    if user_id is None:
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == str(user_id)).first()
    if user is None:
        raise _unauthorized("User not found")

    # Rate limiting keys on the caller
    request.state.user_id = user.id
    return user

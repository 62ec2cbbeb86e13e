import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from shared.config import settings

from .tokens import AuthenticatedUser, read_access_token

AUTH_COOKIE_NAME = "authorization"

# Defines the expected internal service header
api_key_header = APIKeyHeader(name="X-Internal-API-Key", auto_error=False)


def extract_token(request: Request) -> Optional[str]:
    """
    Reads the token from the Authorization header, falling back to the
    authorization cookie. Accepts both "Bearer <token>" and a bare token.
    """
    raw = request.headers.get("Authorization") or request.cookies.get(AUTH_COOKIE_NAME)
    if not raw:
        return None
    parts = raw.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1] or None
    return raw


async def get_current_user(request: Request) -> AuthenticatedUser:
    """Dependency to validate the bearer token and return the caller's identity."""
    user = read_access_token(extract_token(request))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized. Please login.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = user.id
    return user


async def get_optional_user(request: Request) -> Optional[AuthenticatedUser]:
    """Like get_current_user, but anonymous callers get None instead of a 401."""
    user = read_access_token(extract_token(request))
    if user is not None:
        request.state.user_id = user.id
    return user


def verify_api_key(provided_key: Optional[str]) -> bool:
    if not provided_key:
        return False
    return secrets.compare_digest(str(provided_key), str(settings.INTERNAL_API_KEY))


async def verify_internal_api_key(api_key: str = Depends(api_key_header)) -> bool:
    """Dependency guarding operator/debug endpoints."""
    if not verify_api_key(api_key):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or missing X-Internal-API-Key header"
        )
    return True

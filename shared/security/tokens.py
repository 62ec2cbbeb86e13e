"""
Access tokens carry the user id as `sub` and the email as a convenience
claim. Anything that fails to decode, is expired, or has a non-integer
subject is treated as no identity at all.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from shared.config import settings

if not settings.JWT_SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")


class AuthenticatedUser(BaseModel):
    """Identity carried by a verified bearer token."""
    id: int
    email: Optional[str] = None


def issue_access_token(user_id: int, email: Optional[str] = None, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": str(user_id), "exp": expire}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def read_access_token(token: Optional[str]) -> Optional[AuthenticatedUser]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        return None
    return AuthenticatedUser(id=user_id, email=payload.get("email"))

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from shared.config.settings import RATE_LIMIT_ENABLED
from .dependencies import extract_token
from .tokens import read_access_token

def user_id_or_ip(request: Request) -> str:
    """
    Key function for SlowAPI.
    Uses the user id from the bearer token when present, otherwise the
    client's IP address.
    """
    user = read_access_token(extract_token(request))
    if user is not None:
        return f"user:{user.id}"

    return f"ip:{get_remote_address(request)}"

limiter = Limiter(key_func=user_id_or_ip, enabled=RATE_LIMIT_ENABLED)

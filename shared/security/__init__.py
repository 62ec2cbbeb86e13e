from .tokens import AuthenticatedUser, issue_access_token, read_access_token
from .dependencies import (
    get_current_user,
    get_optional_user,
    verify_api_key,
    verify_internal_api_key,
)
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "AuthenticatedUser",
    "issue_access_token",
    "read_access_token",
    "verify_api_key",
    "get_current_user",
    "get_optional_user",
    "verify_internal_api_key",
    "limiter",
    "user_id_or_ip"
]

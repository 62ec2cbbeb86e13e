from fastapi import Request

from .client import CacheClient
from . import keys


def get_cache(request: Request) -> CacheClient:
    """Dependency returning the cache client built in the app lifespan."""
    return request.app.state.cache


__all__ = ["CacheClient", "get_cache", "keys"]

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from shared.cache import CacheClient, get_cache

router = APIRouter(prefix="/api/redis", tags=["Cache"])


@router.get("/status")
async def cache_status(cache: CacheClient = Depends(get_cache)):
    """Connectivity probe for the response cache."""
    if not cache.enabled:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "disabled", "message": "Redis not configured"},
        )

    if await cache.ping():
        return {"status": "connected"}

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "error": "Redis ping failed"},
    )

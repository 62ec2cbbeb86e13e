"""
Redis-backed cache wrapper.

Every operation degrades to a no-op (None / False) when Redis is not
configured or not reachable. Operations are attempted whenever a URL is
configured; redis-py reconnects per command, so an outage ends on its own.
`connected` only reports the result of the last ping.

Callers treat a failed read as a miss and a failed write as "not cached";
nothing here raises into a request.
"""
import json
from typing import Any, Optional

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from shared.observability.metrics import ecomm_cache_operations_total

logger = structlog.get_logger(__name__)

CONNECT_TIMEOUT_SECONDS = 2.0


class CacheClient:

    def __init__(self, url: Optional[str] = None, client: Optional[Any] = None):
        self.url = url
        self._client = client
        self.connected = False

    @classmethod
    def from_url(cls, url: Optional[str]) -> "CacheClient":
        if not url:
            return cls()
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=CONNECT_TIMEOUT_SECONDS,
            socket_timeout=CONNECT_TIMEOUT_SECONDS,
        )
        return cls(url=url, client=client)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def connect(self) -> bool:
        """Pings the store once. Failure is logged, never raised."""
        if not self.enabled:
            logger.warning("cache_disabled", reason="REDIS_URL not set")
            return False
        if await self.ping():
            logger.info("cache_connected")
        else:
            logger.warning("cache_unavailable", detail="operations will retry per request")
        return self.connected

    async def ping(self) -> bool:
        if not self.enabled:
            return False
        try:
            self.connected = bool(await self._client.ping())
        except (RedisError, OSError) as e:
            logger.warning("cache_ping_failed", error=str(e))
            self.connected = False
        return self.connected

    async def close(self) -> None:
        if not self.enabled:
            return
        try:
            await self._client.aclose()
        except (RedisError, OSError) as e:
            logger.warning("cache_close_failed", error=str(e))
        self.connected = False

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            ecomm_cache_operations_total.labels(op="get", result="skipped").inc()
            return None
        try:
            raw = await self._client.get(key)
        except (RedisError, OSError) as e:
            logger.warning("cache_get_failed", key=key, error=str(e))
            ecomm_cache_operations_total.labels(op="get", result="error").inc()
            return None

        if raw is None:
            logger.debug("cache_miss", key=key)
            ecomm_cache_operations_total.labels(op="get", result="miss").inc()
            return None

        logger.debug("cache_hit", key=key)
        ecomm_cache_operations_total.labels(op="get", result="hit").inc()
        try:
            return json.loads(raw)
        except ValueError:
            # Written by something other than set(); hand back the raw text
            return raw

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        if not self.enabled:
            ecomm_cache_operations_total.labels(op="set", result="skipped").inc()
            return False
        try:
            payload = json.dumps(value, default=str)
            if ttl_seconds and ttl_seconds > 0:
                await self._client.setex(key, int(ttl_seconds), payload)
            else:
                await self._client.set(key, payload)
        except (RedisError, OSError, TypeError) as e:
            logger.warning("cache_set_failed", key=key, error=str(e))
            ecomm_cache_operations_total.labels(op="set", result="error").inc()
            return False

        ecomm_cache_operations_total.labels(op="set", result="ok").inc()
        return True

    async def delete(self, key: str) -> bool:
        if not self.enabled:
            ecomm_cache_operations_total.labels(op="delete", result="skipped").inc()
            return False
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as e:
            logger.warning("cache_delete_failed", key=key, error=str(e))
            ecomm_cache_operations_total.labels(op="delete", result="error").inc()
            return False

        ecomm_cache_operations_total.labels(op="delete", result="ok").inc()
        return True

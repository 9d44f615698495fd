"""
Stock Dashboard — Cache Service
─────────────────────────────────
Injectable result cache. Call sites only see CacheService.get / set, so the
backend can be swapped without touching handlers.

  MemoryCache   process-local dict, lazy expiry on lookup plus a periodic
                sweep on write so unread keys do not pile up
  RedisCache    JSON in Redis via SETEX; degrades to a MemoryCache whenever
                Redis is unreachable, and reconnects on the next call

Values must be JSON-serialisable (lists / dicts of primitives).
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import redis.asyncio as aioredis

from stock_engine.cache.ttl_config import DEFAULT_TTL

log = logging.getLogger("sd.cache")


class CacheService(ABC):
    """get / set with per-entry TTL. Missing or expired keys return None."""

    @property
    @abstractmethod
    def backend(self) -> str: ...

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]: ...

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def clear(self) -> None: ...

    async def close(self) -> None:
        pass


# ── In-memory backend ─────────────────────────────────────────
class MemoryCache(CacheService):

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
        sweep_interval: Optional[float] = None,
    ):
        self._store: Dict[str, Tuple[Any, float]] = {}   # key -> (value, expires_at)
        self._default_ttl = default_ttl
        self._clock = clock
        self._sweep_interval = sweep_interval if sweep_interval is not None else default_ttl
        self._last_sweep = clock()

    @property
    def backend(self) -> str:
        return "memory"

    async def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._store.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        now = self._clock()
        if now - self._last_sweep >= self._sweep_interval:
            removed = self.sweep()
            if removed:
                log.debug(f"Swept {removed} expired cache entries")
        self._store[key] = (value, now + ttl)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def clear(self) -> None:
        self._store.clear()

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        self._last_sweep = now
        expired = [k for k, (_, exp) in self._store.items() if now >= exp]
        for k in expired:
            del self._store[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._store)


async def _close_quietly(client: Optional[aioredis.Redis]) -> None:
    if client is None:
        return
    try:
        await client.aclose()
    except Exception as e:
        log.debug(f"Ignoring error closing Redis client: {e}")


# ── Redis backend ─────────────────────────────────────────────
class RedisCache(CacheService):

    def __init__(
        self,
        url: str,
        default_ttl: int = DEFAULT_TTL,
        fallback: Optional[MemoryCache] = None,
        socket_timeout: float = 2,
    ):
        self.url = url
        self._default_ttl = default_ttl
        self._socket_timeout = socket_timeout
        self._client: Optional[aioredis.Redis] = None
        self.fallback = fallback if fallback is not None else MemoryCache(default_ttl=default_ttl)

    @property
    def backend(self) -> str:
        return "redis" if self._client else "memory"

    async def connect(self) -> Optional[aioredis.Redis]:
        if self._client:
            try:
                await self._client.ping()
                return self._client
            except Exception:
                stale, self._client = self._client, None
                await _close_quietly(stale)
        client = None
        try:
            client = aioredis.from_url(self.url, decode_responses=True, socket_timeout=self._socket_timeout)
            await client.ping()
            self._client = client
            log.info("Redis connected")
            return client
        except Exception as e:
            log.warning(f"Redis unavailable ({e}) - using in-memory cache")
            await _close_quietly(client)
            return None

    async def get(self, key: str) -> Optional[Any]:
        r = await self.connect()
        if r:
            try:
                val = await r.get(key)
                if val:
                    return json.loads(val)
            except Exception as e:
                log.warning(f"Redis get failed for {key}: {e}")
        return await self.fallback.get(key)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        r = await self.connect()
        if r:
            try:
                await r.setex(key, ttl, json.dumps(value))
                return
            except Exception as e:
                log.warning(f"Redis set failed for {key}: {e}")
        await self.fallback.set(key, value, ttl)

    async def delete(self, key: str) -> None:
        r = await self.connect()
        if r:
            try:
                await r.delete(key)
            except Exception as e:
                log.warning(f"Redis delete failed for {key}: {e}")
        await self.fallback.delete(key)

    async def clear(self) -> None:
        r = await self.connect()
        if r:
            try:
                await r.flushdb()
            except Exception as e:
                log.warning(f"Redis flush failed: {e}")
        await self.fallback.clear()

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None


def build_cache(redis_url: Optional[str], default_ttl: int = DEFAULT_TTL) -> CacheService:
    """Redis when a URL is configured, otherwise memory only."""
    if redis_url:
        return RedisCache(redis_url, default_ttl=default_ttl)
    return MemoryCache(default_ttl=default_ttl)

"""
Stock Dashboard — Rate Limiter
────────────────────────────────
Token-bucket rate limiter per client.
Default: 100 requests per 15 minutes, burst of the full 100.

Unlike a blocking limiter this never sleeps: an empty bucket rejects the
request and reports how long until the next token.
"""

import logging
import time
from typing import Callable, Dict

log = logging.getLogger("sd.rate_limiter")


class TokenBucket:
    """Token bucket: refills at `rate` tokens/second up to `capacity`."""

    def __init__(self, capacity: float, rate: float, clock: Callable[[], float] = time.monotonic):
        self.capacity = capacity
        self.rate     = rate       # tokens per second
        self._clock   = clock
        self._tokens  = capacity
        self._last    = clock()

    def _refill(self):
        now = self._clock()
        elapsed = now - self._last
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._last   = now

    def try_acquire(self, tokens: float = 1.0) -> bool:
        self._refill()
        if self._tokens >= tokens:
            self._tokens -= tokens
            return True
        return False

    def retry_after(self, tokens: float = 1.0) -> float:
        """Seconds until `tokens` would be available."""
        self._refill()
        missing = tokens - self._tokens
        return max(0.0, missing / self.rate)

    @property
    def remaining(self) -> int:
        self._refill()
        return int(self._tokens)


class ClientRateLimiter:
    """
    One bucket per client key (usually the remote IP).
    Buckets that have refilled completely are indistinguishable from new
    ones, so they are pruned once per window.
    """

    def __init__(self, max_requests: int = 100, window_s: float = 15 * 60,
                 clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_s     = window_s
        self._clock       = clock
        self._buckets: Dict[str, TokenBucket] = {}
        self._last_prune  = clock()

    def get_bucket(self, client: str) -> TokenBucket:
        if self._clock() - self._last_prune >= self.window_s:
            self.prune()
        if client not in self._buckets:
            self._buckets[client] = TokenBucket(
                self.max_requests, self.max_requests / self.window_s, self._clock,
            )
        return self._buckets[client]

    def prune(self) -> int:
        """Drop idle, full buckets. Returns how many were removed."""
        self._last_prune = self._clock()
        idle = [c for c, b in self._buckets.items() if b.remaining >= b.capacity]
        for c in idle:
            del self._buckets[c]
        if idle:
            log.debug(f"Pruned {len(idle)} idle rate-limit buckets")
        return len(idle)

    def allow(self, client: str) -> bool:
        allowed = self.get_bucket(client).try_acquire()
        if not allowed:
            log.warning(f"Rate limit exceeded for {client}")
        return allowed

    def reset(self):
        self._buckets.clear()

    def __len__(self) -> int:
        return len(self._buckets)

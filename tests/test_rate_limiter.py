"""Tests for the per-client token bucket limiter."""

from stock_engine.api.rate_limiter import ClientRateLimiter, TokenBucket


class TestTokenBucket:

    def test_burst_then_reject(self, clock) -> None:
        bucket = TokenBucket(3, 1.0, clock)
        assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]

    def test_refills_over_time(self, clock) -> None:
        bucket = TokenBucket(1, 0.5, clock)
        assert bucket.try_acquire()
        assert not bucket.try_acquire()
        assert bucket.retry_after() == 2.0
        clock.advance(2)
        assert bucket.try_acquire()

    def test_never_exceeds_capacity(self, clock) -> None:
        bucket = TokenBucket(2, 1.0, clock)
        clock.advance(100)
        assert bucket.remaining == 2


class TestClientRateLimiter:

    def test_default_window(self, clock) -> None:
        limiter = ClientRateLimiter(clock=clock)
        assert all(limiter.allow("1.2.3.4") for _ in range(100))
        assert not limiter.allow("1.2.3.4")
        # 15 minutes / 100 requests is one token every 9 seconds
        clock.advance(10)
        assert limiter.allow("1.2.3.4")

    def test_clients_are_independent(self, clock) -> None:
        limiter = ClientRateLimiter(max_requests=1, window_s=60, clock=clock)
        assert limiter.allow("a")
        assert not limiter.allow("a")
        assert limiter.allow("b")

    def test_reset(self, clock) -> None:
        limiter = ClientRateLimiter(max_requests=1, window_s=60, clock=clock)
        limiter.allow("a")
        limiter.reset()
        assert limiter.allow("a")

    def test_idle_buckets_pruned_each_window(self, clock) -> None:
        limiter = ClientRateLimiter(max_requests=5, window_s=60, clock=clock)
        for i in range(200):
            limiter.allow(f"10.0.0.{i}")
        assert len(limiter) == 200
        clock.advance(60)
        limiter.allow("10.0.1.1")
        assert len(limiter) == 1

    def test_busy_bucket_survives_prune(self, clock) -> None:
        limiter = ClientRateLimiter(max_requests=2, window_s=60, clock=clock)
        limiter.allow("idle")
        clock.advance(59)
        limiter.allow("busy")
        limiter.allow("busy")
        clock.advance(1)
        assert limiter.prune() == 1
        assert len(limiter) == 1

"""Tests for the in-memory fixed-window rate limiter."""
from app.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestRateLimiter:

    def test_allows_up_to_limit_then_blocks(self):
        limiter = RateLimiter(clock=FakeClock())

        results = [limiter.hit("trip_read_1.2.3.4_abc", limit=3, window=60) for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_window_opens_on_first_hit(self):
        clock = FakeClock(500.0)
        limiter = RateLimiter(clock=clock)

        first = limiter.hit("k", limit=5, window=60)
        clock.now = 530.0
        second = limiter.hit("k", limit=5, window=60)

        assert first.reset_at == 560.0
        assert second.reset_at == 560.0

    def test_window_resets_after_expiry(self):
        clock = FakeClock()
        limiter = RateLimiter(clock=clock)
        for _ in range(2):
            limiter.hit("k", limit=2, window=60)
        assert not limiter.hit("k", limit=2, window=60).allowed

        clock.now += 60
        result = limiter.hit("k", limit=2, window=60)

        assert result.allowed
        assert result.remaining == 1

    def test_keys_are_independent(self):
        limiter = RateLimiter(clock=FakeClock())
        limiter.hit("a", limit=1, window=60)

        assert not limiter.hit("a", limit=1, window=60).allowed
        assert limiter.hit("b", limit=1, window=60).allowed

    def test_sweep_removes_only_expired_windows(self):
        clock = FakeClock(1000.0)
        limiter = RateLimiter(clock=clock)
        limiter.hit("old", limit=5, window=60)
        clock.now = 1030.0
        limiter.hit("new", limit=5, window=60)

        clock.now = 1065.0
        removed = limiter.sweep()

        assert removed == 1
        assert len(limiter) == 1

    def test_reset_clears_everything(self):
        limiter = RateLimiter(clock=FakeClock())
        limiter.hit("a", limit=1, window=60)
        limiter.reset()
        assert len(limiter) == 0

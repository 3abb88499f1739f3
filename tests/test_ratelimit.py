"""Tests for crudforge.ratelimit."""

import threading

import pytest

from crudforge.ratelimit import RateLimiter, RateLimitExceeded, client_address


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestRateLimiter:
    """Tests for RateLimiter windows."""

    def test_allows_up_to_limit(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=3, window=60, clock=clock)
        assert [limiter.hit("1.2.3.4", "/api/widgets") for _ in range(3)] == [None, None, None]

        exceeded = limiter.hit("1.2.3.4", "/api/widgets")
        assert isinstance(exceeded, RateLimitExceeded)
        assert exceeded.key == "1.2.3.4:/api/widgets"
        assert exceeded.retry_after == 60
        assert exceeded.status == 429
        assert exceeded.to_dict() == {"error": "Too many requests", "retryAfter": 60}

    def test_retry_after_counts_down(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, clock=clock)
        limiter.hit("a", "/")
        clock.advance(29.5)
        assert limiter.hit("a", "/").retry_after == 31

    def test_retry_after_at_least_one(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=1, clock=clock)
        limiter.hit("a", "/")
        clock.advance(0.999)
        assert limiter.hit("a", "/").retry_after == 1

    def test_window_resets(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, clock=clock)
        limiter.hit("a", "/")
        assert limiter.hit("a", "/") is not None
        clock.advance(60)
        assert limiter.hit("a", "/") is None

    def test_keys_are_independent(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, clock=clock)
        assert limiter.hit("a", "/one") is None
        assert limiter.hit("a", "/two") is None
        assert limiter.hit("b", "/one") is None
        assert limiter.hit("a", "/one") is not None

    def test_expired_windows_dropped(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=5, window=60, clock=clock)
        limiter.hit("a", "/")
        limiter.hit("b", "/")
        clock.advance(61)
        limiter.hit("c", "/")
        assert len(limiter) == 1

    def test_capacity_evicts_oldest(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, capacity=2, clock=clock)
        limiter.hit("a", "/")
        limiter.hit("b", "/")
        limiter.hit("c", "/")
        assert len(limiter) == 2
        # a was evicted, so it starts a fresh window
        assert limiter.hit("a", "/") is None
        assert limiter.hit("c", "/") is not None

    def test_reset(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, clock=clock)
        limiter.hit("a", "/")
        limiter.reset()
        assert len(limiter) == 0
        assert limiter.hit("a", "/") is None

    def test_hit_request(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=1, window=60, clock=clock)
        limiter.hit_request("9.9.9.9, 10.0.0.1", "/api")
        exceeded = limiter.hit_request("9.9.9.9", "/api")
        assert exceeded.key == "9.9.9.9:/api"

    @pytest.mark.parametrize(
        "kwargs",
        [{"limit": 0}, {"window": 0}, {"capacity": 0}],
    )
    def test_invalid_arguments(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            RateLimiter(**kwargs)

    def test_concurrent_hits_counted_once(self, clock: FakeClock) -> None:
        limiter = RateLimiter(limit=100, window=60, clock=clock)
        results = []

        def worker() -> None:
            for _ in range(50):
                results.append(limiter.hit("a", "/"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 200
        assert sum(r is not None for r in results) == 100


class TestClientAddress:
    """Tests for client_address."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("1.2.3.4, 10.0.0.1", "1.2.3.4"),
            ("  5.6.7.8 ", "5.6.7.8"),
            (None, "unknown"),
            ("", "unknown"),
            (" , 10.0.0.1", "unknown"),
        ],
    )
    def test_first_hop(self, header, expected: str) -> None:
        assert client_address(header) == expected

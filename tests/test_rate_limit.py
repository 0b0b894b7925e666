"""Tests for the sliding-window rate limiter.

Verifies:
  - requests under the limit pass
  - the limit is per key
  - old hits slide out of the window
  - the HTTP layer answers 429 with an envelope and skips /health
"""
from fastapi.testclient import TestClient

from app.core.rate_limit import SlidingWindowLimiter
from app.main import create_app


def test_allows_up_to_limit_then_rejects():
    limiter = SlidingWindowLimiter(max_requests=3, window_seconds=60)

    assert [limiter.hit("ip", now=t)[0] for t in (0, 1, 2)] == [True, True, True]
    allowed, retry_after = limiter.hit("ip", now=3)

    assert not allowed
    # Oldest hit (t=0) leaves the window at t=60.
    assert retry_after == 57


def test_keys_are_independent():
    limiter = SlidingWindowLimiter(max_requests=1, window_seconds=60)

    assert limiter.hit("a", now=0)[0]
    assert limiter.hit("b", now=0)[0]
    assert not limiter.hit("a", now=1)[0]


def test_window_slides():
    limiter = SlidingWindowLimiter(max_requests=2, window_seconds=10)
    limiter.hit("ip", now=0)
    limiter.hit("ip", now=5)

    assert not limiter.hit("ip", now=9)[0]
    assert limiter.hit("ip", now=10.5)[0]
    assert limiter.remaining("ip", now=10.5) == 0
    assert limiter.remaining("ip", now=16) == 1


def test_rejected_hits_are_not_recorded():
    limiter = SlidingWindowLimiter(max_requests=1, window_seconds=10)
    limiter.hit("ip", now=0)
    for t in range(1, 9):
        limiter.hit("ip", now=t)

    assert limiter.hit("ip", now=10.1)[0]


def test_http_layer_returns_429_envelope(settings):
    settings.RATE_LIMIT_MAX_REQUESTS = 2
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/cart/count").status_code == 401
        assert client.get("/api/cart/count").status_code == 401
        resp = client.get("/api/cart/count")

        assert resp.status_code == 429
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Too many requests from this IP, please try again later."
        assert body["retryAfter"] >= 1
        assert resp.headers["Retry-After"] == str(body["retryAfter"])

        # Health checks are exempt.
        assert client.get("/health").status_code == 200


def test_idle_keys_are_dropped_after_their_window():
    limiter = SlidingWindowLimiter(max_requests=5, window_seconds=1)
    for i in range(1000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}", now=0)
    assert len(limiter) == 1000

    limiter.hit("fresh", now=100)

    assert len(limiter) == 1


def test_remaining_drops_expired_key():
    limiter = SlidingWindowLimiter(max_requests=3, window_seconds=10)
    limiter.hit("ip", now=0)

    assert limiter.remaining("ip", now=11) == 3
    assert len(limiter) == 0

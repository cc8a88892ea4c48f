"""
Unit tests for the sliding window RateLimiter
"""
from unittest.mock import MagicMock, patch

from storefront.core.rate_limit import RateLimiter, get_client_ip


class TestRateLimiter:
    """Test RateLimiter.is_allowed"""

    def test_allows_up_to_the_limit(self):
        limiter = RateLimiter()

        results = [limiter.is_allowed("ip:/login", max_requests=5, window_seconds=900) for _ in range(6)]

        assert [allowed for allowed, _, _ in results] == [True] * 5 + [False]
        assert [remaining for _, remaining, _ in results[:5]] == [4, 3, 2, 1, 0]

    def test_rejection_reports_retry_after(self):
        # Arrange
        limiter = RateLimiter()
        with patch("storefront.core.rate_limit.time.time", return_value=1000.0):
            limiter.is_allowed("ip", max_requests=1, window_seconds=60)

        # Act
        with patch("storefront.core.rate_limit.time.time", return_value=1030.0):
            allowed, remaining, retry_after = limiter.is_allowed("ip", max_requests=1, window_seconds=60)

        # Assert
        assert allowed is False
        assert remaining == 0
        assert retry_after == 31

    def test_window_slides(self):
        """Test requests older than the window no longer count"""
        limiter = RateLimiter()
        with patch("storefront.core.rate_limit.time.time", return_value=0.0):
            limiter.is_allowed("ip", max_requests=1, window_seconds=60)
        with patch("storefront.core.rate_limit.time.time", return_value=61.0):
            allowed, _, _ = limiter.is_allowed("ip", max_requests=1, window_seconds=60)

        assert allowed is True

    def test_identifiers_are_independent(self):
        limiter = RateLimiter()
        limiter.is_allowed("a", max_requests=1)

        assert limiter.is_allowed("b", max_requests=1)[0] is True
        assert limiter.is_allowed("a", max_requests=1)[0] is False

    def test_reset_clears_history(self):
        limiter = RateLimiter()
        limiter.is_allowed("a", max_requests=1)

        limiter.reset()

        assert limiter.is_allowed("a", max_requests=1)[0] is True


class TestGetClientIp:
    def test_prefers_first_forwarded_address(self):
        request = MagicMock()
        request.headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        assert get_client_ip(request) == "203.0.113.7"

    def test_falls_back_to_peer_address(self):
        request = MagicMock()
        request.headers = {}
        request.client.host = "127.0.0.1"

        assert get_client_ip(request) == "127.0.0.1"

    def test_unknown_without_peer(self):
        request = MagicMock()
        request.headers = {}
        request.client = None

        assert get_client_ip(request) == "unknown"

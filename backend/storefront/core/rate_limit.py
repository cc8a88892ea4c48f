"""
Rate limiting for the Storefront backend
Uses in-memory storage with sliding window algorithm
"""
import time
from collections import defaultdict
from typing import Dict, List, Tuple

from fastapi import HTTPException, Request, status


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    For production with multiple instances, consider using Redis.
    """

    def __init__(self, cleanup_interval: int = 60):
        # {identifier: [timestamp, ...]}
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, window_seconds: int):
        """Remove entries older than the window"""
        now = time.time()

        # Only cleanup periodically to avoid overhead
        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds
        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(self, identifier: str, max_requests: int, window_seconds: int = 60) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit, recording it if so.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        now = time.time()
        window_start = now - window_seconds
        in_window = [ts for ts in self._requests[identifier] if ts > window_start]
        self._requests[identifier] = in_window

        if len(in_window) >= max_requests:
            # When the oldest request in the window expires
            retry_after = int(min(in_window) + window_seconds - now) + 1
            return False, 0, retry_after

        in_window.append(now)
        return True, max_requests - len(in_window), 0

    def reset(self):
        self._requests.clear()


def get_client_ip(request: Request) -> str:
    """Get the client IP, considering proxies"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Take the first IP in the chain (original client)
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


async def login_rate_limit(request: Request):
    """
    Dependency limiting login attempts per client IP and path.

    Limit and window come from LOGIN_RATE_LIMIT / LOGIN_RATE_WINDOW_SECONDS.

    Usage:
        @router.post("/login", dependencies=[Depends(login_rate_limit)])
    """
    settings = request.app.state.settings
    limiter: RateLimiter = request.app.state.rate_limiter
    identifier = f"rate-limit:{get_client_ip(request)}:{request.url.path}"

    is_allowed, remaining, retry_after = limiter.is_allowed(
        identifier=identifier,
        max_requests=settings.LOGIN_RATE_LIMIT,
        window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS,
    )

    if not is_allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please try again later",
            headers={
                "X-RateLimit-Limit": str(settings.LOGIN_RATE_LIMIT),
                "X-RateLimit-Remaining": "0",
                "Retry-After": str(retry_after),
            },
        )

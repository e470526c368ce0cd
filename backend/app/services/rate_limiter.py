"""In-memory fixed-window rate limiter.

Each key gets a window that opens on its first hit and closes ``window``
seconds later. State lives in the process, so limits are per worker.
"""

import logging
import time
from dataclasses import dataclass

from fastapi import HTTPException, Request, Response

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float


class RateLimiter:
    def __init__(self, clock=time.time):
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}

    def now(self) -> float:
        return self._clock()

    def hit(self, key: str, limit: int, window: int) -> RateLimitResult:
        now = self.now()
        count, reset_at = self._windows.get(key, (0, 0.0))
        if now >= reset_at:
            count, reset_at = 0, now + window

        if count >= limit:
            self._windows[key] = (count, reset_at)
            return RateLimitResult(allowed=False, limit=limit, remaining=0, reset_at=reset_at)

        count += 1
        self._windows[key] = (count, reset_at)
        return RateLimitResult(allowed=True, limit=limit, remaining=limit - count, reset_at=reset_at)

    def sweep(self) -> int:
        """Drop expired windows. Returns how many were removed."""
        now = self.now()
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def reset(self):
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


rate_limiter = RateLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def rate_limit(scope: str, limit: int | None = None, window: int | None = None):
    """Build a dependency that limits a route per client IP and resource.

    The resource is the route's ``trip_id`` path parameter when present,
    otherwise the request path.
    """

    async def dependency(request: Request, response: Response):
        if not settings.rate_limit_enabled:
            return

        max_requests = limit or settings.rate_limit_requests
        window_seconds = window or settings.rate_limit_window_seconds
        resource = request.path_params.get("trip_id") or request.url.path
        key = f"{scope}_{client_ip(request)}_{resource}"

        result = rate_limiter.hit(key, max_requests, window_seconds)
        headers = {
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(int(result.reset_at)),
        }
        if not result.allowed:
            retry_after = max(1, int(result.reset_at - rate_limiter.now()) + 1)
            logger.warning(f"Rate limit exceeded for {key}")
            raise HTTPException(
                status_code=429,
                detail="Too many requests. Please try again later.",
                headers={**headers, "Retry-After": str(retry_after)},
            )
        response.headers.update(headers)

    return dependency

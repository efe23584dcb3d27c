import logging
import math
import time
from typing import Callable
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS_MESSAGE = "Too many requests from this IP, please try again later."


class FixedWindowRateLimiter:
    """Counts hits per key inside a fixed window that opens on the key's first hit."""

    def __init__(self, max_requests: int = 100, window_seconds: float = 60, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        self._last_sweep = now
        expired = [key for key, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def hit(self, key: str) -> bool:
        now = self.clock()
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_seconds:
            start, count = now, 0
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        count += 1
        self._windows[key] = (start, count)
        return count <= self.max_requests

    def remaining(self, key: str) -> int:
        _, count = self._windows.get(key, (0.0, 0))
        return max(0, self.max_requests - count)

    def retry_after(self, key: str) -> int:
        start, _ = self._windows.get(key, (self.clock(), 0))
        return max(0, math.ceil(self.window_seconds - (self.clock() - start)))


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        key = request.client.host if request.client else "unknown"
        if not self.limiter.hit(key):
            logger.warning(f"Rate limit exceeded for {key}")
            return JSONResponse(
                status_code=429,
                content={"success": False, "message": TOO_MANY_REQUESTS_MESSAGE},
                headers={
                    "Retry-After": str(self.limiter.retry_after(key)),
                    "X-RateLimit-Limit": str(self.limiter.max_requests),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(self.limiter.remaining(key))
        return response

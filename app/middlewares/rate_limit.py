# app/middlewares/rate_limit.py
import time
from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from redis.asyncio import Redis

from app.platform.config import settings
from app.platform.response import error_response

WINDOW_SECONDS = 60
RATE_LIMIT_MESSAGE = "Too many requests. Please slow down."


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        self.redis = None
        # key -> (count, window expiry)
        self.memory_store = {}
        self.next_sweep = time.time() + WINDOW_SECONDS

    def _too_many_requests(self, retry_after: int):
        return error_response(
            RATE_LIMIT_MESSAGE,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers={"Retry-After": str(max(retry_after, 0))},
        )

    def _sweep_expired(self, now: float):
        """Drop every window that has ended; runs at most once per window."""
        if now < self.next_sweep:
            return
        self.memory_store = {
            key: entry for key, entry in self.memory_store.items() if entry[1] > now
        }
        self.next_sweep = now + WINDOW_SECONDS

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "testclient"

        # Skip limit if whitelisted
        if client_ip in settings.WHITELIST_IPS:
            return await call_next(request)

        path = request.url.path
        limit = settings.RATE_LIMITS.get(path)

        # If endpoint is not rate-limited, continue
        if limit is None:
            return await call_next(request)

        # ---------------------------
        # LOCAL / TEST: In-memory store
        # ---------------------------
        if settings.FORCE_IN_MEMORY_RATE_LIMITER:
            now = time.time()
            self._sweep_expired(now)

            key = f"{client_ip}:{path}"
            count, expiry = self.memory_store.get(key, (0, now + WINDOW_SECONDS))

            if now > expiry:
                count, expiry = 0, now + WINDOW_SECONDS

            if count >= limit:
                return self._too_many_requests(int(expiry - now))

            self.memory_store[key] = (count + 1, expiry)
            return await call_next(request)

        # ---------------------------
        # PRODUCTION: Redis store
        # ---------------------------
        if self.redis is None:
            self.redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)

        key = f"rl:{client_ip}:{path}"
        # INCR is atomic, so concurrent requests each see their own count
        current_count = await self.redis.incr(key)
        if current_count == 1:
            await self.redis.expire(key, WINDOW_SECONDS)

        if current_count > limit:
            ttl = await self.redis.ttl(key)
            if ttl < 0:
                # window key lost its expiry; start a fresh window
                await self.redis.expire(key, WINDOW_SECONDS)
                ttl = WINDOW_SECONDS
            return self._too_many_requests(ttl)

        return await call_next(request)

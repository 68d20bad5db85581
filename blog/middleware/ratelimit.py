import time
import asyncio
from collections import deque
from typing import Callable, Iterable
from fastapi import Request
from fastapi.responses import JSONResponse
from jose import JWTError

from blog.utils.security import decode_token

class RateLimitMiddleware:
    """Sliding-window throttle for API calls, keyed per token subject or client IP."""

    def __init__(
        self,
        app,
        *,
        window_seconds: int,
        max_calls: int,
        key_func: Callable[[Request], str],
        include_path_prefixes: Iterable[str] = ("/api",),
        clock: Callable[[], float] = time.time,
    ):
        self.app = app
        self.window = window_seconds
        self.max_calls = max_calls
        self.key_func = key_func
        self.include_paths = tuple(include_path_prefixes)

        self._buckets: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._last_sweep = 0.0

    def _should_guard(self, path: str) -> bool:
        return any(path.startswith(p) for p in self.include_paths)

    def _sweep(self, cutoff: float) -> None:
        # drop keys that have been idle for a whole window
        for key in [k for k, q in self._buckets.items() if not q or q[-1] < cutoff]:
            del self._buckets[key]

    def _limit_headers(self, remaining: int) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.max_calls),
            "X-RateLimit-Remaining": str(max(0, remaining)),
        }

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        path = scope.get("path", "")
        if not self._should_guard(path):
            return await self.app(scope, receive, send)

        request = Request(scope, receive=receive)
        key = self.key_func(request)

        now = self._clock()
        async with self._lock:
            cutoff = now - self.window
            if now - self._last_sweep >= self.window:
                self._sweep(cutoff)
                self._last_sweep = now

            q = self._buckets.setdefault(key, deque())
            while q and q[0] < cutoff:
                q.popleft()

            if len(q) >= self.max_calls:
                retry_after = max(1, int(q[0] + self.window - now))
                resp = JSONResponse(
                    status_code=429,
                    content={"message": "Too Many Attempts.", "retry_after": retry_after},
                    headers=self._limit_headers(0),
                )
                resp.headers["Retry-After"] = str(retry_after)
                return await resp(scope, receive, send)

            q.append(now)
            headers = self._limit_headers(self.max_calls - len(q))

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                raw = list(message.get("headers", []))
                raw.extend((k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items())
                message = dict(message, headers=raw)
            await send(message)

        return await self.app(scope, receive, send_with_headers)


def make_key_func() -> Callable[[Request], str]:
    def _key(req: Request) -> str:
        ip = req.client.host if req.client else "unknown"

        auth = req.headers.get("authorization", "")
        if auth.lower().startswith("bearer "):
            token = auth.split(" ", 1)[1].strip()
            try:
                sub = decode_token(token).get("sub")
                if sub:
                    return f"user:{sub}"
            except JWTError:
                pass

        return f"ip:{ip}"
    return _key

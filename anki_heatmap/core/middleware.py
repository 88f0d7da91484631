from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import Lock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


ANKICONNECT_PATH_PREFIXES = ("/widget/", "/heatmap")


class RequestWindow:
    """Sliding window holding at most `max_requests` timestamps."""

    def __init__(self, max_requests: int, window_seconds: int) -> None:
        self.max_requests = max(1, max_requests)
        self.window_seconds = max(1, window_seconds)
        self._timestamps: deque[float] = deque()
        self._lock = Lock()

    def acquire(self, now: float) -> int | None:
        """Record a request at `now`.

        Returns None when the request fits in the window, otherwise the
        number of seconds until a slot frees up.
        """

        with self._lock:
            cutoff = now - self.window_seconds
            while self._timestamps and self._timestamps[0] <= cutoff:
                self._timestamps.popleft()

            if len(self._timestamps) >= self.max_requests:
                oldest = self._timestamps[0]
                return max(1, int(self.window_seconds - (now - oldest)))

            self._timestamps.append(now)
            return None


class AnkiConnectThrottleMiddleware(BaseHTTPMiddleware):
    """Caps how often requests may reach the local AnkiConnect instance.

    AnkiConnect runs inside a single desktop Anki process, so every widget
    refresh shares one budget regardless of which client asked.
    """

    def __init__(
        self, app, requests_per_window: int = 30, window_seconds: int = 60
    ) -> None:
        super().__init__(app)
        self.window = RequestWindow(requests_per_window, window_seconds)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or not request.url.path.startswith(
            ANKICONNECT_PATH_PREFIXES
        ):
            return await call_next(request)

        retry_after = self.window.acquire(monotonic())
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"detail": "AnkiConnect is being polled too often"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

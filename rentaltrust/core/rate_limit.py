import threading
import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import HTTPException, Request, status

from ..config import settings


class LoginThrottle:
    """Sliding-window attempt counter keyed by scope and client address."""

    def __init__(self, limit: int, window_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._attempts: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def retry_after(self, key: str) -> float:
        """Record an attempt for ``key``; return 0 when allowed, else seconds until a slot frees."""
        now = self.clock()
        with self._lock:
            attempts = self._attempts.setdefault(key, deque())
            while attempts and now - attempts[0] >= self.window_seconds:
                attempts.popleft()
            if len(attempts) >= self.limit:
                return max(0.0, self.window_seconds - (now - attempts[0]))
            attempts.append(now)
            return 0.0

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()


login_limiter = LoginThrottle(settings.login_rate_limit, settings.login_rate_window_seconds)


def throttle(scope: str, limiter: LoginThrottle = login_limiter) -> Callable[[Request], None]:
    def dependency(request: Request) -> None:
        client = request.client.host if request.client else "anonymous"
        wait = limiter.retry_after(f"{scope}:{client}")
        if wait:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many login attempts. Try again later.",
                headers={"Retry-After": str(int(wait) or 1)},
            )

    return dependency

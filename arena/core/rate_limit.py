"""In-process fixed-window rate limiting for API routes."""
import time
from typing import Callable


class FixedWindowLimiter:
    """Allow at most ``limit`` hits per key within each ``window_seconds`` window."""

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> bool:
        """Count one request for key; False when the key is over its limit."""
        now = self.clock()
        # drop expired windows
        self._windows = {k: w for k, w in self._windows.items() if w[0] > now}
        reset_at, count = self._windows.get(key, (now + self.window_seconds, 0))
        if count >= self.limit:
            return False
        self._windows[key] = (reset_at, count + 1)
        return True

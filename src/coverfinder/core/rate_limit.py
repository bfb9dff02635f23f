"""
Simple in-process rate limiting utilities.

The HTTP API gives each client a fixed request budget per window
(default: 100 requests every 15 minutes). State lives only in the limiter
instance owned by the API layer; the scoring engine never touches it.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field


@dataclass
class FixedWindowRateLimiter:
    """Per-key fixed-window limiter: at most `max_requests` per `window_seconds`."""

    max_requests: int
    window_seconds: float
    # Expired windows are swept once this many client keys are tracked.
    prune_threshold: int = 1024
    _windows: dict[str, tuple[float, int]] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if int(self.max_requests) <= 0:
            raise ValueError("max_requests must be > 0")
        if float(self.window_seconds) <= 0:
            raise ValueError("window_seconds must be > 0")
        if int(self.prune_threshold) <= 0:
            raise ValueError("prune_threshold must be > 0")

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def _prune(self, now: float) -> None:
        expired = [k for k, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def try_acquire(self, key: str) -> bool:
        """Record one request for `key`; return False when its budget is spent."""
        now = time.monotonic()
        with self._lock:
            if len(self._windows) >= self.prune_threshold:
                self._prune(now)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0
            if count >= self.max_requests:
                self._windows[key] = (started, count)
                return False
            self._windows[key] = (started, count + 1)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until `key` gets a fresh window (0 if it is not limited)."""
        now = time.monotonic()
        with self._lock:
            started, _ = self._windows.get(key, (now, 0))
        return max(0.0, self.window_seconds - (now - started))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

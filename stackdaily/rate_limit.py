"""
rate_limit.py — Request rate limiting
======================================
Two layers:

* ``FixedWindowRateLimiter`` bounds submissions per client identifier.
  It is a fixed-window counter: a burst straddling a window boundary can
  admit up to twice ``max_requests``. Counters live in process memory and
  are not shared between instances.
* ``limiter`` (slowapi) applies a coarse per-IP limit to the avatar proxy.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

logger = logging.getLogger("stackdaily.rate_limit")

limiter = Limiter(key_func=get_remote_address)


@dataclass
class RateLimitRecord:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Per-identifier fixed-window counter guarded by a lock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}
        self._lock = threading.Lock()

    def check(self, identifier: str, max_requests: int = 10, window_seconds: float = 60.0) -> bool:
        """Count one request for ``identifier``; True if it is allowed."""
        now = self._clock()
        with self._lock:
            record = self._records.get(identifier)
            if record is None or now > record.reset_at:
                self._records[identifier] = RateLimitRecord(count=1, reset_at=now + window_seconds)
                return True
            if record.count < max_requests:
                record.count += 1
                return True
            return False

    def sweep(self) -> int:
        """Drop records whose window has expired. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, rec in self._records.items() if now > rec.reset_at]
            for key in expired:
                del self._records[key]
        return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class RateLimitSweeper:
    """Background thread that periodically sweeps a limiter."""

    def __init__(self, target: FixedWindowRateLimiter, interval_seconds: float) -> None:
        self._target = target
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="rate-limit-sweeper", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval + 1)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                removed = self._target.sweep()
                if removed:
                    logger.debug("Rate limit sweep removed %d expired entries", removed)
            except Exception as exc:
                logger.warning("Rate limit sweep failed: %s", exc)


# Process-wide instance used by the submission route
submission_limiter = FixedWindowRateLimiter()


def check_rate_limit(identifier: str, max_requests: int = 10, window_seconds: float = 60.0) -> bool:
    return submission_limiter.check(identifier, max_requests, window_seconds)


def client_identifier(request: Request) -> str:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip
    return get_remote_address(request) or "unknown"

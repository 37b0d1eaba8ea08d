"""
HTTP middleware: per-client rate limiting.

Responsibilities:
- Fixed-window request counter per client key (RateGovernor).
- Client key derivation from X-Forwarded-For / peer address.
- Background reaper that drops stale windows so the table stays bounded.
- FastAPI dependency guarding the mutating endpoints.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request

from backend_safecircle.core.exceptions import RateLimitedError
from backend_safecircle.safecircle_logging import get_logger

logger = get_logger(__name__)

DEFAULT_WINDOW_SEC = 60.0
DEFAULT_MAX_REQUESTS = 30
UNKNOWN_CLIENT = "unknown"


@dataclass
class RateWindowEntry:
    count: int
    window_start: float


class RateGovernor:
    """
    Admit at most max_requests per client key per window.

    A window opens on a key's first request and lasts window_sec; the first
    request after it expires opens a new one. Thread-safe.
    """

    def __init__(
        self,
        window_sec: float = DEFAULT_WINDOW_SEC,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_sec = window_sec
        self.max_requests = max_requests
        self._clock = clock
        self._entries: dict[str, RateWindowEntry] = {}
        self._lock = threading.Lock()

    def admit(self, client_key: str) -> bool:
        """Count one request for client_key; return False once the window quota is exceeded."""
        now = self._clock()
        key = client_key or UNKNOWN_CLIENT
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now - entry.window_start > self.window_sec:
                self._entries[key] = RateWindowEntry(count=1, window_start=now)
                return True
            entry.count += 1
            return entry.count <= self.max_requests

    def reap(self, now: float | None = None) -> int:
        """Drop entries whose window started more than two windows ago. Returns number dropped."""
        if now is None:
            now = self._clock()
        cutoff = self.window_sec * 2
        with self._lock:
            stale = [k for k, e in self._entries.items() if now - e.window_start > cutoff]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def run_reaper_loop(governor: RateGovernor, stop_event: threading.Event, interval_sec: float) -> None:
    """Call governor.reap() every interval_sec until stop_event is set. Runs in a daemon thread."""
    logger.info("rate_reaper_started", interval_sec=interval_sec)
    while not stop_event.wait(interval_sec):
        try:
            dropped = governor.reap()
            if dropped:
                logger.debug("rate_reaper_tick", dropped=dropped, remaining=len(governor))
        except Exception as e:
            logger.exception("rate_reaper_failed", error=str(e))
    logger.info("rate_reaper_stopped")


def client_key_from_request(request: Request) -> str:
    """
    First X-Forwarded-For entry when the header is set, else the peer host.

    A header whose first entry is blank maps to the shared 'unknown' bucket.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or UNKNOWN_CLIENT
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def enforce_rate_limit(request: Request) -> None:
    """Dependency: raise RateLimitedError (429) when the caller exceeded its quota."""
    governor: RateGovernor = request.app.state.rate_governor
    key = client_key_from_request(request)
    if not governor.admit(key):
        logger.info("rate_limited", path=request.url.path)
        raise RateLimitedError()

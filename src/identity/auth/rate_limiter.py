"""Sliding-window protection against brute-force logins.

Failures are counted per key (email plus client address). Once a key reaches
``max_attempts`` failures it is blocked until ``block_seconds`` have passed
since its most recent failure. Expired entries are discarded lazily when the
key is next looked at; nothing sweeps them in the background.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from identity.utils.logging import get_logger

logger = get_logger(__name__)

MAX_ATTEMPTS = 5
BLOCK_SECONDS = 300


def login_key(email, client_ip) -> str:
    return f"{email}|{client_ip}"


def _epoch_seconds() -> int:
    return int(time.time())


@dataclass(frozen=True)
class RateLimiterEntry:
    failure_count: int
    last_failure_at: int


class LoginRateLimiter:
    """Failed-attempt counter safe for concurrent logins.

    Each instance owns its own table, so tests and separate apps never share
    state.
    """

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        block_seconds: int = BLOCK_SECONDS,
        clock: Callable[[], int] = _epoch_seconds,
    ):
        self.max_attempts = max_attempts
        self.block_seconds = block_seconds
        self._clock = clock
        self._entries: dict[str, RateLimiterEntry] = {}
        self._lock = threading.Lock()

    def _expired(self, entry: RateLimiterEntry, now: int) -> bool:
        return now - entry.last_failure_at >= self.block_seconds

    def _live_entry(self, key) -> RateLimiterEntry | None:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is not None and self._expired(entry, self._clock()):
            del self._entries[key]
            return None
        return entry

    def is_blocked(self, key) -> bool:
        with self._lock:
            entry = self._live_entry(key)
            return entry is not None and entry.failure_count >= self.max_attempts

    def record_failed_attempt(self, key) -> int:
        """Count a failure and return the key's failure count afterwards."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None or self._expired(entry, now):
                entry = RateLimiterEntry(failure_count=1, last_failure_at=now)
            else:
                entry = RateLimiterEntry(failure_count=entry.failure_count + 1, last_failure_at=now)
            self._entries[key] = entry

        if entry.failure_count == self.max_attempts:
            logger.warning("Login key blocked", key=key, block_seconds=self.block_seconds)
        return entry.failure_count

    def reset_attempts(self, key) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def remaining_block_seconds(self, key) -> int:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return 0
            return max(0, self.block_seconds - (self._clock() - entry.last_failure_at))

    def failure_count(self, key) -> int:
        with self._lock:
            entry = self._live_entry(key)
            return entry.failure_count if entry else 0

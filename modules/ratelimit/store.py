"""
Storage backends for rate-limit entries.

The limiter depends on the RateLimitStore protocol only, so a shared
external store can replace the in-memory one without touching callers.
"""

import threading
from typing import Optional, Protocol, runtime_checkable

from .models import RateLimitEntry


@runtime_checkable
class RateLimitStore(Protocol):
    """Contract for rate-limit entry storage."""

    def hit(self, identifier: str, window_ms: int, now: int) -> RateLimitEntry:
        """
        Record one attempt for an identifier.

        Starts a fresh window (count=1) when there is no entry or the
        stored window has ended, otherwise increments the count. Must be
        atomic per identifier.

        Returns:
            A snapshot of the entry after the attempt was recorded
        """
        ...

    def get(self, identifier: str) -> Optional[RateLimitEntry]:
        """Return a snapshot of the entry, or None."""
        ...

    def delete(self, identifier: str) -> None:
        """Remove the entry. No error if absent."""
        ...

    def delete_expired(self, now: int) -> int:
        """Remove every entry whose window ended before now."""
        ...


class InMemoryRateLimitStore:
    """
    Process-local store backed by a dict.

    A lock serialises updates so concurrent requests for the same
    identifier never lose an increment.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def hit(self, identifier: str, window_ms: int, now: int) -> RateLimitEntry:
        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None or now > entry.reset_at:
                # Replaced, never merged with the old window
                entry = RateLimitEntry(
                    count=1,
                    reset_at=now + window_ms,
                    first_attempt=now,
                )
                self._entries[identifier] = entry
            else:
                entry.count += 1
            return RateLimitEntry(entry.count, entry.reset_at, entry.first_attempt)

    def get(self, identifier: str) -> Optional[RateLimitEntry]:
        with self._lock:
            entry = self._entries.get(identifier)
            if entry is None:
                return None
            return RateLimitEntry(entry.count, entry.reset_at, entry.first_attempt)

    def delete(self, identifier: str) -> None:
        with self._lock:
            self._entries.pop(identifier, None)

    def delete_expired(self, now: int) -> int:
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now > entry.reset_at]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

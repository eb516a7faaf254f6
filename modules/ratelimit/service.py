"""
Fixed-window rate limiter.

Counts attempts per identifier inside a window that starts on the first
attempt and closes window_ms later. This is a fixed window, not a sliding
one: a client can get up to 2 x max_attempts through in quick succession
around a window boundary. A sliding-window or token-bucket limiter can
replace it behind the same check() contract.
"""

import asyncio
import hashlib
import logging
import math
import time
from typing import Callable, Optional

from fastapi import Request

from shared.exceptions import RateLimitExceededError

from .models import RateLimitResult, RateLimitPolicy
from .policies import get_policy
from .store import RateLimitStore, InMemoryRateLimitStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_WINDOW_MS = 15 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimiter:
    """
    Rate limiter over an injected store.

    Never raises from check(); callers decide how to answer a throttled
    request (see enforce() for the HTTP 429 path).
    """

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock

    @property
    def store(self) -> RateLimitStore:
        return self._store

    def check(
        self,
        identifier: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        window_ms: int = DEFAULT_WINDOW_MS,
    ) -> RateLimitResult:
        """
        Record an attempt and report whether it is allowed.

        Args:
            identifier: Client key (IP + user agent hash, email, ...)
            max_attempts: Attempts allowed per window
            window_ms: Window length in milliseconds

        Returns:
            RateLimitResult; retry_after is set only when throttled
        """
        now = self._clock()
        entry = self._store.hit(identifier, window_ms, now)

        if entry.count > max_attempts:
            return RateLimitResult(
                allowed=False,
                remaining_attempts=0,
                reset_at=entry.reset_at,
                retry_after=math.ceil((entry.reset_at - now) / 1000),
            )

        return RateLimitResult(
            allowed=True,
            remaining_attempts=max_attempts - entry.count,
            reset_at=entry.reset_at,
        )

    def check_policy(self, policy: str | RateLimitPolicy, identifier: str) -> RateLimitResult:
        """Check an identifier against a named policy."""
        if isinstance(policy, str):
            policy = get_policy(policy)
        return self.check(identifier, policy.max_attempts, policy.window_ms)

    def enforce(
        self,
        policy: str | RateLimitPolicy,
        identifier: str,
        message: Optional[str] = None,
    ) -> RateLimitResult:
        """
        Check a policy and raise when the identifier is throttled.

        Raises:
            RateLimitExceededError: Rendered as HTTP 429 by the API layer
        """
        if isinstance(policy, str):
            policy = get_policy(policy)
        result = self.check(identifier, policy.max_attempts, policy.window_ms)
        if not result.allowed:
            logger.warning(
                "Rate limit exceeded for policy %s (retry in %ss)",
                policy.name,
                result.retry_after,
            )
            raise RateLimitExceededError(
                retry_after=result.retry_after or 0,
                reset_at=result.reset_at,
                limit=policy.max_attempts,
                **({"message": message} if message else {}),
            )
        return result

    def reset(self, identifier: str) -> None:
        """Forget an identifier's attempts (after a successful action)."""
        self._store.delete(identifier)

    def status(
        self,
        identifier: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> Optional[RateLimitResult]:
        """Current state for an identifier without counting an attempt."""
        entry = self._store.get(identifier)
        if entry is None:
            return None

        now = self._clock()
        if now > entry.reset_at:
            self._store.delete(identifier)
            return None

        return RateLimitResult(
            allowed=entry.count <= max_attempts,
            remaining_attempts=max(0, max_attempts - entry.count),
            reset_at=entry.reset_at,
            retry_after=math.ceil((entry.reset_at - now) / 1000),
        )

    def sweep(self) -> int:
        """Delete expired entries. Returns how many were removed."""
        removed = self._store.delete_expired(self._clock())
        if removed:
            logger.debug("Rate limit sweep removed %d expired entries", removed)
        return removed


async def run_periodic_sweep(limiter: RateLimiter, interval_seconds: float) -> None:
    """Sweep expired entries forever; cancel the task to stop it."""
    while True:
        await asyncio.sleep(interval_seconds)
        limiter.sweep()


# -----------------------------------------------------------------------------
# Request identifiers
# -----------------------------------------------------------------------------


def client_ip(request: Request) -> str:
    """Best-effort client IP from proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return (
        request.headers.get("x-real-ip")
        or request.headers.get("cf-connecting-ip")
        or "unknown"
    )


def client_identifier(request: Request) -> str:
    """IP plus a short user-agent hash, so clients behind one NAT differ."""
    user_agent = request.headers.get("user-agent") or "unknown"
    ua_hash = hashlib.sha256(user_agent.encode("utf-8")).hexdigest()[:8]
    return f"{client_ip(request)}:{ua_hash}"


def email_identifier(email: str, request: Request) -> str:
    """Identifier scoped to one email address from one client."""
    return f"{email.lower()}:{client_identifier(request)}"

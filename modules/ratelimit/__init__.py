"""
Rate limiting module.

In-process fixed-window attempt counting for auth-sensitive and public
endpoints.

Public API:
- RateLimiter: check / enforce / reset / status / sweep
- RateLimitStore, InMemoryRateLimitStore: entry storage
- POLICIES, get_policy: named limits per endpoint class
- client_identifier, email_identifier: request keys
"""

from .models import RateLimitEntry, RateLimitResult, RateLimitPolicy
from .policies import POLICIES, get_policy
from .store import RateLimitStore, InMemoryRateLimitStore
from .service import (
    RateLimiter,
    run_periodic_sweep,
    client_ip,
    client_identifier,
    email_identifier,
)

__all__ = [
    "RateLimitEntry",
    "RateLimitResult",
    "RateLimitPolicy",
    "POLICIES",
    "get_policy",
    "RateLimitStore",
    "InMemoryRateLimitStore",
    "RateLimiter",
    "run_periodic_sweep",
    "client_ip",
    "client_identifier",
    "email_identifier",
]

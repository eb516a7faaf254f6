"""
Named rate-limit policies.

Each endpoint class gets its own (max_attempts, window) pair. Selecting a
policy is a plain lookup; the counting itself lives in RateLimiter.
"""

from .models import RateLimitPolicy

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

POLICIES: dict[str, RateLimitPolicy] = {
    policy.name: policy
    for policy in (
        # Very strict - authentication endpoints
        RateLimitPolicy(name="auth", max_attempts=5, window_ms=15 * MINUTE_MS),
        RateLimitPolicy(name="signup", max_attempts=3, window_ms=HOUR_MS),
        RateLimitPolicy(name="forgot_password", max_attempts=3, window_ms=HOUR_MS),
        RateLimitPolicy(name="magic_link", max_attempts=3, window_ms=15 * MINUTE_MS),
        # Moderate
        RateLimitPolicy(name="profile_update", max_attempts=20, window_ms=HOUR_MS),
        # Lenient
        RateLimitPolicy(name="score_submit", max_attempts=50, window_ms=MINUTE_MS),
        RateLimitPolicy(name="api", max_attempts=100, window_ms=MINUTE_MS),
        RateLimitPolicy(name="public", max_attempts=300, window_ms=MINUTE_MS),
    )
}


def get_policy(name: str) -> RateLimitPolicy:
    """
    Look up a policy by name.

    Raises:
        KeyError: If no policy has that name
    """
    return POLICIES[name]

"""
Sessions module.

Signed cookie sessions, CSRF protection and page access rules.

Public API:
- SessionCodec: create / parse / set_cookie / delete_cookie
- validate_session: freshness check against the user store
- generate_csrf_token, validate_csrf_token, validate_csrf_from_request
- classify_route, guard_decision: route guard rules
"""

from .models import Session, SessionValidation, RouteClass, GuardDecision
from .codec import SessionCodec
from .csrf import (
    CSRF_HEADER_NAME,
    generate_csrf_token,
    validate_csrf_token,
    validate_csrf_from_request,
)
from .service import validate_session
from .access import classify_route, guard_decision, login_redirect

__all__ = [
    "Session",
    "SessionValidation",
    "RouteClass",
    "GuardDecision",
    "SessionCodec",
    "CSRF_HEADER_NAME",
    "generate_csrf_token",
    "validate_csrf_token",
    "validate_csrf_from_request",
    "validate_session",
    "classify_route",
    "guard_decision",
    "login_redirect",
]

"""
Page access rules for the route guard.

Paths are classified by the longest matching prefix (on path segment
boundaries) across the static tables below. Anything unmatched is public.
"""

from typing import Optional
from urllib.parse import urlencode

from .models import GuardDecision, RouteClass, Session

LOGIN_PATH = "/login"
DEFAULT_AUTHENTICATED_PATH = "/dashboard"

PROTECTED_PREFIXES = (
    "/dashboard",
    "/profile",
    "/ship-designer",
    "/feedback",
    "/backlog",
    "/roadmap",
    "/alpha-testing",
)

ADMIN_PREFIXES = ("/admin",)

ROUTE_TABLE: dict[str, RouteClass] = {
    **{prefix: RouteClass.PROTECTED for prefix in PROTECTED_PREFIXES},
    **{prefix: RouteClass.ADMIN for prefix in ADMIN_PREFIXES},
}


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def classify_route(path: str) -> RouteClass:
    """Access class for a request path."""
    best: Optional[str] = None
    for prefix in ROUTE_TABLE:
        if _matches(path, prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    return ROUTE_TABLE[best] if best is not None else RouteClass.PUBLIC


def login_redirect(path: str) -> str:
    """Login URL that returns the user to path afterwards."""
    return f"{LOGIN_PATH}?{urlencode({'redirect': path})}"


def guard_decision(path: str, session: Optional[Session]) -> GuardDecision:
    """
    Decide whether a page request may proceed.

    Unauthenticated requests to protected pages go to the login page;
    authenticated users without staff capability are sent from admin
    pages to the dashboard instead of receiving an error.
    """
    route_class = classify_route(path)

    if route_class is RouteClass.PUBLIC:
        return GuardDecision(allow=True)

    if session is None:
        return GuardDecision(allow=False, redirect_to=login_redirect(path))

    if route_class is RouteClass.ADMIN and not session.role.is_staff:
        return GuardDecision(allow=False, redirect_to=DEFAULT_AUTHENTICATED_PATH)

    return GuardDecision(allow=True)

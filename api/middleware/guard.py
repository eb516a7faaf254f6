"""
Route guard middleware.

Runs before every request. Public paths pass straight through; protected
and admin pages need a valid session cookie, otherwise the browser is
redirected (to the login page, or from admin pages to the dashboard).
"""

import logging
import re

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from modules.sessions import RouteClass, classify_route, guard_decision

from ..dependencies import get_container

logger = logging.getLogger(__name__)

STATIC_PATH = re.compile(r"^/(_next/static|_next/image|favicon\.ico)|\.(svg|png|jpe?g|gif|webp|ico|mp4)$")


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirect unauthenticated or under-privileged page requests."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if STATIC_PATH.search(path) or classify_route(path) is RouteClass.PUBLIC:
            return await call_next(request)

        codec = get_container().session_codec
        decision = guard_decision(path, codec.from_request(request))
        if not decision.allow:
            logger.debug("Route guard redirecting %s to %s", path, decision.redirect_to)
            return RedirectResponse(decision.redirect_to, status_code=307)

        return await call_next(request)

"""
Session freshness checks.

A cookie that verifies cryptographically may still describe an account
that was deleted or disabled after the cookie was issued. validate_session
re-reads the user record so such sessions stop working.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .models import Session, SessionValidation

if TYPE_CHECKING:
    from modules.auth.interfaces import IUserStore

logger = logging.getLogger(__name__)

DISABLED_FLAGS = ("is_disabled", "banned")


async def validate_session(
    session: Optional[Session],
    user_store: "IUserStore",
) -> SessionValidation:
    """
    Re-validate a parsed session against the user store.

    Args:
        session: Parsed session, or None
        user_store: Source of live user records

    Returns:
        SessionValidation with the live user record when valid
    """
    if session is None:
        return SessionValidation(valid=False)

    try:
        user = await user_store.get_user_by_id(session.user_id)
    except Exception:
        logger.exception("Error validating session for user %s", session.user_id)
        return SessionValidation(valid=False)

    if not user:
        logger.info("Session refers to missing user %s", session.user_id)
        return SessionValidation(valid=False)

    if any(user.get(flag) for flag in DISABLED_FLAGS):
        logger.info("Session refers to disabled user %s", session.user_id)
        return SessionValidation(valid=False)

    return SessionValidation(valid=True, user=user)

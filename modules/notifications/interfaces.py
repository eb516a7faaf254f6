"""
Notifications module interface.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class IEmailService(Protocol):
    """
    Interface for transactional email.

    Every method returns False on failure instead of raising; a failed
    email must never fail the request that triggered it.
    """

    async def send_email(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        ...

    async def send_password_reset_email(self, email: str, token: str) -> bool:
        ...

    async def send_magic_link_email(self, email: str, token: str) -> bool:
        ...

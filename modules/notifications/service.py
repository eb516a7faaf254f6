"""
Resend email service.

Sends through the Resend REST API with httpx. Without an API key the
service runs in development mode and logs the message instead.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from shared.config import Settings

from .interfaces import IEmailService
from .templates import magic_link_email, password_reset_email

logger = logging.getLogger(__name__)


class EmailService(IEmailService):
    """Implementation of IEmailService over the Resend API."""

    RESEND_API_URL = "https://api.resend.com/emails"
    TIMEOUT_SECONDS = 10.0

    def __init__(self, settings: Settings):
        self._api_key = settings.resend_api_key
        self._from_email = settings.from_email
        self._site_url = settings.site_url.rstrip("/")
        self._site_name = settings.site_name
        self._reset_ttl = settings.password_reset_ttl
        self._magic_link_ttl = settings.magic_link_ttl

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send_email(self, to: str, subject: str, html: str, text: Optional[str] = None) -> bool:
        if not self.is_configured:
            logger.info(
                "Email not sent (Resend not configured)\nTo: %s\nSubject: %s\n\n%s",
                to,
                subject,
                text or html,
            )
            return True

        payload = {
            "from": self._from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                    timeout=self.TIMEOUT_SECONDS,
                )
                response.raise_for_status()
                message_id = response.json().get("id")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to send email to %s: %s", to, e)
            return False

        logger.info("Email sent: %s", message_id)
        return True

    async def send_password_reset_email(self, email: str, token: str) -> bool:
        url = f"{self._site_url}/reset-password?{urlencode({'token': token})}"
        message = password_reset_email(email, url, self._reset_ttl, self._site_name)
        return await self.send_email(message.to, message.subject, message.html, message.text)

    async def send_magic_link_email(self, email: str, token: str) -> bool:
        url = f"{self._site_url}/api/auth/magic-link/callback?{urlencode({'token': token})}"
        message = magic_link_email(email, url, self._magic_link_ttl, self._site_name)
        return await self.send_email(message.to, message.subject, message.html, message.text)

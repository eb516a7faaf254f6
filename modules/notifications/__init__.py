"""
Notifications module.

Outbound transactional email through the Resend HTTP API.

Public API:
- IEmailService: Interface for sending email
- EmailService: Resend implementation (logs instead of sending when unconfigured)
- EmailMessage: Message model
"""

from .interfaces import IEmailService
from .models import EmailMessage
from .service import EmailService

__all__ = [
    "IEmailService",
    "EmailMessage",
    "EmailService",
]

"""
Notification data models.
"""

from typing import Optional
from pydantic import BaseModel


class EmailMessage(BaseModel):
    """A rendered email ready to send."""

    to: str
    subject: str
    html: str
    text: Optional[str] = None

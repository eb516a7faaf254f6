"""
Community module.

Backlog items (feature requests and bug reports) and player feedback,
each with one vote per user per item.
"""

from .models import BacklogType, FeedbackType, FeedbackSource, NewBacklogItem, NewFeedback
from .exceptions import DuplicateVoteError

__all__ = [
    "BacklogType",
    "FeedbackType",
    "FeedbackSource",
    "NewBacklogItem",
    "NewFeedback",
    "DuplicateVoteError",
]

"""
Community module exceptions.
"""

from shared.exceptions import ConflictError


class DuplicateVoteError(ConflictError):
    """Raised when a user votes twice on the same item."""

    def __init__(self, item_kind: str, item_id: str):
        super().__init__(
            f"You have already voted on this {item_kind}",
            code="DUPLICATE_VOTE",
            details={"item_id": item_id},
        )

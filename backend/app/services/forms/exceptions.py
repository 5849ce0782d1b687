"""Form service exceptions."""


class FormError(Exception):
    """Base exception for form operations."""


class FormNotFound(FormError):
    """Raised when a form does not exist or is not visible to the caller."""


class BlockNotFound(FormError):
    """Raised when a block uuid does not belong to the form."""

    def __init__(self, block_uuid: str) -> None:
        self.block_uuid = block_uuid
        super().__init__(f"Block not found: {block_uuid}")


class SessionNotFound(FormError):
    """Raised when a session token does not belong to the form."""


class SessionAlreadyCompleted(FormError):
    """Raised when answers are recorded against a completed session."""


class InvalidTemplate(FormError):
    """Raised when a form template cannot be applied."""

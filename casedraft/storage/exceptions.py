class StoreError(Exception):
    """Raised when the local store cannot be read or written."""


class RecordNotFoundError(StoreError):
    """Raised when a stored file record does not exist."""


class InvalidStatusTransitionError(StoreError):
    """Raised when a status update would move a record backwards in its lifecycle."""

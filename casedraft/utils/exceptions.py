class DeadlineExceededError(Exception):
    """Raised when a bounded call does not finish before its deadline."""

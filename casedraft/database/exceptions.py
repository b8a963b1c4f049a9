class RepositoryError(Exception):
    """Raised for invalid repository usage, such as an unknown table or column."""


class RowNotFoundError(RepositoryError):
    """Raised when an update or delete targets a row that does not exist."""

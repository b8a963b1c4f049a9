class ExtractionError(Exception):
    """Base exception for text extraction failures."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no extraction route can read the file."""

class CorpusLoadError(Exception):
    """Raised when the sample-letter corpus cannot be read."""

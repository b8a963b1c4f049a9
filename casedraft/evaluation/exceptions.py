class GenerationError(Exception):
    """Raised when the text-generation service fails."""


class GenerationNetworkError(GenerationError):
    """Raised when the generation call fails due to network/infrastructure issues."""


class GenerationResponseError(GenerationError):
    """Raised when the generation service answers with a non-2xx status or an error payload."""


class CredentialParseError(Exception):
    """Raised when a generation response cannot be read as a credential record."""

from abc import ABC, abstractmethod


class BaseGenerationClient(ABC):
    """Contract for text-generation service clients.

    Implementations treat the service as a pure function of
    (instruction, context) -> text.
    """

    @abstractmethod
    def generate(
        self,
        *,
        document_type: str,
        document_name: str,
        document_text: str,
        prompt: str,
    ) -> str:
        """Return the generated text (the service's ``summary`` field).

        Raises:
            GenerationNetworkError: on transport failures or timeouts.
            GenerationResponseError: on non-2xx answers or an ``error`` field.
        """

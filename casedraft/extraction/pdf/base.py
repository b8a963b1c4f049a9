from abc import ABC, abstractmethod

from casedraft.extraction.models import PdfContent


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> PdfContent:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            PdfContent with the joined page text, page count and parser info.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """

import io

import pdfplumber

from casedraft.extraction.models import PdfContent
from casedraft.extraction.pdf.base import BasePdfExtractor
from casedraft.extraction.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
                info = {str(k): str(v) for k, v in (pdf.metadata or {}).items()}
            return PdfContent(
                text="\n".join(pages).strip(),
                page_count=len(pages),
                parser="pdfplumber",
                info=info,
            )
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc

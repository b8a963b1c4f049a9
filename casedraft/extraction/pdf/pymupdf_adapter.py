import pymupdf

from casedraft.extraction.models import PdfContent
from casedraft.extraction.pdf.base import BasePdfExtractor
from casedraft.extraction.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> PdfContent:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
                info = {k: v for k, v in (doc.metadata or {}).items() if v}
            return PdfContent(
                text="\n".join(pages).strip(),
                page_count=len(pages),
                parser="pymupdf",
                info=info,
            )
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc

import io
import warnings

from docx import Document

from casedraft.extraction.exceptions import ExtractionError


class DocxReader:
    """Reads raw text from DOCX files using python-docx. Formatting is dropped."""

    def read(self, file_bytes: bytes) -> tuple[str, list[str]]:
        """Return (text, warnings) for a DOCX payload.

        Paragraph text comes first, then table rows with cells separated by tabs.

        Raises:
            ExtractionError: if the payload is not a readable DOCX package.
        """
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                document = Document(io.BytesIO(file_bytes))
            except Exception as exc:
                raise ExtractionError(f"python-docx could not open document: {exc}") from exc

            parts = [p.text for p in document.paragraphs if p.text.strip()]
            for table in document.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells]
                    if any(cells):
                        parts.append("\t".join(cells))

        messages = [str(w.message) for w in caught]
        return "\n".join(parts).strip(), messages

"""Dispatch of uploaded file bytes to a format-specific extraction route."""

from pathlib import Path
from typing import IO, Union

from casedraft.config.settings import Settings
from casedraft.extraction.detector import detect_file_type
from casedraft.extraction.docx_reader import DocxReader
from casedraft.extraction.exceptions import ExtractionError
from casedraft.extraction.html_reader import HtmlReader
from casedraft.extraction.models import ExtractedDocument, SourceType
from casedraft.extraction.ocr_reader import OcrReader
from casedraft.extraction.pdf.base import BasePdfExtractor
from casedraft.extraction.pdf.factory import PdfExtractorFactory
from casedraft.logging.logger import Log

FileInput = Union[bytes, bytearray, memoryview, IO[bytes]]

_DOCX_HINTS = ("docx", "doc", "word")
_IMAGE_HINTS = ("image", "jpg", "jpeg", "png", "bmp", "tiff")
_HTML_HINTS = ("html", "htm")
_TEXT_HINTS = ("txt", "text")


def read_bytes(file: FileInput) -> bytes:
    """Accept an in-memory buffer or a readable stream and return its bytes."""
    if isinstance(file, (bytes, bytearray, memoryview)):
        return bytes(file)
    getvalue = getattr(file, "getvalue", None)
    if callable(getvalue):
        return bytes(getvalue())
    read = getattr(file, "read", None)
    if callable(read):
        return bytes(read())
    raise TypeError(f"Unsupported file input: {type(file).__name__}")


class TextExtractor:
    """Extracts text from PDF, DOCX, image, HTML and plain text files.

    Every route isolates its own failures: a failed route yields an
    ExtractedDocument with empty text and an error message instead of raising.
    """

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        docx_reader: DocxReader | None = None,
        ocr_reader: OcrReader | None = None,
        html_reader: HtmlReader | None = None,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._docx_reader = docx_reader or DocxReader()
        self._ocr_reader = ocr_reader or OcrReader()
        self._html_reader = html_reader or HtmlReader()

    def extract_text(
        self,
        file: FileInput,
        declared_type: str = "",
        file_name: str | None = None,
    ) -> ExtractedDocument:
        data = read_bytes(file)
        kind = self._resolve_type(data, declared_type, file_name)
        Log.info(f"Extracting text from {kind} file: {file_name or 'unnamed'}")

        if "pdf" in kind:
            return self.extract_from_pdf(data)
        if any(hint in kind for hint in _DOCX_HINTS):
            return self.extract_from_docx(data)
        if any(hint in kind for hint in _IMAGE_HINTS):
            return self.extract_from_image(data)
        if any(hint in kind for hint in _HTML_HINTS):
            return self.extract_from_html(data)
        if any(hint in kind for hint in _TEXT_HINTS):
            return self.extract_from_text(data)
        return self._extract_unknown(data, kind)

    @staticmethod
    def _resolve_type(data: bytes, declared_type: str, file_name: str | None) -> str:
        kind = (declared_type or "").strip().lower()
        if kind:
            return kind
        if file_name and Path(file_name).suffix:
            return Path(file_name).suffix.lstrip(".").lower()
        return detect_file_type(data)

    def _extract_unknown(self, data: bytes, kind: str) -> ExtractedDocument:
        Log.warning(f"Unknown file type '{kind}', attempting PDF then plain text")
        result = self.extract_from_pdf(data)
        if result.ok:
            return result
        result = self.extract_from_text(data)
        if result.ok:
            return result
        return ExtractedDocument.failed(
            SourceType.TEXT, f"Failed to extract text: Unsupported file type: {kind}"
        )

    def extract_from_pdf(self, data: bytes) -> ExtractedDocument:
        try:
            content = self._pdf_extractor.extract(data)
        except ExtractionError as exc:
            Log.error(f"Error extracting text from PDF: {exc}")
            return ExtractedDocument.failed(
                SourceType.PDF, f"Failed to extract text from PDF: {exc}"
            )
        return ExtractedDocument(
            text=content.text,
            source_type=SourceType.PDF,
            metadata={
                "page_count": content.page_count,
                "parser": content.parser,
                "info": content.info,
            },
        )

    def extract_from_docx(self, data: bytes) -> ExtractedDocument:
        try:
            text, messages = self._docx_reader.read(data)
        except ExtractionError as exc:
            Log.error(f"Error extracting text from DOCX: {exc}")
            return ExtractedDocument.failed(
                SourceType.DOCX, f"Failed to extract text from DOCX: {exc}"
            )
        return ExtractedDocument(
            text=text,
            source_type=SourceType.DOCX,
            metadata={"messages": messages},
        )

    def extract_from_image(self, data: bytes) -> ExtractedDocument:
        try:
            text, confidence, word_count = self._ocr_reader.read(data)
        except ExtractionError as exc:
            Log.error(f"Error extracting text from image: {exc}")
            return ExtractedDocument.failed(
                SourceType.IMAGE, f"Failed to extract text from image: {exc}"
            )
        if confidence < 60:
            Log.info(f"Low OCR confidence: {confidence}")
        return ExtractedDocument(
            text=text,
            source_type=SourceType.IMAGE,
            metadata={
                "confidence": confidence,
                "word_count": word_count,
                "has_text": bool(text),
            },
        )

    def extract_from_html(self, data: bytes) -> ExtractedDocument:
        try:
            content = self._html_reader.read(data.decode("utf-8", errors="replace"))
        except Exception as exc:
            Log.error(f"Error extracting text from HTML: {exc}")
            return ExtractedDocument.failed(
                SourceType.HTML, f"Failed to extract text from HTML: {exc}"
            )
        text = "\n\n".join(part for part in (content.title, content.body) if part)
        return ExtractedDocument(
            text=text,
            source_type=SourceType.HTML,
            metadata={
                "title": content.title,
                "author": content.author,
                "date": content.date,
                "description": content.description,
            },
        )

    def extract_from_text(self, data: bytes) -> ExtractedDocument:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            Log.error(f"Error extracting text from text file: {exc}")
            return ExtractedDocument.failed(
                SourceType.TEXT, f"Failed to extract text from text file: {exc}"
            )
        return ExtractedDocument(
            text=text,
            source_type=SourceType.TEXT,
            metadata={"size": len(text)},
        )


def build_text_extractor(settings: Settings) -> TextExtractor:
    """Build a TextExtractor with the configured PDF engine and OCR settings."""
    return TextExtractor(
        pdf_extractor=PdfExtractorFactory.create(settings),
        ocr_reader=OcrReader(
            languages=settings.ocr_languages,
            tesseract_cmd=settings.tesseract_cmd,
        ),
    )

import io
from unittest.mock import MagicMock

import pytest
from docx import Document

from casedraft.extraction.detector import detect_file_type
from casedraft.extraction.exceptions import ExtractionError
from casedraft.extraction.models import ExtractedDocument, PdfContent, SourceType
from casedraft.extraction.pdf.exceptions import PdfExtractionError
from casedraft.extraction.pdf.pdfplumber_adapter import PdfPlumberAdapter
from casedraft.extraction.text_extractor import TextExtractor, read_bytes


def _make_extractor(**overrides: MagicMock) -> TextExtractor:
    pdf = overrides.get("pdf_extractor", MagicMock())
    return TextExtractor(
        pdf_extractor=pdf,
        docx_reader=overrides.get("docx_reader", MagicMock()),
        ocr_reader=overrides.get("ocr_reader", MagicMock()),
        html_reader=overrides.get("html_reader", MagicMock()),
    )


def _docx_bytes(*paragraphs: str) -> bytes:
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


class TestReadBytes:
    def test_accepts_bytes(self) -> None:
        assert read_bytes(b"abc") == b"abc"

    def test_accepts_bytearray(self) -> None:
        assert read_bytes(bytearray(b"abc")) == b"abc"

    def test_accepts_stream(self) -> None:
        assert read_bytes(io.BytesIO(b"stream")) == b"stream"

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="Unsupported file input"):
            read_bytes(123)  # type: ignore[arg-type]


class TestDetectFileType:
    def test_pdf_signature(self) -> None:
        assert detect_file_type(b"%PDF-1.7 rest") == "pdf"

    def test_zip_signature_is_docx(self) -> None:
        assert detect_file_type(b"PK\x03\x04rest") == "docx"

    def test_png_signature(self) -> None:
        assert detect_file_type(b"\x89PNG\r\n\x1a\nrest") == "png"

    def test_jpeg_signature(self) -> None:
        assert detect_file_type(b"\xff\xd8\xff\xe0") == "jpeg"

    def test_unknown_falls_back_to_text(self) -> None:
        assert detect_file_type(b"plain words") == "txt"


class TestRouting:
    def test_declared_pdf_goes_to_pdf_extractor(self) -> None:
        pdf = MagicMock()
        pdf.extract.return_value = PdfContent(text="pdf text", page_count=2, parser="pdfplumber")
        extractor = _make_extractor(pdf_extractor=pdf)

        result = extractor.extract_text(b"data", declared_type="application/pdf")

        assert result.text == "pdf text"
        assert result.source_type == SourceType.PDF
        assert result.metadata["page_count"] == 2
        pdf.extract.assert_called_once_with(b"data")

    def test_file_name_suffix_selects_docx(self) -> None:
        docx = MagicMock()
        docx.read.return_value = ("docx text", [])
        extractor = _make_extractor(docx_reader=docx)

        result = extractor.extract_text(b"data", file_name="letter.docx")

        assert result.text == "docx text"
        assert result.source_type == SourceType.DOCX

    def test_image_type_goes_to_ocr(self) -> None:
        ocr = MagicMock()
        ocr.read.return_value = ("scanned", 91.5, 1)
        extractor = _make_extractor(ocr_reader=ocr)

        result = extractor.extract_text(b"data", declared_type="image/png")

        assert result.text == "scanned"
        assert result.source_type == SourceType.IMAGE
        assert result.metadata == {"confidence": 91.5, "word_count": 1, "has_text": True}

    def test_magic_bytes_used_when_no_hint(self) -> None:
        pdf = MagicMock()
        pdf.extract.return_value = PdfContent(text="sniffed", page_count=1, parser="pymupdf")
        extractor = _make_extractor(pdf_extractor=pdf)

        result = extractor.extract_text(b"%PDF-1.4 body")

        assert result.text == "sniffed"

    def test_plain_text_is_decoded(self) -> None:
        extractor = _make_extractor()

        result = extractor.extract_text(b"hello there", declared_type="text/plain")

        assert result.text == "hello there"
        assert result.metadata == {"size": 11}

    def test_unknown_type_falls_back_to_text(self) -> None:
        pdf = MagicMock()
        pdf.extract.side_effect = PdfExtractionError("not a pdf")
        extractor = _make_extractor(pdf_extractor=pdf)

        result = extractor.extract_text(b"just words", declared_type="application/x-custom")

        assert result.ok
        assert result.text == "just words"
        assert result.source_type == SourceType.TEXT

    def test_unknown_type_reports_error_when_every_route_fails(self) -> None:
        pdf = MagicMock()
        pdf.extract.side_effect = PdfExtractionError("not a pdf")
        extractor = _make_extractor(pdf_extractor=pdf)

        result = extractor.extract_text(b"\xff\xfe\x00bad", declared_type="application/x-custom")

        assert not result.ok
        assert result.text == ""
        assert "Unsupported file type" in (result.error or "")


class TestRouteFailures:
    def test_pdf_failure_yields_error_document(self) -> None:
        pdf = MagicMock()
        pdf.extract.side_effect = PdfExtractionError("broken xref")
        extractor = _make_extractor(pdf_extractor=pdf)

        result = extractor.extract_text(b"data", declared_type="pdf")

        assert result.text == ""
        assert result.error == "Failed to extract text from PDF: broken xref"

    def test_ocr_failure_yields_error_document(self) -> None:
        ocr = MagicMock()
        ocr.read.side_effect = ExtractionError("tesseract missing")
        extractor = _make_extractor(ocr_reader=ocr)

        result = extractor.extract_text(b"data", declared_type="jpeg")

        assert not result.ok
        assert "tesseract missing" in (result.error or "")

    def test_error_document_never_carries_text(self) -> None:
        doc = ExtractedDocument(text="leftover", source_type=SourceType.PDF, error="boom")
        assert doc.text == ""


class TestRealReaders:
    def test_reads_real_pdf(self, sample_pdf_bytes: bytes) -> None:
        extractor = TextExtractor(pdf_extractor=PdfPlumberAdapter())

        result = extractor.extract_text(sample_pdf_bytes, file_name="upload.pdf")

        assert "Hello PDF World" in result.text
        assert result.metadata["parser"] == "pdfplumber"

    def test_reads_real_docx(self) -> None:
        extractor = TextExtractor(pdf_extractor=PdfPlumberAdapter())
        data = _docx_bytes("Bachelor of Science", "Awarded 2019")

        result = extractor.extract_text(data, declared_type="docx")

        assert result.text == "Bachelor of Science\nAwarded 2019"
        assert result.source_type == SourceType.DOCX

    def test_invalid_docx_reports_error(self) -> None:
        extractor = TextExtractor(pdf_extractor=PdfPlumberAdapter())

        result = extractor.extract_text(b"not a zip", declared_type="docx")

        assert not result.ok
        assert result.error is not None
        assert result.error.startswith("Failed to extract text from DOCX")

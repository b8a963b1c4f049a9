import pytest

from casedraft.extraction.pdf.exceptions import PdfExtractionError
from casedraft.extraction.pdf.pdfplumber_adapter import PdfPlumberAdapter
from casedraft.extraction.pdf.pymupdf_adapter import PyMuPdfAdapter


@pytest.fixture(params=[PdfPlumberAdapter, PyMuPdfAdapter], ids=["pdfplumber", "pymupdf"])
def adapter(request: pytest.FixtureRequest):  # type: ignore[no-untyped-def]
    return request.param()


class TestPdfAdapters:
    def test_extracts_text(self, adapter, sample_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        content = adapter.extract(sample_pdf_bytes)
        assert "Hello PDF World" in content.text
        assert content.page_count == 1

    def test_extracts_all_pages(self, adapter, multi_page_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        content = adapter.extract(multi_page_pdf_bytes)
        assert "Page one content" in content.text
        assert "Page two content" in content.text
        assert content.page_count == 2

    def test_blank_page_gives_empty_text(self, adapter, empty_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        content = adapter.extract(empty_pdf_bytes)
        assert content.text == ""

    def test_records_parser_name(self, adapter, sample_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        content = adapter.extract(sample_pdf_bytes)
        assert content.parser in ("pdfplumber", "pymupdf")

    def test_raises_on_invalid_bytes(self, adapter) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(PdfExtractionError):
            adapter.extract(b"not a pdf at all")

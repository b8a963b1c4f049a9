from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SourceType(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"
    HTML = "html"
    TEXT = "text"


@dataclass(frozen=True)
class ExtractedDocument:
    """Text pulled out of an uploaded file, plus format-specific metadata.

    A document carrying an error always has empty text.
    """

    text: str
    source_type: SourceType
    metadata: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error and self.text:
            object.__setattr__(self, "text", "")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, source_type: SourceType, error: str) -> "ExtractedDocument":
        return cls(text="", source_type=source_type, error=error)


@dataclass(frozen=True)
class PdfContent:
    """Output of a PDF extractor adapter."""

    text: str
    page_count: int
    parser: str
    info: dict[str, Any] = field(default_factory=dict)

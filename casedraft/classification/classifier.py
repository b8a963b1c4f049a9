"""Ordered, rule-based document categorisation.

Rules are evaluated top to bottom against lower-cased text; the first match
wins. Transcript rules come before diploma rules because transcripts usually
mention the degree as well.
"""

import re
from typing import ClassVar

from casedraft.classification.models import DocumentCategory

Rule = tuple[DocumentCategory, tuple[re.Pattern[str], ...]]


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


class DocumentClassifier:
    """Assigns a DocumentCategory to extracted text. Pure and total."""

    RULES: ClassVar[tuple[Rule, ...]] = (
        (
            DocumentCategory.TRANSCRIPT,
            _compile(
                r"course(?:s)?\s+(?:list|catalog|schedule)",
                r"grade(?:s)?\s+(?:received|earned|awarded)",
                r"credit(?:s)?\s+(?:hours?|earned|attempted)",
                r"transcript\s+of\s+(?:records?|academic)",
                r"academic\s+transcript",
                r"\b(?:semester|quarter|trimester)\b",
                r"\bgpa\b|grade\s+point\s+average",
                r"academic\s+record",
                r"course\s+(?:number|code)",
                r"department\s+code",
            ),
        ),
        (
            DocumentCategory.DIPLOMA,
            _compile(
                r"\bdiploma\b",
                r"degree\s+of\s+\w+",
                r"\b(?:bachelor|master|doctor)\s+of\s+\w+",
                r"has\s+been\s+conferred|confers\s+upon|conferred\s+upon",
                r"rights,?\s+(?:and\s+)?privileges",
            ),
        ),
        (
            DocumentCategory.RECOMMENDATION_LETTER,
            _compile(
                r"letter\s+of\s+(?:recommendation|reference|support)",
                r"\bi\s+(?:highly\s+|strongly\s+|wholeheartedly\s+)?recommend\b",
                r"to\s+whom\s+it\s+may\s+concern",
                r"recommendation\s+(?:letter|for)",
            ),
        ),
        # Certificate headings often say "awarded to"; match them before the award rules.
        (
            DocumentCategory.CERTIFICATE,
            _compile(
                r"\bcertificate\s+of\s+(?:achievement|completion|participation|excellence|merit|appreciation|recognition|attendance)\b",
                r"\bthis\s+is\s+to\s+certify\b",
            ),
        ),
        (
            DocumentCategory.AWARD,
            _compile(
                r"\baward(?:ed)?\s+(?:to|for)\b",
                r"\b(?:prize|medal|laureate|winner)\b",
                r"\brecipient\s+of\b",
                r"\bhonou?red\s+with\b",
                r"\baward\b",
            ),
        ),
        (
            DocumentCategory.PUBLICATION,
            _compile(
                r"\babstract\b",
                r"\bdoi\s*:|\bdoi\.org/",
                r"\bjournal\s+of\b",
                r"\bproceedings\s+of\b",
                r"\bet\s+al\.?",
                r"\bissn\b|\bvol(?:ume)?\.?\s*\d+",
            ),
        ),
        (
            DocumentCategory.CERTIFICATE,
            _compile(
                r"\bcertificate\b",
                r"\bcertifies\s+that\b|\bthis\s+is\s+to\s+certify\b",
                r"\bcertification\b",
                r"successfully\s+completed",
            ),
        ),
    )

    FILENAME_HINTS: ClassVar[tuple[tuple[DocumentCategory, tuple[str, ...]], ...]] = (
        (DocumentCategory.TRANSCRIPT, ("transcript", "marksheet", "grades")),
        (DocumentCategory.DIPLOMA, ("diploma", "degree")),
        (DocumentCategory.RECOMMENDATION_LETTER, ("recommendation", "reference")),
        (DocumentCategory.AWARD, ("award", "prize")),
        (DocumentCategory.PUBLICATION, ("publication", "article", "paper")),
        (DocumentCategory.CERTIFICATE, ("certificate", "certification")),
    )

    def classify(self, text: str, file_name: str | None = None) -> DocumentCategory:
        """Return the first category whose rule matches the text.

        The file name is only consulted when no text rule matches.
        """
        lowered = (text or "").lower()
        for category, patterns in self.RULES:
            if any(p.search(lowered) for p in patterns):
                return category
        if file_name:
            return self._classify_file_name(file_name)
        return DocumentCategory.GENERIC

    def _classify_file_name(self, file_name: str) -> DocumentCategory:
        lowered = file_name.lower()
        for category, hints in self.FILENAME_HINTS:
            if any(hint in lowered for hint in hints):
                return category
        return DocumentCategory.GENERIC


_default = DocumentClassifier()


def classify(text: str, file_name: str | None = None) -> DocumentCategory:
    """Module-level shortcut using the default rule set."""
    return _default.classify(text, file_name)

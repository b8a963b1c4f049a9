"""Pattern-based extraction of structural facts used by the authenticity heuristics."""

import re

from casedraft.classification.classifier import DocumentClassifier
from casedraft.classification.models import DocumentCategory
from casedraft.verification.models import DocumentFacts

SHORT_TEXT_CHARS = 200

_WORD = r"[A-Z][\w&'.-]*"

INSTITUTION_PATTERNS = tuple(
    re.compile(p)
    for p in (
        rf"(?i:university\s+of)(?:[ \t]+{_WORD})+",
        rf"(?:{_WORD}[ \t]+)+(?i:university)\b",
        rf"(?:{_WORD}[ \t]+)+(?i:college)\b",
        rf"(?i:college\s+of)(?:[ \t]+{_WORD})+",
        rf"(?i:institute\s+of)(?:[ \t]+{_WORD})+",
        rf"(?:{_WORD}[ \t]+)+(?i:institute)\b",
        rf"(?i:school\s+of)(?:[ \t]+{_WORD})+",
    )
)

RECIPIENT_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"this certifies that\s+([a-z .]+)",
        r"awarded to\s+([a-z .]+)",
        r"presented to\s+([a-z .]+)",
        r"student:[ \t]*([a-z .]+)",
        r"name:[ \t]*([a-z .]+)",
    )
)
_ALL_CAPS_NAME = re.compile(r"\n\s*([A-Z][A-Z .]+?)[ \t]*\n")

DATE_PATTERNS = (
    re.compile(r"\bdated?\s*:?\s*([a-z]+\s+\d{1,2},?\s*\d{4})", re.IGNORECASE),
    re.compile(r"\bissued(?:\s+on)?\s*:?\s*([a-z]+\s+\d{1,2},?\s*\d{4})", re.IGNORECASE),
    re.compile(r"\bawarded(?:\s+on)?\s*:?\s*([a-z]+\s+\d{1,2},?\s*\d{4})", re.IGNORECASE),
    re.compile(r"\bon\s*:?\s*([a-z]+\s+\d{1,2},?\s*\d{4})", re.IGNORECASE),
    re.compile(r"(\d{1,2}[/.-]\d{1,2}[/.-]\d{2,4})"),
    re.compile(r"(\d{4}[/.-]\d{1,2}[/.-]\d{1,2})"),
)

DEGREE_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"degree of\s+[a-z ]+",
        r"bachelor of [a-z ]+",
        r"master of [a-z ]+",
        r"doctor of [a-z ]+",
        r"[a-z ]+ specialization",
        r"certificate in [a-z ]+",
    )
)

_SIGNATURE_KEYWORDS = ("signature", "signed")
_SIGNATURE_TITLES = ("Dean", "President", "Director", "Registrar", "Rector", "Chancellor")

# category -> (expected vocabulary, flag when none of it is present)
_STANDARD_PHRASING: dict[DocumentCategory, tuple[tuple[str, ...], str]] = {
    DocumentCategory.DIPLOMA: (("honors", "rights", "privileges"), "Missing standard diploma phrasing"),
    DocumentCategory.TRANSCRIPT: (("grade", "gpa", "credit"), "Missing standard transcript elements"),
    DocumentCategory.CERTIFICATE: (
        ("completed", "achievement", "awarded"),
        "Missing standard certificate phrasing",
    ),
}

_GRADE_RE = re.compile(r"(?:^|\s)[A-F][+-]?(?=\s|$)", re.MULTILINE)
_STUDENT_ID_RE = re.compile(r"student id|id number|id:", re.IGNORECASE)


def is_likely_screenshot(file_name: str) -> bool:
    lowered = file_name.lower()
    return any(marker in lowered for marker in ("screenshot", "screen shot", "capture"))


def first_match(patterns: tuple[re.Pattern[str], ...], text: str, group: int = 0) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(group):
            return match.group(group).strip()
    return ""


def extract_document_facts(
    text: str,
    file_name: str,
    classifier: DocumentClassifier | None = None,
) -> DocumentFacts:
    """Find institution, recipient, date, degree and signature markers in text.

    Each missing structural marker and each absent category-specific
    phrasing counts as one suspicious pattern with a matching flag.
    """
    category = (classifier or DocumentClassifier()).classify(text, file_name)
    lowered = text.lower()
    flags: list[str] = []

    institution = first_match(INSTITUTION_PATTERNS, text)
    recipient = first_match(RECIPIENT_PATTERNS, text, group=1)
    if not recipient:
        match = _ALL_CAPS_NAME.search(text)
        recipient = match.group(1).strip() if match else ""
    issue_date = first_match(DATE_PATTERNS, text, group=1)
    degree = first_match(DEGREE_PATTERNS, text)
    has_signature = any(k in lowered for k in _SIGNATURE_KEYWORDS) or any(
        title in text for title in _SIGNATURE_TITLES
    )

    if len(text) < SHORT_TEXT_CHARS:
        flags.append("Document text is unusually short")
    if not has_signature:
        flags.append("No signature detected on document")
    if not issue_date:
        flags.append("No issue date found on document")
    if not institution:
        flags.append("No clear issuing institution identified")

    phrasing = _STANDARD_PHRASING.get(category)
    if phrasing is not None:
        vocabulary, flag = phrasing
        if not any(word in lowered for word in vocabulary):
            flags.append(flag)
    if category is DocumentCategory.DIPLOMA and not degree:
        flags.append("No degree specification found")

    lowered_name = file_name.lower()
    if "color" in lowered_name or "unusual" in lowered_name:
        flags.append("Unusual color patterns detected")

    suspicious = len(flags)

    # Informational only: these do not count towards the penalty.
    if "transcript" in lowered_name:
        if not _GRADE_RE.search(text):
            flags.append("No grades found in transcript")
        if not _STUDENT_ID_RE.search(text):
            flags.append("No student ID found in transcript")

    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return DocumentFacts(
        category=category.value,
        institution_name=institution,
        recipient_name=recipient,
        issue_date=issue_date,
        degree_or_certification=degree,
        has_signature=has_signature,
        suspicious_patterns=suspicious,
        specific_flags=flags,
        key_elements=lines[:5],
    )

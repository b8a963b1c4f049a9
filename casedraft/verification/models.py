from dataclasses import dataclass, field
from enum import Enum


class Verdict(str, Enum):
    LIKELY_AUTHENTIC = "Likely Authentic"
    POSSIBLY_FAKE = "Possibly Fake"
    INCONCLUSIVE = "Inconclusive"


@dataclass(frozen=True)
class MetadataAnalysis:
    creation_date: str | None = None
    modification_date: str | None = None
    software: str = "Unknown"
    device: str = "Unknown"
    suspicious: bool = False


@dataclass(frozen=True)
class ExtractedInfo:
    """What the heuristics found in the document text."""

    document_type: str
    institution_name: str = "Unknown"
    recipient_name: str = "Unknown"
    issue_date: str = "Not found"
    degree_or_certification: str = "Not specified"
    key_elements: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentFacts:
    """Structural markers found in document text, plus suspicious-pattern findings."""

    category: str
    institution_name: str = ""
    recipient_name: str = ""
    issue_date: str = ""
    degree_or_certification: str = ""
    has_signature: bool = False
    suspicious_patterns: int = 0
    specific_flags: list[str] = field(default_factory=list)
    key_elements: list[str] = field(default_factory=list)

    @property
    def has_date(self) -> bool:
        return bool(self.issue_date)

    @property
    def has_institution_name(self) -> bool:
        return bool(self.institution_name)


@dataclass(frozen=True)
class VerificationVerdict:
    verdict: Verdict
    confidence_score: int
    flags: list[str] = field(default_factory=list)
    suggested_action: str = ""
    metadata_analysis: MetadataAnalysis | None = None
    extracted_info: ExtractedInfo | None = None
    email_template: str | None = None
    narrative: str | None = None
    fallback: bool = False

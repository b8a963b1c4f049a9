"""Rule-based authenticity scoring for credential documents."""

from collections.abc import Mapping
from datetime import date

from casedraft.classification.classifier import DocumentClassifier
from casedraft.logging.logger import Log
from casedraft.verification.document_facts import extract_document_facts, is_likely_screenshot
from casedraft.verification.models import (
    DocumentFacts,
    ExtractedInfo,
    MetadataAnalysis,
    Verdict,
    VerificationVerdict,
)

MIN_TEXT_CHARS = 50
BASELINE_CONFIDENCE = 85
MIN_CONFIDENCE = 40
MAX_CONFIDENCE = 99

SCREENSHOT_PENALTY = 15
NO_SIGNATURE_PENALTY = 10
NO_DATE_PENALTY = 8
NO_INSTITUTION_PENALTY = 12
SUSPICIOUS_PATTERN_PENALTY = 5

FALLBACK_FLAGS = (
    "FALLBACK MODE: AI analysis unavailable",
    "Document requires manual verification",
)

_CREATION_KEYS = ("CreationDate", "creationDate")
_MODIFICATION_KEYS = ("ModDate", "modDate")
_SOFTWARE_KEYS = ("Producer", "producer", "Creator", "creator")


def verdict_for_score(score: int) -> Verdict:
    if score > 85:
        return Verdict.LIKELY_AUTHENTIC
    if score > 70:
        return Verdict.INCONCLUSIVE
    return Verdict.POSSIBLY_FAKE


def generate_verification_email(
    document_name: str,
    document_type: str,
    institution: str | None = None,
    today: date | None = None,
) -> str:
    """Draft a registrar email asking the institution to confirm the document."""
    institution_name = institution or "the issuing institution"
    issued = (today or date.today()).isoformat()
    return (
        f"Subject: Verification Request for Document {document_name}\n\n"
        f"Date: {issued}\n\n"
        f"Dear {institution_name} Registrar,\n\n"
        "I am writing to request verification of the attached document that was submitted "
        "as part of an application process. The document appears to be issued by your institution.\n\n"
        "Document Details:\n"
        f"- Document Name: {document_name}\n"
        f"- Document Type: {document_type}\n"
        "- Purported Issue Date: [Date on Document]\n\n"
        "Could you please confirm if this document was issued by your institution to the "
        "individual named in the document? Any information you can provide regarding its "
        "authenticity would be greatly appreciated.\n\n"
        "Thank you for your assistance in this matter.\n\n"
        "Sincerely,\n"
        "[Your Name]\n"
        "[Your Position]\n"
        "[Contact Information]"
    )


def insufficient_text_verdict() -> VerificationVerdict:
    return VerificationVerdict(
        verdict=Verdict.INCONCLUSIVE,
        confidence_score=0,
        flags=["Insufficient text extracted from document"],
        suggested_action="Please upload a clearer image or a different document format",
    )


def fallback_verdict(file_name: str, document_type: str = "Unknown") -> VerificationVerdict:
    """Degraded verdict for when analysis fails or times out.

    The score depends on the file name only, so repeated calls agree.
    """
    score = sum(ord(ch) for ch in file_name) % 30 + 70
    today = date.today().isoformat()
    return VerificationVerdict(
        verdict=verdict_for_score(score),
        confidence_score=score,
        flags=list(FALLBACK_FLAGS),
        suggested_action="Contact the issuing institution to verify this document",
        metadata_analysis=MetadataAnalysis(creation_date=today, modification_date=today),
        email_template=generate_verification_email(file_name, document_type),
        fallback=True,
    )


class AuthenticityHeuristics:
    """Scores documents from the presence of expected structural markers.

    Stateless; never raises for string input.
    """

    def __init__(self, classifier: DocumentClassifier | None = None) -> None:
        self._classifier = classifier or DocumentClassifier()

    def assess_authenticity(
        self,
        text: str,
        file_name: str,
        document_metadata: Mapping[str, object] | None = None,
    ) -> VerificationVerdict:
        text = text or ""
        if len(text.strip()) < MIN_TEXT_CHARS:
            Log.warning(f"Text too short for authenticity analysis: {file_name}")
            return insufficient_text_verdict()

        facts = extract_document_facts(text, file_name, self._classifier)
        screenshot = is_likely_screenshot(file_name)
        score = self.score(facts, screenshot)
        verdict = verdict_for_score(score)
        flags = self._collect_flags(text, facts, screenshot)
        Log.info(f"Authenticity verdict for {file_name}: {verdict.value} ({score})")

        return VerificationVerdict(
            verdict=verdict,
            confidence_score=score,
            flags=flags,
            suggested_action=self._suggested_action(verdict, facts.institution_name),
            metadata_analysis=self._metadata_analysis(document_metadata, screenshot, len(flags)),
            extracted_info=ExtractedInfo(
                document_type=facts.category,
                institution_name=facts.institution_name or "Unknown",
                recipient_name=facts.recipient_name or "Unknown",
                issue_date=facts.issue_date or "Not found",
                degree_or_certification=facts.degree_or_certification or "Not specified",
                key_elements=facts.key_elements,
            ),
            email_template=generate_verification_email(
                file_name, facts.category, facts.institution_name or None
            ),
        )

    @staticmethod
    def score(facts: DocumentFacts, screenshot: bool) -> int:
        score = BASELINE_CONFIDENCE
        if screenshot:
            score -= SCREENSHOT_PENALTY
        if not facts.has_signature:
            score -= NO_SIGNATURE_PENALTY
        if not facts.has_date:
            score -= NO_DATE_PENALTY
        if not facts.has_institution_name:
            score -= NO_INSTITUTION_PENALTY
        score -= SUSPICIOUS_PATTERN_PENALTY * facts.suspicious_patterns
        return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, score))

    @staticmethod
    def _collect_flags(text: str, facts: DocumentFacts, screenshot: bool) -> list[str]:
        flags: list[str] = []
        if screenshot:
            flags.append("Document appears to be a screenshot rather than an original")
        if len(text) < 100:
            flags.append("Document contains minimal text content")
        flags.extend(facts.specific_flags)
        return list(dict.fromkeys(flags))

    @staticmethod
    def _suggested_action(verdict: Verdict, institution: str) -> str:
        target = institution or "the issuing institution"
        if verdict is Verdict.LIKELY_AUTHENTIC:
            return (
                f"Document appears authentic, but verification with {target} "
                "is recommended for complete certainty"
            )
        if verdict is Verdict.POSSIBLY_FAKE:
            return f"Contact {target} to verify the document's authenticity"
        return f"Additional verification required. Consider contacting {target}"

    @staticmethod
    def _metadata_analysis(
        metadata: Mapping[str, object] | None,
        screenshot: bool,
        flag_count: int,
    ) -> MetadataAnalysis:
        info = metadata.get("info") if metadata else None
        info = info if isinstance(info, Mapping) else {}
        software = _first_value(info, _SOFTWARE_KEYS) or ("Screenshot Tool" if screenshot else "Unknown")
        return MetadataAnalysis(
            creation_date=_first_value(info, _CREATION_KEYS),
            modification_date=_first_value(info, _MODIFICATION_KEYS),
            software=software,
            suspicious=screenshot or flag_count > 2,
        )


def _first_value(info: Mapping[str, object], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = info.get(key)
        if value:
            return str(value)
    return None

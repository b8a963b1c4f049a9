"""Typed evidence records for expert and petition letters."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from casedraft.classification.models import DocumentCategory

NOT_PROVIDED = "Not provided"


@dataclass(frozen=True)
class ApplicantInfo:
    name: str = NOT_PROVIDED
    field: str = NOT_PROVIDED
    position: str = NOT_PROVIDED


@dataclass(frozen=True)
class ExpertInfo:
    name: str = NOT_PROVIDED
    credentials: str = NOT_PROVIDED
    position: str = NOT_PROVIDED
    relationship: str = "None"


@dataclass(frozen=True)
class PetitionerInfo:
    name: str = NOT_PROVIDED
    organization: str = NOT_PROVIDED
    position: str = NOT_PROVIDED
    address: str = NOT_PROVIDED


@dataclass(frozen=True)
class DocumentEvidence:
    """Excerpts grouped by what they demonstrate."""

    achievements: list[str] = field(default_factory=list)
    publications: list[str] = field(default_factory=list)
    awards: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.achievements or self.publications or self.awards)


@dataclass(frozen=True)
class ExpertLetterEvidence:
    applicant: ApplicantInfo = field(default_factory=ApplicantInfo)
    expert: ExpertInfo | None = None
    documents: DocumentEvidence = field(default_factory=DocumentEvidence)
    other: str = ""


@dataclass(frozen=True)
class PetitionLetterEvidence:
    beneficiary: ApplicantInfo = field(default_factory=ApplicantInfo)
    petitioner: PetitionerInfo = field(default_factory=PetitionerInfo)
    criteria: list[str] = field(default_factory=list)
    exhibits: list[str] = field(default_factory=list)
    documents: DocumentEvidence = field(default_factory=DocumentEvidence)
    other: str = ""


LetterEvidence = ExpertLetterEvidence | PetitionLetterEvidence

_AWARD_CATEGORIES = {DocumentCategory.AWARD.value}
_PUBLICATION_CATEGORIES = {DocumentCategory.PUBLICATION.value}


def collect_document_evidence(documents: Iterable[Mapping[str, object]]) -> DocumentEvidence:
    """Group processed document rows into award, publication and achievement excerpts.

    Rows without a summary are skipped. The excerpt is ``name: summary``.
    """
    achievements: list[str] = []
    publications: list[str] = []
    awards: list[str] = []
    for row in documents:
        summary = str(row.get("summary") or "").strip()
        if not summary:
            continue
        name = str(row.get("name") or row.get("file_name") or "Document")
        excerpt = f"{name}: {summary}"
        category = str(row.get("category") or "")
        if category in _AWARD_CATEGORIES:
            awards.append(excerpt)
        elif category in _PUBLICATION_CATEGORIES:
            publications.append(excerpt)
        else:
            achievements.append(excerpt)
    return DocumentEvidence(achievements=achievements, publications=publications, awards=awards)


def _text(raw: Mapping[str, object], key: str, default: str = NOT_PROVIDED) -> str:
    value = raw.get(key)
    return str(value).strip() if value not in (None, "") else default


def _items(raw: Mapping[str, object], key: str) -> list[str]:
    value = raw.get(key)
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _section(raw: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = raw.get(key)
    return value if isinstance(value, Mapping) else {}


def _document_evidence(raw: Mapping[str, object]) -> DocumentEvidence:
    return DocumentEvidence(
        achievements=_items(raw, "achievements"),
        publications=_items(raw, "publications"),
        awards=_items(raw, "awards"),
    )


def _applicant(raw: Mapping[str, object]) -> ApplicantInfo:
    return ApplicantInfo(
        name=_text(raw, "name"), field=_text(raw, "field"), position=_text(raw, "position")
    )


def expert_evidence_from_dict(raw: Mapping[str, object]) -> ExpertLetterEvidence:
    """Build expert-letter evidence from loosely shaped JSON input."""
    expert_raw = _section(raw, "expert")
    expert = None
    if expert_raw:
        expert = ExpertInfo(
            name=_text(expert_raw, "name"),
            credentials=_text(expert_raw, "credentials"),
            position=_text(expert_raw, "position"),
            relationship=_text(expert_raw, "relationship", "None"),
        )
    return ExpertLetterEvidence(
        applicant=_applicant(_section(raw, "applicant")),
        expert=expert,
        documents=_document_evidence(raw),
        other=_text(raw, "other", ""),
    )


def petition_evidence_from_dict(raw: Mapping[str, object]) -> PetitionLetterEvidence:
    petitioner_raw = _section(raw, "petitioner")
    return PetitionLetterEvidence(
        beneficiary=_applicant(_section(raw, "beneficiary") or _section(raw, "applicant")),
        petitioner=PetitionerInfo(
            name=_text(petitioner_raw, "name"),
            organization=_text(petitioner_raw, "organization"),
            position=_text(petitioner_raw, "position"),
            address=_text(petitioner_raw, "address"),
        ),
        criteria=_items(raw, "criteria"),
        exhibits=_items(raw, "exhibits"),
        documents=_document_evidence(raw),
        other=_text(raw, "other", ""),
    )

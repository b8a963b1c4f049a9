"""Builds drafting instructions from sample letters and typed evidence."""

from collections.abc import Iterable
from pathlib import Path

from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.letters.evidence import (
    DocumentEvidence,
    ExpertLetterEvidence,
    LetterEvidence,
    PetitionLetterEvidence,
)
from casedraft.letters.sample_letters import SampleLetter, SampleLetterRepository

DEFAULT_SAMPLE_COUNT = 3


class EvidencePromptComposer:
    def __init__(self, samples: SampleLetterRepository, prompt_dir: Path | None = None) -> None:
        self._samples = samples
        self._prompt_dir = prompt_dir

    def compose_prompt(
        self,
        visa_type: str,
        tags: Iterable[str],
        evidence: ExpertLetterEvidence,
    ) -> tuple[str, SampleLetter | None]:
        """Expert-letter instruction built around the best sample, if any.

        Returns the prompt and the sample it embeds.
        """
        sample = self._samples.select_sample(visa_type, tags)
        if sample is None:
            return self.compose_fallback_prompt(visa_type, evidence), None
        template = self._template("expert_letter_with_sample.txt")
        prompt = template.format(
            visa_type=visa_type,
            sample=sample.body,
            evidence=format_evidence(evidence),
        )
        return prompt, sample

    def compose_fallback_prompt(self, visa_type: str, evidence: LetterEvidence) -> str:
        template = self._template("expert_letter_fallback.txt")
        return template.format(visa_type=visa_type, evidence=format_evidence(evidence))

    def compose_multi_sample_prompt(
        self,
        visa_type: str,
        evidence: ExpertLetterEvidence,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
    ) -> tuple[str, list[SampleLetter]]:
        samples = self._samples.candidates(visa_type)[: max(sample_count, 0)]
        if not samples:
            return self.compose_fallback_prompt(visa_type, evidence), []
        blocks = "".join(
            f"SAMPLE {index}:\n===\n{sample.body}\n===\n\n"
            for index, sample in enumerate(samples, start=1)
        )
        template = self._template("expert_letter_multi_sample.txt")
        prompt = template.format(
            visa_type=visa_type,
            count=len(samples),
            samples=blocks,
            evidence=format_evidence(evidence),
        )
        return prompt, samples

    def compose_petition_prompt(
        self,
        visa_type: str,
        tags: Iterable[str],
        evidence: PetitionLetterEvidence,
    ) -> tuple[str, SampleLetter | None]:
        sample = self._samples.select_sample(visa_type, tags)
        sample_section = ""
        if sample is not None:
            sample_section = (
                f"For tone and structure, here is a letter from a successful {visa_type} case:\n\n"
                f"===\n{sample.body}\n===\n\n"
            )
        template = self._template("petition_letter.txt")
        prompt = template.format(
            visa_type=visa_type,
            sample_section=sample_section,
            evidence=format_evidence(evidence),
        )
        return prompt, sample

    def compose_refine_prompt(self, instructions: str) -> str:
        return self._template("refine_letter.txt").format(instructions=instructions)

    def _template(self, name: str) -> str:
        return load_prompt_template(name, self._prompt_dir)


def format_evidence(evidence: LetterEvidence | None) -> str:
    """Render evidence as labelled sections; missing values keep their defaults."""
    if evidence is None:
        return "No evidence provided."
    sections: list[str] = []
    if isinstance(evidence, ExpertLetterEvidence):
        applicant = evidence.applicant
        sections.append(
            "APPLICANT INFORMATION:\n"
            f"Name: {applicant.name}\n"
            f"Field: {applicant.field}\n"
            f"Current Position: {applicant.position}\n"
        )
        if evidence.expert is not None:
            expert = evidence.expert
            sections.append(
                "EXPERT INFORMATION:\n"
                f"Name: {expert.name}\n"
                f"Credentials: {expert.credentials}\n"
                f"Position: {expert.position}\n"
                f"Relationship to Applicant: {expert.relationship}\n"
            )
    else:
        beneficiary = evidence.beneficiary
        petitioner = evidence.petitioner
        sections.append(
            "BENEFICIARY INFORMATION:\n"
            f"Name: {beneficiary.name}\n"
            f"Field: {beneficiary.field}\n"
            f"Current Position: {beneficiary.position}\n"
        )
        sections.append(
            "PETITIONER INFORMATION:\n"
            f"Name: {petitioner.name}\n"
            f"Organization: {petitioner.organization}\n"
            f"Position: {petitioner.position}\n"
            f"Address: {petitioner.address}\n"
        )
        if evidence.criteria:
            sections.append(_numbered("CRITERIA CLAIMED", evidence.criteria))
        if evidence.exhibits:
            sections.append(_numbered("EXHIBITS", evidence.exhibits))

    sections.extend(_document_sections(evidence.documents))
    if evidence.other:
        sections.append(f"ADDITIONAL EVIDENCE:\n{evidence.other}\n")
    return "\n".join(sections) + "\n"


def _document_sections(documents: DocumentEvidence) -> list[str]:
    sections = []
    for title, items in (
        ("ACHIEVEMENTS", documents.achievements),
        ("PUBLICATIONS", documents.publications),
        ("AWARDS", documents.awards),
    ):
        if items:
            sections.append(_numbered(title, items))
    return sections


def _numbered(title: str, items: list[str]) -> str:
    lines = "".join(f"{index}. {item}\n" for index, item in enumerate(items, start=1))
    return f"{title}:\n{lines}"

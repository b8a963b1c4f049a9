"""Drafting and refinement of expert and petition letters."""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any

import psycopg

from casedraft.database.exceptions import RepositoryError
from casedraft.database.repositories.record_repository import RecordRepository
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.letters.evidence import ExpertLetterEvidence, PetitionLetterEvidence
from casedraft.letters.prompt_composer import DEFAULT_SAMPLE_COUNT, EvidencePromptComposer
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result


@dataclass(frozen=True)
class DraftedLetter:
    letter_type: str
    visa_type: str
    content: str
    sample_ids: tuple[str, ...] = ()
    record_id: str | None = None


class LetterDraftingService:
    """Composes drafting prompts and sends them to the generation service.

    Drafts are stored in the ``letters`` table when a repository is given.
    """

    def __init__(
        self,
        *,
        composer: EvidencePromptComposer,
        client: BaseGenerationClient,
        repository: RecordRepository | None = None,
    ) -> None:
        self._composer = composer
        self._client = client
        self._repository = repository

    def draft_expert_letter(
        self,
        visa_type: str,
        evidence: ExpertLetterEvidence,
        tags: Iterable[str] = (),
        *,
        multi_sample: bool = False,
        sample_count: int = DEFAULT_SAMPLE_COUNT,
        case_id: str | None = None,
    ) -> Result[DraftedLetter]:
        tags = list(tags)
        if multi_sample:
            prompt, samples = self._composer.compose_multi_sample_prompt(visa_type, evidence, sample_count)
            sample_ids = tuple(sample.id for sample in samples)
        else:
            prompt, sample = self._composer.compose_prompt(visa_type, tags, evidence)
            sample_ids = (sample.id,) if sample else ()
        Log.info(f"Drafting expert letter for {visa_type} with samples {list(sample_ids)}")
        return self._draft(
            "expert", visa_type, prompt, sample_ids, evidence.applicant.name, tags, case_id
        )

    def draft_petition_letter(
        self,
        visa_type: str,
        evidence: PetitionLetterEvidence,
        tags: Iterable[str] = (),
        *,
        case_id: str | None = None,
    ) -> Result[DraftedLetter]:
        tags = list(tags)
        prompt, sample = self._composer.compose_petition_prompt(visa_type, tags, evidence)
        sample_ids = (sample.id,) if sample else ()
        Log.info(f"Drafting petition letter for {visa_type}")
        return self._draft(
            "petition", visa_type, prompt, sample_ids, evidence.beneficiary.name, tags, case_id
        )

    def refine_letter(
        self,
        content: str,
        instructions: str,
        letter_id: str | None = None,
    ) -> Result[str]:
        if not content.strip():
            return Result.failure(ErrorKind.INVALID_INPUT, "Letter content is empty")
        if not instructions.strip():
            return Result.success(content)
        prompt = self._composer.compose_refine_prompt(instructions)
        try:
            refined = self._client.generate(
                document_type="letter_refinement",
                document_name=letter_id or "letter",
                document_text=content,
                prompt=prompt,
            )
        except GenerationError as exc:
            Log.error(f"Letter refinement failed: {exc}")
            return Result.failure(ErrorKind.GENERATION, str(exc), value=content)
        if not refined.strip():
            Log.warning("Refinement returned no text; keeping the original letter")
            return Result.failure(ErrorKind.GENERATION, "Empty refinement", value=content)

        if letter_id and self._repository is not None:
            try:
                self._repository.update("letters", letter_id, {"content": refined})
            except (RepositoryError, psycopg.Error) as exc:
                Log.error(f"Could not store refined letter {letter_id}: {exc}")
                return Result.failure(ErrorKind.STORAGE, str(exc), value=refined)
        return Result.success(refined)

    def _draft(
        self,
        letter_type: str,
        visa_type: str,
        prompt: str,
        sample_ids: tuple[str, ...],
        subject_name: str,
        tags: list[str],
        case_id: str | None,
    ) -> Result[DraftedLetter]:
        try:
            content = self._client.generate(
                document_type=f"{letter_type}_letter",
                document_name=f"{visa_type} {letter_type} letter",
                document_text=f"Write the {visa_type} {letter_type} letter for {subject_name}.",
                prompt=prompt,
            )
        except GenerationError as exc:
            Log.error(f"{letter_type.capitalize()} letter drafting failed: {exc}")
            return Result.failure(ErrorKind.GENERATION, str(exc))
        if not content.strip():
            return Result.failure(ErrorKind.GENERATION, "Generation service returned an empty letter")

        letter = DraftedLetter(
            letter_type=letter_type,
            visa_type=visa_type,
            content=content,
            sample_ids=sample_ids,
        )
        if self._repository is None:
            return Result.success(letter)

        row: dict[str, Any] = {
            "title": f"{visa_type} {letter_type} letter for {subject_name}",
            "content": content,
            "visa_type": visa_type,
            "letter_type": letter_type,
            "beneficiary_name": subject_name,
            "tags": tags,
        }
        if case_id:
            row["case_id"] = case_id
        try:
            record_id = str(self._repository.insert("letters", row)["id"])
        except (RepositoryError, psycopg.Error) as exc:
            Log.error(f"Could not store {letter_type} letter for {visa_type}: {exc}")
            return Result.failure(ErrorKind.STORAGE, str(exc), value=letter)
        return Result.success(replace(letter, record_id=record_id))

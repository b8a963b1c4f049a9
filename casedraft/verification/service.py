"""Document verification: extraction, heuristic scoring and optional narrative."""

from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.extraction.text_extractor import FileInput, TextExtractor
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result
from casedraft.utils.deadline import run_with_deadline
from casedraft.utils.exceptions import DeadlineExceededError
from casedraft.verification.authenticity import (
    MIN_TEXT_CHARS,
    AuthenticityHeuristics,
    fallback_verdict,
    insufficient_text_verdict,
)
from casedraft.verification.models import Verdict, VerificationVerdict


class DocumentVerificationService:
    """Verifies a document for authenticity.

    Analysis runs under a deadline. A timeout or a failed narrative call
    yields the labelled fallback verdict as a degraded result.
    """

    def __init__(
        self,
        *,
        text_extractor: TextExtractor,
        heuristics: AuthenticityHeuristics | None = None,
        client: BaseGenerationClient | None = None,
        timeout_seconds: float = 15.0,
        narrative: bool = False,
        prompt_dir: Path | None = None,
    ) -> None:
        self._text_extractor = text_extractor
        self._heuristics = heuristics or AuthenticityHeuristics()
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._narrative = narrative and client is not None
        self._prompt_dir = prompt_dir

    def verify_document(
        self,
        file: FileInput,
        file_name: str,
        declared_type: str = "",
    ) -> Result[VerificationVerdict]:
        Log.info(f"Verifying document: {file_name}")
        extracted = self._text_extractor.extract_text(file, declared_type, file_name)
        if extracted.error:
            return Result.failure(
                ErrorKind.EXTRACTION,
                extracted.error,
                value=VerificationVerdict(
                    verdict=Verdict.INCONCLUSIVE,
                    confidence_score=0,
                    flags=["Error processing document"],
                    suggested_action="Please try again or upload a different document format",
                ),
            )
        return self.verify_text(extracted.text, file_name, extracted.metadata)

    def verify_text(
        self,
        text: str,
        file_name: str,
        metadata: Mapping[str, object] | None = None,
    ) -> Result[VerificationVerdict]:
        if len((text or "").strip()) < MIN_TEXT_CHARS:
            Log.warning(f"OCR output too short or empty for {file_name}")
            return Result.success(insufficient_text_verdict())

        try:
            verdict = run_with_deadline(
                self._analyze,
                self._timeout_seconds,
                text,
                file_name,
                metadata,
                label="Authenticity analysis",
            )
        except DeadlineExceededError as exc:
            Log.warning(f"Using fallback verdict for {file_name}: {exc}")
            return Result.failure(ErrorKind.TIMEOUT, str(exc), value=fallback_verdict(file_name))
        except GenerationError as exc:
            Log.error(f"Authenticity analysis failed for {file_name}: {exc}")
            return Result.failure(ErrorKind.GENERATION, str(exc), value=fallback_verdict(file_name))
        return Result.success(verdict)

    def _analyze(
        self,
        text: str,
        file_name: str,
        metadata: Mapping[str, object] | None,
    ) -> VerificationVerdict:
        verdict = self._heuristics.assess_authenticity(text, file_name, metadata)
        if not self._narrative or self._client is None:
            return verdict

        template = load_prompt_template("verification_narrative.txt", self._prompt_dir)
        prompt = template.format(
            verdict=verdict.verdict.value,
            confidence=verdict.confidence_score,
            flags="\n".join(f"- {flag}" for flag in verdict.flags) or "- none",
            text=text,
        )
        narrative = self._client.generate(
            document_type="document_verification",
            document_name=file_name,
            document_text=text,
            prompt=prompt,
        )
        return replace(verdict, narrative=narrative.strip() or None)

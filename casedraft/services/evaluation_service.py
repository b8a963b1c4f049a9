"""Credential evaluation: classify, extract fields, reason about US equivalency."""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from casedraft.classification.classifier import DocumentClassifier
from casedraft.classification.models import DocumentCategory
from casedraft.evaluation.equivalency import EquivalencyReasoner
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.field_extractor import StructuredFieldExtractor
from casedraft.evaluation.models import StructuredCredentialRecord
from casedraft.evaluation.transcript import (
    degraded_transcript_record,
    summarize_transcript,
    validate_transcript,
)
from casedraft.evaluation.validator import build_credential_record
from casedraft.extraction.text_extractor import FileInput, TextExtractor, read_bytes
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result
from casedraft.storage.exceptions import InvalidStatusTransitionError, RecordNotFoundError
from casedraft.storage.file_collections import (
    EvaluationFile,
    EvaluationFileRepository,
    EvaluationStatus,
    new_record_id,
)


@dataclass(frozen=True)
class CredentialEvaluation:
    document_name: str
    category: DocumentCategory
    structured: StructuredCredentialRecord | None
    equivalency: str
    degraded: bool = False


class CredentialEvaluationService:
    """Runs the evaluation pipeline one-shot or over stored evaluation files.

    Generation failures during field extraction surface as failed results.
    An unparseable transcript response falls back to the regex course parser
    and the result is marked degraded.
    """

    def __init__(
        self,
        *,
        text_extractor: TextExtractor,
        field_extractor: StructuredFieldExtractor,
        reasoner: EquivalencyReasoner,
        files: EvaluationFileRepository | None = None,
        classifier: DocumentClassifier | None = None,
    ) -> None:
        self._text_extractor = text_extractor
        self._field_extractor = field_extractor
        self._reasoner = reasoner
        self._files = files
        self._classifier = classifier or DocumentClassifier()

    def evaluate_document(
        self,
        file: FileInput,
        file_name: str,
        declared_type: str = "",
    ) -> Result[CredentialEvaluation]:
        extracted = self._text_extractor.extract_text(file, declared_type, file_name)
        if extracted.error:
            return Result.failure(ErrorKind.EXTRACTION, extracted.error)
        return self.evaluate_text(extracted.text, file_name)

    def evaluate_text(self, text: str, file_name: str) -> Result[CredentialEvaluation]:
        if not text.strip():
            return Result.failure(ErrorKind.EXTRACTION, f"No text extracted from {file_name}")

        category = self._classifier.classify(text, file_name)
        Log.info(f"Evaluating {file_name} as {category.value}")
        try:
            structured = self._field_extractor.extract_fields(text, category, file_name)
        except GenerationError as exc:
            Log.error(f"Structured extraction failed for {file_name}: {exc}")
            return Result.failure(ErrorKind.GENERATION, str(exc))

        degraded = False
        if structured is None and category is DocumentCategory.TRANSCRIPT:
            Log.warning(f"Using rule-based course parsing for {file_name}")
            structured = degraded_transcript_record(text)
            degraded = True

        equivalency = self._reasoner.determine_equivalency(text, structured, category, file_name)
        evaluation = CredentialEvaluation(
            document_name=file_name,
            category=category,
            structured=structured,
            equivalency=equivalency,
            degraded=degraded or structured is None,
        )
        return Result.success(evaluation, degraded=evaluation.degraded)

    def upload_document(
        self,
        file: FileInput,
        file_name: str,
        declared_type: str = "",
    ) -> Result[EvaluationFile]:
        files = self._require_files()
        data = read_bytes(file)
        extracted = self._text_extractor.extract_text(data, declared_type, file_name)
        if extracted.error:
            return Result.failure(ErrorKind.EXTRACTION, extracted.error)
        record = EvaluationFile(
            id=new_record_id(),
            file_name=file_name,
            file_type=declared_type or extracted.source_type.value,
            file_size=len(data),
            extracted_text=extracted.text,
        )
        files.add(record)
        Log.info(f"Evaluation file {record.id} uploaded: {file_name}")
        return Result.success(record)

    def process_evaluation(self, record_id: str) -> Result[EvaluationFile]:
        """Classify, extract and evaluate a stored upload.

        Evaluated or edited records are re-derived in place and keep their
        status; completed records are rejected before any generation call.
        """
        files = self._require_files()
        try:
            record = files.get(record_id)
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        if record.status is EvaluationStatus.COMPLETED:
            return Result.failure(
                ErrorKind.INVALID_INPUT, f"Evaluation {record_id} is completed and cannot be reprocessed"
            )

        outcome = self.evaluate_text(record.extracted_text, record.file_name)
        if outcome.value is None:
            files.update(record_id, error=outcome.error)
            return Result.failure(outcome.error_kind or ErrorKind.GENERATION, outcome.error)

        evaluation = outcome.value
        derived: dict[str, Any] = {
            "document_category": evaluation.category.value,
            "structured_data": evaluation.structured.to_dict() if evaluation.structured else None,
            "error": None,
        }
        try:
            if record.status is EvaluationStatus.UPLOADED:
                files.update(record_id, status=EvaluationStatus.PROCESSED, **derived)
            if record.status in (EvaluationStatus.UPLOADED, EvaluationStatus.PROCESSED):
                derived["status"] = EvaluationStatus.EVALUATED
            updated = files.update(record_id, evaluation_result=evaluation.equivalency, **derived)
        except InvalidStatusTransitionError as exc:
            return Result.failure(ErrorKind.INVALID_INPUT, str(exc))
        return Result.success(updated, degraded=evaluation.degraded)

    def update_evaluation(self, record_id: str, edited_result: str) -> Result[EvaluationFile]:
        return self._transition(record_id, EvaluationStatus.EDITED, edited_result=edited_result)

    def generate_report(self, record_id: str) -> Result[dict[str, Any]]:
        files = self._require_files()
        try:
            record = files.get(record_id)
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        if record.evaluation_result is None:
            return Result.failure(
                ErrorKind.INVALID_INPUT, f"Evaluation {record_id} has not been processed"
            )

        report = self.build_report(record)
        result = self._transition(record_id, EvaluationStatus.COMPLETED, report=report)
        if not result.ok:
            return Result.failure(result.error_kind or ErrorKind.INVALID_INPUT, result.error)
        return Result.success(report)

    @staticmethod
    def build_report(record: EvaluationFile) -> dict[str, Any]:
        report: dict[str, Any] = {
            "id": record.id,
            "fileName": record.file_name,
            "documentCategory": record.document_category,
            "structuredData": record.structured_data,
            "usEquivalency": record.edited_result or record.evaluation_result,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }
        if record.document_category == DocumentCategory.TRANSCRIPT.value and record.structured_data:
            structured = build_credential_record(record.structured_data)
            report["transcriptSummary"] = asdict(summarize_transcript(structured))
            validation = validate_transcript(structured)
            report["validation"] = {
                "isValid": validation.is_valid,
                "errors": validation.errors,
                "warnings": validation.warnings,
            }
        return report

    def list(self) -> list[EvaluationFile]:
        return self._require_files().all()

    def get(self, record_id: str) -> Result[EvaluationFile]:
        try:
            return Result.success(self._require_files().get(record_id))
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))

    def delete(self, record_id: str) -> Result[str]:
        try:
            self._require_files().delete(record_id)
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        return Result.success(record_id)

    def _transition(
        self,
        record_id: str,
        status: EvaluationStatus,
        **changes: object,
    ) -> Result[EvaluationFile]:
        try:
            return Result.success(self._require_files().update(record_id, status=status, **changes))
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        except InvalidStatusTransitionError as exc:
            return Result.failure(ErrorKind.INVALID_INPUT, str(exc))

    def _require_files(self) -> EvaluationFileRepository:
        if self._files is None:
            raise RuntimeError("No evaluation file repository configured")
        return self._files

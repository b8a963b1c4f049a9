"""Translation workflow over the local store: OCR, translate, edit, complete."""

from pathlib import Path

from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.extraction.text_extractor import FileInput, TextExtractor, read_bytes
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result
from casedraft.storage.exceptions import InvalidStatusTransitionError, RecordNotFoundError
from casedraft.storage.file_collections import (
    TranslationFile,
    TranslationFileRepository,
    TranslationStatus,
    new_record_id,
)


class TranslationService:
    def __init__(
        self,
        *,
        text_extractor: TextExtractor,
        client: BaseGenerationClient,
        files: TranslationFileRepository,
        prompt_dir: Path | None = None,
    ) -> None:
        self._text_extractor = text_extractor
        self._client = client
        self._files = files
        self._prompt_dir = prompt_dir

    def upload_document(
        self,
        file: FileInput,
        file_name: str,
        declared_type: str = "",
    ) -> Result[TranslationFile]:
        """Store the file's OCR text as a new translation record (status ``ocr``)."""
        data = read_bytes(file)
        extracted = self._text_extractor.extract_text(data, declared_type, file_name)
        if extracted.error:
            return Result.failure(ErrorKind.EXTRACTION, extracted.error)
        record = TranslationFile(
            id=new_record_id(),
            file_name=file_name,
            file_type=declared_type or extracted.source_type.value,
            file_size=len(data),
            original_text=extracted.text,
        )
        self._files.add(record)
        Log.info(f"Translation file {record.id} created from {file_name}")
        return Result.success(record)

    def translate(
        self,
        record_id: str,
        language_to: str,
        language_from: str | None = None,
    ) -> Result[str]:
        """Translate the stored text.

        A failed call returns a labelled ``[Translation Error: ...]`` text as
        a degraded value and leaves the record's status unchanged.
        """
        try:
            record = self._files.get(record_id)
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))

        source_clause = f"from {language_from} " if language_from else ""
        prompt = load_prompt_template("translation.txt", self._prompt_dir).format(
            source_clause=source_clause,
            language_to=language_to,
        )
        try:
            translated = self._client.generate(
                document_type="translation",
                document_name=f"Translation to {language_to}",
                document_text=record.original_text,
                prompt=prompt,
            )
        except GenerationError as exc:
            Log.error(f"Error translating {record_id}: {exc}")
            return Result.failure(
                ErrorKind.GENERATION, str(exc), value=f"[Translation Error: {exc}]"
            )

        try:
            self._files.update(
                record_id,
                translated_text=translated,
                language_from=language_from,
                language_to=language_to,
                status=TranslationStatus.TRANSLATED,
            )
        except InvalidStatusTransitionError as exc:
            return Result.failure(ErrorKind.INVALID_INPUT, str(exc), value=translated)
        return Result.success(translated)

    def update_translation(self, record_id: str, text: str) -> Result[TranslationFile]:
        return self._transition(record_id, TranslationStatus.EDITED, edited_text=text)

    def complete(self, record_id: str) -> Result[TranslationFile]:
        return self._transition(record_id, TranslationStatus.COMPLETED)

    def list(self) -> list[TranslationFile]:
        return self._files.all()

    def get(self, record_id: str) -> Result[TranslationFile]:
        try:
            return Result.success(self._files.get(record_id))
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))

    def delete(self, record_id: str) -> Result[str]:
        try:
            self._files.delete(record_id)
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        return Result.success(record_id)

    def _transition(
        self,
        record_id: str,
        status: TranslationStatus,
        **changes: object,
    ) -> Result[TranslationFile]:
        try:
            return Result.success(self._files.update(record_id, status=status, **changes))
        except RecordNotFoundError as exc:
            return Result.failure(ErrorKind.NOT_FOUND, str(exc))
        except InvalidStatusTransitionError as exc:
            return Result.failure(ErrorKind.INVALID_INPUT, str(exc))

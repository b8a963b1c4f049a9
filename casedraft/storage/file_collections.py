"""Evaluation and translation file records kept in the local JSON store."""

import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from casedraft.storage.blob_store import JsonBlobStore
from casedraft.storage.exceptions import InvalidStatusTransitionError, RecordNotFoundError


class EvaluationStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSED = "processed"
    EVALUATED = "evaluated"
    EDITED = "edited"
    COMPLETED = "completed"


class TranslationStatus(str, Enum):
    OCR = "ocr"
    TRANSLATED = "translated"
    EDITED = "edited"
    COMPLETED = "completed"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class EvaluationFile:
    id: str
    file_name: str
    file_type: str
    file_size: int
    status: EvaluationStatus = EvaluationStatus.UPLOADED
    extracted_text: str = ""
    document_category: str | None = None
    structured_data: dict[str, Any] | None = None
    evaluation_result: str | None = None
    edited_result: str | None = None
    report: dict[str, Any] | None = None
    error: str | None = None
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)


@dataclass(frozen=True)
class TranslationFile:
    id: str
    file_name: str
    file_type: str
    file_size: int
    status: TranslationStatus = TranslationStatus.OCR
    original_text: str = ""
    translated_text: str | None = None
    edited_text: str | None = None
    language_from: str | None = None
    language_to: str | None = None
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)


R = TypeVar("R", EvaluationFile, TranslationFile)


class FileCollection(Generic[R]):
    """Whole-collection read-modify-write over one JsonBlobStore key.

    Statuses only move forward; last write wins.
    """

    KEY: ClassVar[str]
    RECORD_TYPE: ClassVar[type]
    STATUS_TYPE: ClassVar[type[Enum]]

    def __init__(self, store: JsonBlobStore) -> None:
        self._store = store

    def all(self) -> list[R]:
        return [self._from_dict(raw) for raw in self._store.read(self.KEY)]

    def get(self, record_id: str) -> R:
        for record in self.all():
            if record.id == record_id:
                return record
        raise RecordNotFoundError(f"{self.KEY} record {record_id} not found")

    def add(self, record: R) -> R:
        records = self.all()
        records.append(record)
        self._write(records)
        return record

    def update(self, record_id: str, **changes: Any) -> R:
        records = self.all()
        for index, current in enumerate(records):
            if current.id != record_id:
                continue
            status = changes.get("status")
            if status is not None:
                self._check_transition(current.status, status)
            updated = replace(current, updated_at=_now(), **changes)
            records[index] = updated
            self._write(records)
            return updated
        raise RecordNotFoundError(f"{self.KEY} record {record_id} not found")

    def delete(self, record_id: str) -> None:
        records = self.all()
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            raise RecordNotFoundError(f"{self.KEY} record {record_id} not found")
        self._write(remaining)

    def _check_transition(self, current: Enum, new: Enum) -> None:
        order = list(self.STATUS_TYPE)
        if order.index(new) < order.index(current):
            raise InvalidStatusTransitionError(
                f"Cannot move {self.KEY} record from '{current.value}' back to '{new.value}'"
            )

    def _write(self, records: list[R]) -> None:
        payload = []
        for record in records:
            raw = asdict(record)
            raw["status"] = record.status.value
            payload.append(raw)
        self._store.replace(self.KEY, payload)

    def _from_dict(self, raw: dict[str, Any]) -> R:
        known = {f.name for f in fields(self.RECORD_TYPE)}
        values = {k: v for k, v in raw.items() if k in known}
        values["status"] = self.STATUS_TYPE(values.get("status", list(self.STATUS_TYPE)[0].value))
        return self.RECORD_TYPE(**values)


class EvaluationFileRepository(FileCollection[EvaluationFile]):
    KEY = "evaluation_files"
    RECORD_TYPE = EvaluationFile
    STATUS_TYPE = EvaluationStatus


class TranslationFileRepository(FileCollection[TranslationFile]):
    KEY = "translation_files"
    RECORD_TYPE = TranslationFile
    STATUS_TYPE = TranslationStatus

"""Per-document analysis for a case: extract, classify, summarise, tag."""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from casedraft.classification.classifier import DocumentClassifier
from casedraft.classification.models import DocumentCategory
from casedraft.database.exceptions import RepositoryError
from casedraft.database.repositories.record_repository import RecordRepository
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.extraction.text_extractor import TextExtractor
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result
from casedraft.storage.exceptions import StoreError
from casedraft.storage.file_loader import FileLoader

MAX_TAGS = 6
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class DocumentAnalysis:
    document_id: str
    category: DocumentCategory
    summary: str
    tags: list[str] = field(default_factory=list)
    text_length: int = 0


class DocumentAnalysisService:
    """Analyses stored case documents and writes the results back to their rows."""

    def __init__(
        self,
        *,
        repository: RecordRepository,
        file_loader: FileLoader,
        text_extractor: TextExtractor,
        client: BaseGenerationClient,
        classifier: DocumentClassifier | None = None,
        max_source_chars: int = 4000,
        prompt_dir: Path | None = None,
    ) -> None:
        self._repository = repository
        self._file_loader = file_loader
        self._text_extractor = text_extractor
        self._client = client
        self._classifier = classifier or DocumentClassifier()
        self._max_source_chars = max_source_chars
        self._prompt_dir = prompt_dir

    def analyze(self, document_id: str) -> Result[DocumentAnalysis]:
        document = self._repository.get("documents", document_id)
        if document is None:
            return Result.failure(ErrorKind.NOT_FOUND, f"Document {document_id} not found")

        name = str(document.get("name") or document_id)
        try:
            data = self._file_loader.load(document)
        except (FileNotFoundError, StoreError) as exc:
            Log.error(f"Cannot load file for document {document_id}: {exc}")
            return Result.failure(ErrorKind.EXTRACTION, str(exc))

        extracted = self._text_extractor.extract_text(data, str(document.get("type") or ""), name)
        if extracted.error:
            self._repository.update("documents", document_id, {"processed": False})
            return Result.failure(ErrorKind.EXTRACTION, extracted.error)

        category = self._classifier.classify(extracted.text, name)
        try:
            summary, tags = self._summarize(extracted.text, category, name)
        except GenerationError as exc:
            Log.error(f"Summary generation failed for {document_id}: {exc}")
            self._repository.update(
                "documents",
                document_id,
                {"extracted_text": extracted.text, "category": category.value, "processed": False},
            )
            return Result.failure(ErrorKind.GENERATION, str(exc))

        self._repository.update(
            "documents",
            document_id,
            {
                "extracted_text": extracted.text,
                "category": category.value,
                "summary": summary,
                "ai_tags": tags,
                "processed": True,
            },
        )
        Log.info(f"Document {document_id} analysed as {category.value} with {len(tags)} tags")
        return Result.success(
            DocumentAnalysis(
                document_id=document_id,
                category=category,
                summary=summary,
                tags=tags,
                text_length=len(extracted.text),
            )
        )

    def reprocess_case(self, case_id: str) -> list[Result[DocumentAnalysis]]:
        """Analyse every document of a case, one at a time, oldest first."""
        try:
            documents = self._repository.list("documents", {"case_id": case_id})
        except RepositoryError as exc:
            return [Result.failure(ErrorKind.INVALID_INPUT, str(exc))]
        Log.info(f"Reprocessing {len(documents)} documents for case {case_id}")
        return [self.analyze(str(document["id"])) for document in documents]

    def _summarize(self, text: str, category: DocumentCategory, name: str) -> tuple[str, list[str]]:
        prompt = load_prompt_template("document_summary.txt", self._prompt_dir).format(
            category=category.value.replace("_", " ")
        )
        raw = self._client.generate(
            document_type="document_summary",
            document_name=name,
            document_text=text[: self._max_source_chars],
            prompt=prompt,
        )
        return parse_summary_response(raw)


def parse_summary_response(raw: str) -> tuple[str, list[str]]:
    """Read ``{"summary", "tags"}`` JSON; non-JSON text is taken as the summary itself."""
    match = _JSON_OBJECT_RE.search(raw or "")
    parsed: Any = None
    if match is not None:
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError:
            Log.warning(f"Summary response is not valid JSON: {raw!r}")
    if not isinstance(parsed, dict):
        return (raw or "").strip(), []

    summary = parsed.get("summary")
    tags = parsed.get("tags")
    clean_tags: list[str] = []
    if isinstance(tags, list):
        for tag in tags:
            if isinstance(tag, str) and tag.strip() and tag.strip().lower() not in clean_tags:
                clean_tags.append(tag.strip().lower())
    return (summary.strip() if isinstance(summary, str) else ""), clean_tags[:MAX_TAGS]

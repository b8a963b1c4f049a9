"""Structured credential field extraction through the generation service."""

import json
import re
from pathlib import Path

from casedraft.classification.models import DocumentCategory
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import CredentialParseError
from casedraft.evaluation.models import StructuredCredentialRecord
from casedraft.evaluation.prompt_loader import load_json_schema, load_prompt_template
from casedraft.evaluation.validator import build_credential_record
from casedraft.logging.logger import Log

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_TEMPLATES = {
    DocumentCategory.TRANSCRIPT: "transcript_fields.txt",
    DocumentCategory.DIPLOMA: "diploma_fields.txt",
}


class StructuredFieldExtractor:
    """Turns credential text into a StructuredCredentialRecord.

    One outbound generation call per invocation, no retries. Generation
    failures propagate to the caller; an unparseable response resolves to
    None and is logged with the raw text.
    """

    def __init__(
        self,
        *,
        client: BaseGenerationClient,
        max_source_chars: int = 4000,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._max_source_chars = max_source_chars
        self._prompt_dir = prompt_dir
        self._json_schema = load_json_schema(prompt_dir / "credential_schema.json" if prompt_dir else None)
        self._rules_template = load_prompt_template("field_rules.txt", prompt_dir)

    def extract_fields(
        self,
        text: str,
        category: DocumentCategory,
        document_name: str = "document",
    ) -> StructuredCredentialRecord | None:
        document_type = self.document_type_for(category)
        prompt = self.build_prompt(category)
        Log.debug(f"Field extraction prompt:\n{prompt}")

        raw_response = self._client.generate(
            document_type=document_type,
            document_name=document_name,
            document_text=text[: self._max_source_chars],
            prompt=prompt,
        )
        Log.debug(f"Field extraction raw response:\n{raw_response}")

        try:
            record = build_credential_record(self._parse_json(raw_response))
        except CredentialParseError as exc:
            Log.error(f"Failed to parse structured data for {document_name}: {exc}. Raw response: {raw_response!r}")
            return None

        Log.info(f"Structured data extracted for {document_name}: {len(record.courses)} courses")
        return record

    def build_prompt(self, category: DocumentCategory) -> str:
        document_type = self.document_type_for(category)
        rules = self._rules_template.format(json_schema=self._json_schema, document_type=document_type)
        template_name = _TEMPLATES.get(category, "generic_fields.txt")
        template = load_prompt_template(template_name, self._prompt_dir)
        return template.format(rules=rules, category=category.value.replace("_", " "))

    @staticmethod
    def document_type_for(category: DocumentCategory) -> str:
        if category is DocumentCategory.TRANSCRIPT:
            return "transcript_structured_data"
        return "diploma_structured_data"

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if not cleaned:
            raise CredentialParseError("Empty response")
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            match = _JSON_OBJECT_RE.search(cleaned)
            if match is None:
                raise CredentialParseError(f"Invalid JSON response: {exc}") from exc
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError as inner:
                raise CredentialParseError(f"Invalid JSON response: {inner}") from inner

        if not isinstance(parsed, dict):
            raise CredentialParseError("JSON response must be an object")
        return parsed

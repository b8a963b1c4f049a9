"""Evaluation-letter data extraction and plain-text rendering."""

import json
import re
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from casedraft.database.repositories.record_repository import RecordRepository
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.logging.logger import Log
from casedraft.results import ErrorKind, Result

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_PLACEHOLDER_VALUES = frozenset(
    {
        "",
        "n/a",
        "na",
        "null",
        "none",
        "unknown",
        "not provided",
        "not specified",
        "not available",
        "not mentioned",
        "john doe",
        "jane doe",
    }
)
_BRACKETED = re.compile(r"^\[.*\]$|^<.*>$")


@dataclass(frozen=True)
class DegreeInfo:
    name: str = ""
    university: str = ""
    country: str = ""
    graduation_year: str = ""
    equivalent: str = ""
    field: str = ""

    @property
    def is_empty(self) -> bool:
        return not any(asdict(self).values())


@dataclass(frozen=True)
class EvaluationLetterData:
    full_name: str = ""
    field_of_expertise: str = ""
    years_experience: str = ""
    primary_degree: DegreeInfo = field(default_factory=DegreeInfo)
    additional_degree: DegreeInfo | None = None
    work_experience: list[dict[str, str]] = field(default_factory=list)


def clean_value(value: Any) -> str:
    """Stringify a scalar and blank out placeholder or invented-looking values."""
    if value is None or isinstance(value, (dict, list, bool)):
        return ""
    text = str(value).strip()
    if text.lower() in _PLACEHOLDER_VALUES or _BRACKETED.match(text):
        return ""
    return text


def sanitize_extracted_data(data: dict[str, Any]) -> EvaluationLetterData:
    primary = _degree(data.get("primaryDegree"))
    additional = _degree(data.get("additionalDegree"))
    return EvaluationLetterData(
        full_name=clean_value(data.get("fullName")),
        field_of_expertise=clean_value(data.get("fieldOfExpertise")),
        years_experience=clean_value(data.get("yearsExperience")),
        primary_degree=primary,
        additional_degree=None if additional.is_empty else additional,
        work_experience=_work_experience(data.get("workExperience")),
    )


def _degree(raw: Any) -> DegreeInfo:
    if not isinstance(raw, dict):
        return DegreeInfo()
    return DegreeInfo(
        name=clean_value(raw.get("name")),
        university=clean_value(raw.get("university")),
        country=clean_value(raw.get("country")),
        graduation_year=clean_value(raw.get("graduationYear")),
        equivalent=clean_value(raw.get("equivalent")),
        field=clean_value(raw.get("field")),
    )


def _work_experience(raw: Any) -> list[dict[str, str]]:
    if not isinstance(raw, list):
        return []
    items: list[dict[str, str]] = []
    for entry in raw:
        if isinstance(entry, str):
            description = clean_value(entry)
            if description:
                items.append({"description": description})
        elif isinstance(entry, dict):
            cleaned = {str(k): clean_value(v) for k, v in entry.items()}
            cleaned = {k: v for k, v in cleaned.items() if v}
            if cleaned:
                items.append(cleaned)
    return items


class EvaluationLetterService:
    """Fills an ``evaluation_letters`` row from its processed documents."""

    def __init__(
        self,
        *,
        repository: RecordRepository,
        client: BaseGenerationClient,
        prompt_dir: Path | None = None,
    ) -> None:
        self._repository = repository
        self._client = client
        self._prompt_dir = prompt_dir

    def extract_data(self, evaluation_letter_id: str) -> Result[EvaluationLetterData]:
        letter = self._repository.get("evaluation_letters", evaluation_letter_id)
        if letter is None:
            return Result.failure(
                ErrorKind.NOT_FOUND, f"Evaluation letter {evaluation_letter_id} not found"
            )
        documents = self._repository.list(
            "evaluation_letter_documents",
            {"evaluation_letter_id": evaluation_letter_id, "processed": True},
        )
        combined_text = combine_document_text(documents)
        if not combined_text:
            return Result.failure(
                ErrorKind.INVALID_INPUT,
                f"No processed documents with text for evaluation letter {evaluation_letter_id}",
            )

        prompt = load_prompt_template("evaluation_letter_data.txt", self._prompt_dir)
        try:
            raw = self._client.generate(
                document_type="evaluation_letter_data_extraction",
                document_name=f"Evaluation letter {evaluation_letter_id}",
                document_text=combined_text,
                prompt=prompt,
            )
        except GenerationError as exc:
            Log.error(f"Evaluation letter extraction failed for {evaluation_letter_id}: {exc}")
            return Result.failure(ErrorKind.GENERATION, str(exc))

        parsed = _parse_object(raw)
        if parsed is None:
            Log.error(f"Evaluation letter response is not a JSON object: {raw!r}")
            return Result.failure(ErrorKind.PARSE, "Generation service returned invalid JSON")

        data = sanitize_extracted_data(parsed)
        self._repository.update(
            "evaluation_letters", evaluation_letter_id, self._row_patch(data, combined_text)
        )
        Log.info(f"Evaluation letter {evaluation_letter_id} updated from {len(documents)} documents")
        return Result.success(data)

    def render_letter(self, evaluation_letter_id: str, today: date | None = None) -> Result[str]:
        letter = self._repository.get("evaluation_letters", evaluation_letter_id)
        if letter is None:
            return Result.failure(
                ErrorKind.NOT_FOUND, f"Evaluation letter {evaluation_letter_id} not found"
            )
        return Result.success(render_evaluation_letter(letter, self._prompt_dir, today))

    @staticmethod
    def _row_patch(data: EvaluationLetterData, combined_text: str) -> dict[str, Any]:
        additional = data.additional_degree or DegreeInfo()
        return {
            "client_name": data.full_name,
            "university": data.primary_degree.university,
            "country": data.primary_degree.country,
            "bachelor_degree": data.primary_degree.name,
            "degree_date1": data.primary_degree.graduation_year,
            "us_equivalent_degree1": data.primary_degree.equivalent,
            "field_of_study": data.primary_degree.field,
            "additional_degree": data.additional_degree is not None,
            "university2": additional.university,
            "degree_date2": additional.graduation_year,
            "us_equivalent_degree2": additional.equivalent,
            "field_of_study2": additional.field,
            "specialty": data.field_of_expertise,
            "years": data.years_experience,
            "work_experience_summary": {"items": data.work_experience},
            "ai_summary": asdict(data),
            "extracted_text": {"combinedText": combined_text},
        }


def combine_document_text(documents: list[dict[str, Any]]) -> str:
    parts = []
    for document in documents:
        text = str(document.get("extracted_text") or "").strip()
        if text:
            name = document.get("file_name") or document.get("id")
            parts.append(f"--- {name} ---\n{text}")
    return "\n\n".join(parts)


def render_evaluation_letter(
    letter: dict[str, Any],
    prompt_dir: Path | None = None,
    today: date | None = None,
) -> str:
    """Fill the plain-text evaluation template. Missing values render as ``[Field]``."""

    def value(column: str, label: str) -> str:
        return clean_value(letter.get(column)) or f"[{label}]"

    additional_section = ""
    if letter.get("additional_degree"):
        additional_section = (
            f"\n{value('client_name', 'Client Name')} also earned a degree from "
            f"{value('university2', 'University')} on {value('degree_date2', 'Degree Date')}, "
            f"which is equivalent to a {value('us_equivalent_degree2', 'US Equivalent Degree')} "
            f"in {value('field_of_study2', 'Field of Study')} from a regionally accredited "
            "institution in the United States.\n"
        )

    template = load_prompt_template("evaluation_letter_template.txt", prompt_dir)
    return template.format(
        current_date=(today or date.today()).strftime("%B %d, %Y"),
        client_name=value("client_name", "Client Name"),
        program_length1=value("program_length1", "Program Length"),
        university=value("university", "University"),
        university_location=value("university_location", "University Location"),
        country=value("country", "Country"),
        bachelor_degree=value("bachelor_degree", "Degree"),
        field_of_study=value("field_of_study", "Field of Study"),
        degree_date1=value("degree_date1", "Degree Date"),
        accreditation_body=value("accreditation_body", "Accreditation Body"),
        us_equivalent_degree1=value("us_equivalent_degree1", "US Equivalent Degree"),
        additional_degree_section=additional_section,
        years=value("years", "Years"),
        specialty=value("specialty", "Specialty"),
        work_experience=_format_work_experience(letter.get("work_experience_summary")),
    )


def _format_work_experience(raw: Any) -> str:
    items = raw.get("items") if isinstance(raw, dict) else raw
    if not isinstance(items, list) or not items:
        return "[Work Experience]\n"
    lines = []
    for item in items:
        if isinstance(item, dict):
            lines.append("- " + ", ".join(str(v) for v in item.values() if v))
        elif item:
            lines.append(f"- {item}")
    return "\n".join(lines) + "\n"


def _parse_object(raw: str) -> dict[str, Any] | None:
    match = _JSON_OBJECT_RE.search(raw or "")
    if match is None:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None

"""US-equivalency narratives for diplomas and transcripts."""

from pathlib import Path

from casedraft.classification.models import DocumentCategory
from casedraft.evaluation.client_base import BaseGenerationClient
from casedraft.evaluation.exceptions import GenerationError
from casedraft.evaluation.models import StructuredCredentialRecord
from casedraft.evaluation.prompt_loader import load_prompt_template
from casedraft.logging.logger import Log

_FIELD_LABELS = (
    ("name", "Name"),
    ("degree", "Degree"),
    ("field_of_study", "Field of study"),
    ("university", "Institution"),
    ("graduation_date", "Graduation date"),
    ("diploma_issue_date", "Diploma issued"),
)


class EquivalencyReasoner:
    """Asks the generation service for a US-equivalency narrative.

    Never raises for generation failures: the returned string describes the
    failure instead, since it lands directly in a user-facing report.
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

    def determine_equivalency(
        self,
        text: str,
        structured: StructuredCredentialRecord | None,
        category: DocumentCategory = DocumentCategory.DIPLOMA,
        document_name: str = "document",
    ) -> str:
        is_transcript = category is DocumentCategory.TRANSCRIPT
        try:
            prompt = self.build_prompt(text, structured, is_transcript)
            summary = self._client.generate(
                document_type="transcript" if is_transcript else "diploma",
                document_name=document_name,
                document_text=text[: self._max_source_chars],
                prompt=prompt,
            )
        except GenerationError as exc:
            Log.error(f"US equivalency generation failed for {document_name}: {exc}")
            return f"Error generating US equivalency: {exc}"

        if not summary.strip():
            Log.warning(f"Empty US equivalency response for {document_name}")
            return "Unable to determine US equivalency"
        return summary

    def build_prompt(
        self,
        text: str,
        structured: StructuredCredentialRecord | None,
        is_transcript: bool,
    ) -> str:
        template_name = "transcript_equivalency.txt" if is_transcript else "diploma_equivalency.txt"
        template = load_prompt_template(template_name, self._prompt_dir)
        prompt = template.format(text=text[: self._max_source_chars])
        if structured is not None:
            prompt += "\n\n" + format_structured_context(structured)
        return prompt


def format_structured_context(record: StructuredCredentialRecord) -> str:
    lines = ["Already extracted fields (use these rather than re-deriving them):"]
    for attr, label in _FIELD_LABELS:
        value = getattr(record, attr)
        if value:
            lines.append(f"- {label}: {value}")
    if record.courses:
        lines.append("Courses:")
        for course in record.courses:
            details = [course.grade_received]
            if course.credits is not None:
                details.append(f"{course.credits:g} credits")
            if course.us_grade:
                details.append(f"US grade {course.us_grade}")
            lines.append(f"- {course.course_name}: {', '.join(details)}")
    return "\n".join(lines)

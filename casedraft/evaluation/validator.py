"""Builds credential records from parsed generation output."""

from typing import Any

from casedraft.evaluation.exceptions import CredentialParseError
from casedraft.evaluation.models import CourseRecord, StructuredCredentialRecord

_TEXT_FIELDS = (
    "name",
    "degree",
    "field_of_study",
    "university",
    "graduation_date",
    "diploma_issue_date",
    "birth_date",
    "birthplace",
    "document_type",
)


def build_credential_record(data: Any) -> StructuredCredentialRecord:
    """Build a StructuredCredentialRecord from parsed JSON.

    Missing keys become None. Values of the wrong shape are dropped rather
    than rejected, except for a non-object payload.

    Raises:
        CredentialParseError: if ``data`` is not a JSON object.
    """
    if not isinstance(data, dict):
        raise CredentialParseError("Credential record must be a JSON object")
    values = {name: _text_or_none(data.get(name)) for name in _TEXT_FIELDS}
    return StructuredCredentialRecord(courses=_build_courses(data.get("courses")), **values)


def _build_courses(raw: Any) -> list[CourseRecord]:
    if not isinstance(raw, list):
        return []
    courses: list[CourseRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        course_name = _text_or_none(item.get("course_name"))
        grade = _text_or_none(item.get("grade_received"))
        if course_name is None and grade is None:
            continue
        courses.append(
            CourseRecord(
                course_name=course_name or "",
                grade_received=grade or "",
                us_grade=_text_or_none(item.get("us_grade")),
                credits=_number_or_none(item.get("credits")),
                semester_or_year=_text_or_none(item.get("semester_or_year")),
                course_code=_text_or_none(item.get("course_code")),
            )
        )
    return courses


def _text_or_none(raw: Any) -> str | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return str(raw)
    if isinstance(raw, str):
        stripped = raw.strip()
        return stripped or None
    return None


def _number_or_none(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            return None
    return None

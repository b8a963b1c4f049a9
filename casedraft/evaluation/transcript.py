"""Rule-based transcript helpers: course rows, GPA, grade conversion."""

import re

from casedraft.evaluation.models import (
    CourseCategory,
    CourseRecord,
    StructuredCredentialRecord,
    TranscriptSummary,
    TranscriptValidation,
)

COURSE_ROW_RE = re.compile(r"([A-Z]{2,4}\s*\d{3,4})\s+([A-Za-z &]+?)\s+(\d+(?:\.\d+)?)\s+([A-F][+-]?)(?=\s|$)")

_POINTS_4 = {
    "A+": 4.0,
    "A": 4.0,
    "A-": 3.7,
    "B+": 3.3,
    "B": 3.0,
    "B-": 2.7,
    "C+": 2.3,
    "C": 2.0,
    "C-": 1.7,
    "D+": 1.3,
    "D": 1.0,
    "F": 0.0,
}
_POINTS_5 = {grade: (points + 1.0 if points > 0 else 0.0) for grade, points in _POINTS_4.items()}
GRADE_POINTS = {"4.0": _POINTS_4, "5.0": _POINTS_5}

_CONVERSIONS: dict[tuple[str, str], dict[str, str]] = {
    ("indian", "us"): {
        "O": "A+",
        "A+": "A+",
        "A": "A",
        "B+": "B+",
        "B": "B",
        "C+": "C+",
        "C": "C",
        "D": "D",
        "F": "F",
    },
    ("uk", "us"): {
        "First": "A",
        "Upper Second": "B+",
        "Lower Second": "B",
        "Third": "C",
        "Pass": "D",
        "Fail": "F",
    },
}

# category -> (keywords, SCED code, CIP code)
_COURSE_CATEGORIES: tuple[tuple[str, tuple[str, ...], str, str], ...] = (
    ("Mathematics", ("math", "calculus", "algebra", "geometry", "statistics"), "02", "27"),
    ("Science", ("physics", "chemistry", "biology", "science"), "03", "40"),
    ("English", ("english", "literature", "writing", "composition"), "01", "23"),
    ("Social Studies", ("history", "geography", "social", "government"), "04", "45"),
    ("Engineering", ("engineering", "mechanical", "electrical", "civil"), "21", "14"),
)


def parse_course_rows(text: str) -> list[CourseRecord]:
    """Parse ``CODE NAME CREDITS GRADE`` rows, one per line."""
    courses: list[CourseRecord] = []
    for line in text.splitlines():
        match = COURSE_ROW_RE.search(line)
        if match is None:
            continue
        code, name, credits, grade = match.groups()
        courses.append(
            CourseRecord(
                course_name=name.strip(),
                grade_received=grade,
                us_grade=grade,
                credits=float(credits),
                course_code=re.sub(r"\s+", " ", code),
            )
        )
    return courses


def calculate_gpa(courses: list[CourseRecord], scale: str = "4.0") -> float:
    """Credit-weighted GPA on the 4.0 or 5.0 scale. Unknown grades count as 0 points."""
    if scale not in GRADE_POINTS:
        raise ValueError(f"Unsupported GPA scale: {scale}")
    points_table = GRADE_POINTS[scale]
    total_points = 0.0
    total_credits = 0.0
    for course in courses:
        grade = (course.us_grade or course.grade_received or "").strip().upper()
        credits = course.credits or 0.0
        total_points += points_table.get(grade, 0.0) * credits
        total_credits += credits
    return total_points / total_credits if total_credits > 0 else 0.0


def convert_grade(grade: str, from_system: str, to_system: str = "us") -> str:
    """Convert a grade between systems; unknown grades or systems pass through."""
    table = _CONVERSIONS.get((from_system.lower(), to_system.lower()), {})
    return table.get(grade, grade)


def categorize_course(course_name: str, course_code: str = "") -> CourseCategory:
    course_text = f"{course_name} {course_code}".lower()
    for category, keywords, sced, cip in _COURSE_CATEGORIES:
        if any(keyword in course_text for keyword in keywords):
            return CourseCategory(category=category, subcategory=category, sced=sced, cip=cip)
    return CourseCategory(category="Other", subcategory="General")


def summarize_transcript(record: StructuredCredentialRecord) -> TranscriptSummary:
    total_credits = sum(course.credits or 0.0 for course in record.courses)
    degree = record.degree or "Unknown degree"
    field = record.field_of_study or "unknown field"
    return TranscriptSummary(
        total_credits=total_credits,
        gpa=round(calculate_gpa(record.courses), 2),
        course_count=len(record.courses),
        degree_info=f"{degree} in {field}",
        completion_status="Completed" if record.graduation_date else "In Progress",
    )


def validate_transcript(
    record: StructuredCredentialRecord,
    ocr_confidence: float | None = None,
) -> TranscriptValidation:
    errors: list[str] = []
    warnings: list[str] = []
    if not record.name:
        errors.append("Student name is required")
    if not record.university:
        errors.append("Institution name is required")
    if not record.courses:
        errors.append("At least one course is required")
    if ocr_confidence is not None and ocr_confidence < 80:
        warnings.append("Low OCR confidence - manual review recommended")
    for index, course in enumerate(record.courses, start=1):
        if not course.course_name:
            warnings.append(f"Course {index}: Missing course code or name")
        if not course.credits or course.credits <= 0:
            warnings.append(f"Course {index}: Invalid credit hours")
    return TranscriptValidation(errors=errors, warnings=warnings)


def degraded_transcript_record(text: str) -> StructuredCredentialRecord:
    """Best-effort record built from course rows alone, for when the model output is unusable."""
    return StructuredCredentialRecord(
        courses=parse_course_rows(text),
        document_type="transcript_structured_data",
    )

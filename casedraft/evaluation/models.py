from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class CourseRecord:
    """A single course row from a transcript."""

    course_name: str
    grade_received: str
    us_grade: str | None = None
    credits: float | None = None
    semester_or_year: str | None = None
    course_code: str | None = None


@dataclass(frozen=True)
class StructuredCredentialRecord:
    """Credential fields extracted from a diploma or transcript.

    Every field is nullable: a missing value means the source text did not
    state it, not that extraction failed.
    """

    name: str | None = None
    degree: str | None = None
    field_of_study: str | None = None
    university: str | None = None
    graduation_date: str | None = None
    diploma_issue_date: str | None = None
    birth_date: str | None = None
    birthplace: str | None = None
    courses: list[CourseRecord] = field(default_factory=list)
    document_type: str | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class TranscriptSummary:
    total_credits: float
    gpa: float
    course_count: int
    degree_info: str
    completion_status: str


@dataclass(frozen=True)
class TranscriptValidation:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class CourseCategory:
    category: str
    subcategory: str
    sced: str | None = None
    cip: str | None = None

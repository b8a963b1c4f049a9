import pytest

from casedraft.evaluation.exceptions import CredentialParseError
from casedraft.evaluation.models import CourseRecord, StructuredCredentialRecord
from casedraft.evaluation.validator import build_credential_record


class TestBuildCredentialRecord:
    def test_builds_full_record(self) -> None:
        record = build_credential_record(
            {
                "name": "Maria Silva",
                "degree": "Bachelor of Science",
                "field_of_study": "Computer Science",
                "university": "Universidade de Sao Paulo",
                "graduation_date": "2018-12-15",
                "diploma_issue_date": "2019-02-01",
                "birth_date": "1995-04-10",
                "birthplace": "Campinas",
                "courses": [
                    {"course_name": "Algorithms", "grade_received": "9.0", "us_grade": "A", "credits": 4, "semester_or_year": "2016"},
                ],
                "document_type": "diploma_structured_data",
            }
        )

        assert record.name == "Maria Silva"
        assert record.university == "Universidade de Sao Paulo"
        assert record.courses == [
            CourseRecord(
                course_name="Algorithms",
                grade_received="9.0",
                us_grade="A",
                credits=4.0,
                semester_or_year="2016",
            )
        ]

    def test_missing_keys_become_none(self) -> None:
        assert build_credential_record({}) == StructuredCredentialRecord()

    def test_blank_strings_become_none(self) -> None:
        record = build_credential_record({"name": "   ", "degree": " BSc "})

        assert record.name is None
        assert record.degree == "BSc"

    def test_numbers_become_text_and_booleans_are_dropped(self) -> None:
        record = build_credential_record({"graduation_date": 2019, "birthplace": True})

        assert record.graduation_date == "2019"
        assert record.birthplace is None

    def test_skips_malformed_course_rows(self) -> None:
        record = build_credential_record(
            {
                "courses": [
                    "not a row",
                    {"course_name": None, "grade_received": None},
                    {"course_name": "Physics", "grade_received": "B", "credits": "three"},
                    {"course_name": "Chemistry", "grade_received": "A", "credits": "3.5"},
                ]
            }
        )

        assert [c.course_name for c in record.courses] == ["Physics", "Chemistry"]
        assert record.courses[0].credits is None
        assert record.courses[1].credits == 3.5

    def test_non_list_courses_become_empty(self) -> None:
        assert build_credential_record({"courses": "none"}).courses == []

    @pytest.mark.parametrize("payload", [[], "text", None, 3])
    def test_non_object_raises(self, payload: object) -> None:
        with pytest.raises(CredentialParseError, match="JSON object"):
            build_credential_record(payload)

    def test_to_dict_round_trips(self) -> None:
        record = build_credential_record(
            {"name": "A", "courses": [{"course_name": "X", "grade_received": "B", "credits": 2}]}
        )
        assert build_credential_record(record.to_dict()) == record

import json
from unittest.mock import MagicMock

import pytest

from casedraft.classification.models import DocumentCategory
from casedraft.evaluation.exceptions import GenerationNetworkError
from casedraft.evaluation.field_extractor import StructuredFieldExtractor
from casedraft.evaluation.models import CourseRecord, StructuredCredentialRecord

_RECORD = StructuredCredentialRecord(
    name="Jane Doe",
    degree="Bachelor of Arts",
    field_of_study="Economics",
    university="University of Lagos",
    graduation_date="2020-06-30",
    diploma_issue_date="2020-07-15",
    birth_date="1998-01-02",
    birthplace="Lagos",
    courses=[
        CourseRecord(course_name="Microeconomics", grade_received="A", us_grade="A", credits=3.0, semester_or_year="2018"),
        CourseRecord(course_name="Statistics", grade_received="B+", us_grade="B+", credits=4.0, semester_or_year="2019"),
    ],
    document_type="transcript_structured_data",
)


def _make_extractor(response: str) -> tuple[StructuredFieldExtractor, MagicMock]:
    client = MagicMock()
    client.generate.return_value = response
    return StructuredFieldExtractor(client=client), client


class TestExtractFields:
    def test_round_trips_serialized_record(self) -> None:
        extractor, _client = _make_extractor(json.dumps(_RECORD.to_dict()))

        record = extractor.extract_fields("transcript text", DocumentCategory.TRANSCRIPT)

        assert record == _RECORD

    def test_strips_code_fences(self) -> None:
        fenced = "```json\n" + json.dumps({"name": "Jane Doe", "courses": []}) + "\n```"
        extractor, _client = _make_extractor(fenced)

        record = extractor.extract_fields("text", DocumentCategory.DIPLOMA)

        assert record is not None
        assert record.name == "Jane Doe"

    def test_finds_object_inside_prose(self) -> None:
        extractor, _client = _make_extractor('Here you go: {"degree": "MSc"} Thanks!')

        record = extractor.extract_fields("text", DocumentCategory.DIPLOMA)

        assert record is not None
        assert record.degree == "MSc"

    @pytest.mark.parametrize("response", ["", "not json at all", "[1, 2]", "{broken"])
    def test_unparseable_response_returns_none(self, response: str) -> None:
        extractor, _client = _make_extractor(response)

        assert extractor.extract_fields("text", DocumentCategory.DIPLOMA) is None

    def test_generation_error_propagates(self) -> None:
        client = MagicMock()
        client.generate.side_effect = GenerationNetworkError("down")
        extractor = StructuredFieldExtractor(client=client)

        with pytest.raises(GenerationNetworkError):
            extractor.extract_fields("text", DocumentCategory.DIPLOMA)

    def test_truncates_source_text(self) -> None:
        client = MagicMock()
        client.generate.return_value = "{}"
        extractor = StructuredFieldExtractor(client=client, max_source_chars=4000)

        extractor.extract_fields("x" * 5000, DocumentCategory.DIPLOMA)

        assert len(client.generate.call_args.kwargs["document_text"]) == 4000

    def test_sends_document_type_and_name(self) -> None:
        extractor, client = _make_extractor("{}")

        extractor.extract_fields("text", DocumentCategory.TRANSCRIPT, "jane.pdf")

        kwargs = client.generate.call_args.kwargs
        assert kwargs["document_type"] == "transcript_structured_data"
        assert kwargs["document_name"] == "jane.pdf"


class TestBuildPrompt:
    def test_transcript_prompt_embeds_schema(self) -> None:
        extractor, _client = _make_extractor("{}")

        prompt = extractor.build_prompt(DocumentCategory.TRANSCRIPT)

        assert "grade_received" in prompt
        assert "transcript_structured_data" in prompt
        assert "{rules}" not in prompt

    def test_generic_prompt_names_category(self) -> None:
        extractor, _client = _make_extractor("{}")

        prompt = extractor.build_prompt(DocumentCategory.RECOMMENDATION_LETTER)

        assert "recommendation letter" in prompt

    @pytest.mark.parametrize(
        ("category", "expected"),
        [
            (DocumentCategory.TRANSCRIPT, "transcript_structured_data"),
            (DocumentCategory.DIPLOMA, "diploma_structured_data"),
            (DocumentCategory.AWARD, "diploma_structured_data"),
        ],
    )
    def test_document_type_for(self, category: DocumentCategory, expected: str) -> None:
        assert StructuredFieldExtractor.document_type_for(category) == expected

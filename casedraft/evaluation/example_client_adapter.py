"""Offline generation client.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in GenerationClientFactory.
"""

import json
from typing import ClassVar

from casedraft.evaluation.client_base import BaseGenerationClient


class ExampleClientAdapter(BaseGenerationClient):
    """Returns fixed responses keyed by document_type. No network calls.

    Structured-data requests receive an all-null credential record so the
    pipeline can run end to end in development and tests.
    """

    EMPTY_RECORD: ClassVar[dict[str, object]] = {
        "name": None,
        "degree": None,
        "field_of_study": None,
        "university": None,
        "graduation_date": None,
        "diploma_issue_date": None,
        "birth_date": None,
        "birthplace": None,
        "courses": [],
        "document_type": None,
    }

    def __init__(self) -> None:
        self.calls: list[str] = []

    def generate(
        self,
        *,
        document_type: str,
        document_name: str,
        document_text: str,
        prompt: str,
    ) -> str:
        _ = document_name, document_text, prompt
        self.calls.append(document_type)
        if document_type.endswith("_structured_data") or document_type.endswith("_data_extraction"):
            return json.dumps(self.EMPTY_RECORD)
        if document_type == "document_summary":
            return json.dumps({"summary": "", "tags": []})
        return f"[example {document_type} output]"

import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from casedraft.config.settings import Settings
from casedraft.database.connection import close_pool, get_connection, init_pool
from casedraft.database.repositories.record_repository import RecordRepository

SCHEMA = """
CREATE TABLE IF NOT EXISTS cases (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    name text NOT NULL,
    visa_type text,
    created_at timestamptz NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS documents (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    case_id uuid REFERENCES cases (id) ON DELETE CASCADE,
    name text NOT NULL,
    type text,
    file_path text,
    extracted_text text,
    category text,
    summary text,
    ai_tags text[],
    processed boolean NOT NULL DEFAULT false,
    created_at timestamptz NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS letters (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    case_id uuid REFERENCES cases (id) ON DELETE CASCADE,
    title text,
    content text,
    visa_type text,
    letter_type text,
    beneficiary_name text,
    tags text[],
    created_at timestamptz NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS evaluation_letters (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    client_name text,
    university text,
    university_location text,
    country text,
    program_length1 text,
    bachelor_degree text,
    degree_date1 text,
    accreditation_body text,
    us_equivalent_degree1 text,
    field_of_study text,
    additional_degree boolean NOT NULL DEFAULT false,
    university2 text,
    degree_date2 text,
    us_equivalent_degree2 text,
    field_of_study2 text,
    specialty text,
    years text,
    work_experience_summary jsonb,
    ai_summary jsonb,
    extracted_text jsonb,
    created_at timestamptz NOT NULL DEFAULT now()
);
CREATE TABLE IF NOT EXISTS evaluation_letter_documents (
    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
    evaluation_letter_id uuid REFERENCES evaluation_letters (id) ON DELETE CASCADE,
    file_name text,
    extracted_text text,
    processed boolean NOT NULL DEFAULT false,
    created_at timestamptz NOT NULL DEFAULT now()
);
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "casedraft_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def repository(integration_pool: None) -> RecordRepository:
    return RecordRepository()


@pytest.fixture
def seed_case(repository: RecordRepository) -> Generator[str, None, None]:
    """A case row; its documents and letters are removed with it."""
    case_id = str(repository.insert("cases", {"name": "Ana Silva", "visa_type": "O-1A"})["id"])
    try:
        yield case_id
    finally:
        repository.delete("cases", case_id)


@pytest.fixture
def seed_evaluation_letter(repository: RecordRepository) -> Generator[str, None, None]:
    letter_id = str(repository.insert("evaluation_letters", {"client_name": None})["id"])
    try:
        yield letter_id
    finally:
        repository.delete("evaluation_letters", letter_id)


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def sample_pdf_on_disk(
    seed_case: str,
    repository: RecordRepository,
    files_root: Path,
    sample_pdf_bytes: bytes,
) -> tuple[str, str]:
    path = files_root / seed_case / "evidence.pdf"
    path.parent.mkdir(parents=True)
    path.write_bytes(sample_pdf_bytes)
    document = repository.insert(
        "documents",
        {
            "case_id": seed_case,
            "name": "evidence.pdf",
            "type": "application/pdf",
            "file_path": f"{seed_case}/evidence.pdf",
        },
    )
    return seed_case, str(document["id"])

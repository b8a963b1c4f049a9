from unittest.mock import MagicMock, patch

import pytest
from psycopg.types.json import Jsonb

from casedraft.database.exceptions import RepositoryError, RowNotFoundError
from casedraft.database.repositories.record_repository import RecordRepository

_GET_CONNECTION = "casedraft.database.repositories.record_repository.get_connection"


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestGet:
    @patch(_GET_CONNECTION)
    def test_returns_row_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {"id": "c1", "name": "Case"}

        row = RecordRepository().get("cases", "c1")

        assert row == {"id": "c1", "name": "Case"}
        query, params = mock_cursor.execute.call_args.args
        assert "Identifier('cases')" in repr(query)
        assert params == ("c1",)

    @patch(_GET_CONNECTION)
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert RecordRepository().get("cases", "missing") is None

    def test_rejects_unknown_table(self) -> None:
        with pytest.raises(RepositoryError, match="Unknown table: accounts"):
            RecordRepository().get("accounts", "1")


class TestList:
    @patch(_GET_CONNECTION)
    def test_applies_filters_and_order(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [{"id": "d1"}, {"id": "d2"}]

        rows = RecordRepository().list("documents", {"case_id": "c1", "processed": True}, descending=True)

        assert rows == [{"id": "d1"}, {"id": "d2"}]
        query, params = mock_cursor.execute.call_args.args
        text = repr(query)
        assert "Identifier('case_id')" in text
        assert "Identifier('processed')" in text
        assert "Identifier('created_at')" in text
        assert "DESC" in text
        assert params == ("c1", True)

    @patch(_GET_CONNECTION)
    def test_without_filters(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        assert RecordRepository().list("letters") == []
        query, params = mock_cursor.execute.call_args.args
        assert "WHERE" not in repr(query)
        assert params == ()

    def test_rejects_invalid_column(self) -> None:
        with pytest.raises(RepositoryError, match="Invalid column name"):
            RecordRepository().list("documents", {"id; DROP TABLE cases": 1})


class TestInsert:
    @patch(_GET_CONNECTION)
    def test_inserts_and_returns_row(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {"id": "l1", "title": "Letter"}

        row = RecordRepository().insert("letters", {"title": "Letter", "tags": ["a", "b"]})

        assert row == {"id": "l1", "title": "Letter"}
        query, params = mock_cursor.execute.call_args.args
        assert "RETURNING *" in repr(query)
        assert params == ("Letter", ["a", "b"])
        mock_conn.commit.assert_called_once()

    @patch(_GET_CONNECTION)
    def test_wraps_json_values(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {"id": "e1"}

        RecordRepository().insert(
            "evaluation_letters",
            {"extracted_data": {"name": "Ana"}, "degrees": [{"degree": "BSc"}]},
        )

        _query, params = mock_cursor.execute.call_args.args
        assert isinstance(params[0], Jsonb)
        assert isinstance(params[1], Jsonb)

    def test_rejects_empty_record(self) -> None:
        with pytest.raises(RepositoryError, match="empty record"):
            RecordRepository().insert("letters", {})


class TestUpdate:
    @patch(_GET_CONNECTION)
    def test_updates_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {"id": "d1", "processed": True}

        row = RecordRepository().update("documents", "d1", {"processed": True, "summary": "ok"})

        assert row["processed"] is True
        _query, params = mock_cursor.execute.call_args.args
        assert params == (True, "ok", "d1")
        mock_conn.commit.assert_called_once()

    @patch(_GET_CONNECTION)
    def test_missing_row_rolls_back_and_raises(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        with pytest.raises(RowNotFoundError, match="documents row d9 not found"):
            RecordRepository().update("documents", "d9", {"processed": True})
        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()

    def test_rejects_empty_patch(self) -> None:
        with pytest.raises(RepositoryError, match="Empty patch"):
            RecordRepository().update("documents", "d1", {})


class TestDelete:
    @patch(_GET_CONNECTION)
    def test_deletes_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        RecordRepository().delete("cases", "c1")

        _query, params = mock_cursor.execute.call_args.args
        assert params == ("c1",)
        mock_conn.commit.assert_called_once()

    @patch(_GET_CONNECTION)
    def test_missing_row_raises(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        with pytest.raises(RowNotFoundError, match="cases row c9 not found"):
            RecordRepository().delete("cases", "c9")

"""Row-oriented CRUD over the case-preparation tables."""

import re
from collections.abc import Mapping
from typing import Any, ClassVar

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from casedraft.database.connection import get_connection
from casedraft.database.exceptions import RepositoryError, RowNotFoundError

Record = dict[str, Any]

_COLUMN_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


class RecordRepository:
    """get/list/insert/update/delete keyed by UUID.

    Table names are checked against a fixed whitelist and column names
    against a strict pattern; all identifiers are composed with
    ``psycopg.sql.Identifier``.
    """

    TABLES: ClassVar[frozenset[str]] = frozenset(
        {
            "cases",
            "documents",
            "letters",
            "evaluation_letters",
            "evaluation_letter_documents",
        }
    )

    def get(self, table: str, record_id: str) -> Record | None:
        query = sql.SQL("SELECT * FROM {} WHERE id = %s").format(self._table(table))
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (record_id,))
                row = cur.fetchone()
        return dict(row) if row is not None else None

    def list(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = False,
    ) -> list[Record]:
        """Rows matching every equality filter, ordered by a timestamp column."""
        query = sql.SQL("SELECT * FROM {}").format(self._table(table))
        params: list[Any] = []
        if filters:
            conditions = []
            for column, value in filters.items():
                conditions.append(sql.SQL("{} = %s").format(self._column(column)))
                params.append(value)
            query += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
        direction = sql.SQL("DESC" if descending else "ASC")
        query += sql.SQL(" ORDER BY {} {}").format(self._column(order_by), direction)

        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, tuple(params))
                rows = cur.fetchall()
        return [dict(row) for row in rows]

    def insert(self, table: str, record: Mapping[str, Any]) -> Record:
        if not record:
            raise RepositoryError(f"Cannot insert an empty record into {table}")
        columns = [self._column(column) for column in record]
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            self._table(table),
            sql.SQL(", ").join(columns),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        params = tuple(_adapt(value) for value in record.values())
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RepositoryError(f"Insert into {table} returned no row")
        return dict(row)

    def update(self, table: str, record_id: str, patch: Mapping[str, Any]) -> Record:
        """Apply a patch to one row and return the updated row.

        Raises:
            RowNotFoundError: if no row has this id.
        """
        if not patch:
            raise RepositoryError(f"Empty patch for {table} {record_id}")
        assignments = [sql.SQL("{} = %s").format(self._column(column)) for column in patch]
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s RETURNING *").format(
            self._table(table),
            sql.SQL(", ").join(assignments),
        )
        params = (*(_adapt(value) for value in patch.values()), record_id)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            if row is None:
                conn.rollback()
                raise RowNotFoundError(f"{table} row {record_id} not found")
            conn.commit()
        return dict(row)

    def delete(self, table: str, record_id: str) -> None:
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(self._table(table))
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (record_id,))
                if cur.rowcount == 0:
                    raise RowNotFoundError(f"{table} row {record_id} not found")
            conn.commit()

    def _table(self, table: str) -> sql.Identifier:
        if table not in self.TABLES:
            raise RepositoryError(f"Unknown table: {table}")
        return sql.Identifier(table)

    @staticmethod
    def _column(column: str) -> sql.Identifier:
        if not _COLUMN_RE.match(column):
            raise RepositoryError(f"Invalid column name: {column!r}")
        return sql.Identifier(column)


def _adapt(value: Any) -> Any:
    if isinstance(value, dict):
        return Jsonb(value)
    if isinstance(value, list) and any(isinstance(item, dict) for item in value):
        return Jsonb(value)
    return value

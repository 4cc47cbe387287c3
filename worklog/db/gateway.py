"""
Query gateway shared by pooled and transactional database handles.

SQL is written with portable ``?`` markers which are rewritten left to right
into numbered SQLAlchemy bind parameters (``:p1``, ``:p2``, ...). Each physical
connection keeps a memo of parsed ``text()`` clauses keyed by the rewritten
SQL text, so a statement is parsed once per connection and reused afterwards.
Server-side preparation is left to the driver.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import Connection, TextClause, text

from worklog.core.logging import get_logger
from worklog.db.errors import QueryParameterError

logger = get_logger(__name__)

Row = dict[str, Any]

# Key under which the statement cache lives in the DBAPI connection's info dict
STATEMENT_CACHE_KEY = "worklog.statement_cache"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class PreparedStatement:
    """
    A parsed ``text()`` clause memoized for one physical connection.

    ``name`` only labels the entry in debug logs. Nothing is prepared on the
    server; the driver sees an ordinary parameterized statement.
    """

    name: str
    sql: str
    clause: TextClause


class StatementCache:
    """Per-connection memo of parsed clauses, keyed by rewritten SQL text."""

    def __init__(self) -> None:
        self._statements: dict[str, PreparedStatement] = {}
        self._next = 1

    def prepare(self, sql: str) -> PreparedStatement:
        """Return the cached statement for ``sql``, preparing it on first use."""
        statement = self._statements.get(sql)
        if statement is None:
            statement = PreparedStatement(name=f"q{self._next}", sql=sql, clause=text(sql))
            self._next += 1
            self._statements[sql] = statement
            logger.debug(f"Prepared statement {statement.name}: {sql}")
        return statement

    def __contains__(self, sql: object) -> bool:
        return sql in self._statements

    def __len__(self) -> int:
        return len(self._statements)


def rewrite_placeholders(sql: str) -> tuple[str, int]:
    """
    Rewrite ``?`` markers into ``:p1 .. :pN``.

    Markers inside quoted literals or identifiers are left alone, and colons
    inside literals are escaped so SQLAlchemy does not read them as binds.

    Returns:
        The rewritten SQL and the number of markers found
    """
    parts: list[str] = []
    count = 0
    quote: Optional[str] = None

    for char in sql:
        if quote:
            if char == quote:
                quote = None
            elif char == ":" and quote == "'":
                parts.append("\\")
            parts.append(char)
        elif char in ("'", '"'):
            quote = char
            parts.append(char)
        elif char == "?":
            count += 1
            parts.append(f":p{count}")
        else:
            parts.append(char)

    return "".join(parts), count


def normalize_params(params: Optional[Sequence[Any]]) -> list[Any]:
    """Copy the parameter list, binding empty strings and missing values as NULL."""
    if params is None:
        return []
    if isinstance(params, (str, bytes, Mapping)):
        raise TypeError("Query parameters must be a sequence of values")
    return [None if value is None or value == "" else value for value in params]


def run_statement(connection: Connection, sql: str, params: Mapping[str, Any]) -> list[Row]:
    """Execute rewritten SQL on ``connection`` through its statement cache."""
    cache = connection.info.get(STATEMENT_CACHE_KEY)
    if cache is None:
        cache = connection.info[STATEMENT_CACHE_KEY] = StatementCache()

    statement = cache.prepare(sql)
    result = connection.execute(statement.clause, dict(params))
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings()]


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


class QueryExecutor(ABC):
    """
    The query surface shared by ``Database`` and ``TransactionalConnection``.

    Subclasses only provide ``_run``; everything else is derived here, so
    callers never need to know which kind of handle they hold.
    """

    @abstractmethod
    def _run(self, sql: str, params: Mapping[str, Any]) -> list[Row]:
        """Execute already rewritten SQL with named parameters."""

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Row]:
        """
        Run a query and return its rows.

        Raises:
            QueryParameterError: If the values do not match the ``?`` markers
        """
        rewritten, marker_count = rewrite_placeholders(sql)
        values = normalize_params(params)
        if len(values) != marker_count:
            raise QueryParameterError(
                f"Expected {marker_count} parameter(s), got {len(values)}"
            )
        bound = {f"p{index}": value for index, value in enumerate(values, start=1)}
        return self._run(rewritten, bound)

    def query_row(self, sql: str, params: Optional[Sequence[Any]] = None) -> Optional[Row]:
        """Run a query and return the first row, or None."""
        rows = self.query(sql, params)
        return rows[0] if rows else None

    def query_value(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Run a query and return the first field of the first row, or None."""
        row = self.query_row(sql, params)
        if row is None:
            return None
        return next(iter(row.values()), None)

    def query_vector(self, sql: str, params: Optional[Sequence[Any]] = None) -> list[Any]:
        """Run a query and return the first field of every row."""
        return [next(iter(row.values()), None) for row in self.query(sql, params)]

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        """Run a statement and discard any result."""
        self.query(sql, params)

    def insert(
        self,
        table: str,
        fields: Mapping[str, Any],
        return_id: bool = False,
    ) -> Optional[int]:
        """
        Insert a row built from ``fields``.

        Returns:
            The generated ``id`` when ``return_id`` is set, otherwise None
        """
        columns = [_check_identifier(name) for name in fields]
        sql = (
            f"INSERT INTO {_check_identifier(table)} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        if return_id:
            sql += " RETURNING id"

        rows = self.query(sql, list(fields.values()))
        if return_id:
            return rows[0]["id"]
        return None

    def update(self, table: str, row_id: Any, fields: Mapping[str, Any]) -> None:
        """Update a row by id. An empty field set issues no statement."""
        if not fields:
            return

        assignments = ", ".join(f"{_check_identifier(name)} = ?" for name in fields)
        sql = f"UPDATE {_check_identifier(table)} SET {assignments} WHERE id = ?"
        self.execute(sql, [*fields.values(), row_id])

    def delete(self, table: str, row_id: Any) -> None:
        """Delete a row by id."""
        self.execute(f"DELETE FROM {_check_identifier(table)} WHERE id = ?", [row_id])

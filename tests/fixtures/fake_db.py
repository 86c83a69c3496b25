"""Resource-tracking fake DB-API connection for testing without a database."""

import re
from typing import Any, Dict, List, Optional, Sequence


def _squash(sql: str) -> str:
    return " ".join(sql.split())


def numbered_rows(count: int) -> List[tuple]:
    return [(i, f"row{i}") for i in range(1, count + 1)]


class FakeDatabase:
    """Scripted DB-API backend.

    Results are matched by regex against the executed SQL (whitespace
    collapsed). Every connection and cursor handed out is remembered, so
    tests can assert that all of them were closed.
    """

    def __init__(self):
        self._pattern_results: List[tuple] = []  # (pattern, columns, rows, error, fail_after)
        self.connections: List["FakeConnection"] = []
        self.executed: List[Dict[str, Any]] = []

    def add_result(self, sql_pattern: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]):
        """Return ``rows`` for statements matching ``sql_pattern``."""
        self._pattern_results.append((re.compile(sql_pattern, re.IGNORECASE), list(columns), list(rows), None, None))

    def add_error(
        self,
        sql_pattern: str,
        error: Exception,
        rows: Sequence[Sequence[Any]] = (),
        fail_after: Optional[int] = None,
    ):
        """Raise ``error`` on execute, or on the fetch after ``fail_after`` of ``rows``."""
        self._pattern_results.append(
            (re.compile(sql_pattern, re.IGNORECASE), ["id", "name"], list(rows), error, fail_after)
        )

    def add_rows(self, sql_pattern: str, count: int):
        self.add_result(sql_pattern, ["id", "name"], numbered_rows(count))

    def lookup(self, sql: str):
        for pattern, columns, rows, error, fail_after in self._pattern_results:
            if pattern.search(_squash(sql)):
                return columns, rows, error, fail_after
        return [], [], None, None

    def connect(self) -> "FakeConnection":
        connection = FakeConnection(self)
        self.connections.append(connection)
        return connection

    @property
    def cursors(self) -> List["FakeCursor"]:
        return [c for conn in self.connections for c in conn.cursors]

    @property
    def all_closed(self) -> bool:
        return all(c.closed for c in self.connections) and all(c.closed for c in self.cursors)

    @property
    def statements(self) -> List[str]:
        return [_squash(e["sql"]) for e in self.executed]

    def last_statement(self, pattern: str) -> Dict[str, Any]:
        """Most recent execute() whose SQL matches ``pattern``."""
        for entry in reversed(self.executed):
            if re.search(pattern, _squash(entry["sql"]), re.IGNORECASE):
                return entry
        raise AssertionError(f"no statement matching {pattern!r} in {self.statements}")


class FakeConnection:
    def __init__(self, database: FakeDatabase):
        self.database = database
        self.cursors: List[FakeCursor] = []
        self.closed = False
        self.call_timeout = 0

    def cursor(self, name: Optional[str] = None) -> "FakeCursor":
        cursor = FakeCursor(self, name=name)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.closed = True


class FakeCursor:
    def __init__(self, connection: FakeConnection, name: Optional[str] = None):
        self.connection = connection
        self.name = name
        self.closed = False
        self.description = None
        self._columns: List[str] = []
        self._rows: List[Sequence[Any]] = []
        self._position = 0
        self._error = None
        self._fail_after = None

    def execute(self, sql: str, params: Any = None):
        self.connection.database.executed.append({"sql": sql, "params": params, "cursor": self.name})
        columns, rows, error, fail_after = self.connection.database.lookup(sql)
        if error is not None and fail_after is None:
            raise error
        self._columns, self._rows = columns, rows
        self._error, self._fail_after = error, fail_after
        self._position = 0
        # Named (server-side) cursors only know their description after the first fetch
        if self.name is None:
            self.description = [(c, None, None, None, None, None, None) for c in columns]

    def fetchmany(self, size: int = 1):
        if self._error is not None and self._position >= self._fail_after:
            raise self._error
        end = self._position + size
        if self._fail_after is not None:
            end = min(end, self._fail_after)
        batch = [tuple(r) for r in self._rows[self._position:end]]
        self._position += len(batch)
        self.description = [(c, None, None, None, None, None, None) for c in self._columns]
        return batch

    def close(self):
        self.closed = True

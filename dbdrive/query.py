"""Row streaming query execution.

Runs one SQL statement with named parameters on a fresh DB-API
connection and yields a plain ``dict`` per result row. The connection,
the cursor and the result set live exactly as long as the returned
generator: they are released when the rows are exhausted, when the
consumer stops pulling (``close()`` / garbage collection of the
generator) and when an error is raised mid-stream.
"""

import datetime
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .errors import BackendError, DriveError, UnsupportedParameterTypeError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60
DEFAULT_MAX_READ_RESULT = 100
DEFAULT_BULK_READ_LIMIT = 50

# One result row: column name -> None | bool | int | float | str | date | datetime | bytes
Row = Dict[str, Any]


class ParameterType(str, Enum):
    """Backend-neutral parameter types."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BINARY = "binary"
    GUID = "guid"


# Keyed by runtime type; lookups walk the MRO so bool resolves before int
# and datetime before date.
PARAMETER_TYPES: Mapping[type, ParameterType] = {
    type(None): ParameterType.NULL,
    bool: ParameterType.BOOLEAN,
    int: ParameterType.INTEGER,
    float: ParameterType.FLOAT,
    Decimal: ParameterType.DECIMAL,
    str: ParameterType.STRING,
    datetime.datetime: ParameterType.DATETIME,
    datetime.date: ParameterType.DATE,
    datetime.time: ParameterType.TIME,
    bytes: ParameterType.BINARY,
    bytearray: ParameterType.BINARY,
    memoryview: ParameterType.BINARY,
    uuid.UUID: ParameterType.GUID,
}


@dataclass(frozen=True)
class BoundParameter:
    """A named parameter resolved against the type map."""
    name: str
    parameter_type: ParameterType
    value: Any

    def to_driver_value(self) -> Any:
        """Value in the form DB-API drivers accept."""
        if self.parameter_type == ParameterType.GUID:
            return str(self.value)
        if self.parameter_type == ParameterType.BINARY and not isinstance(self.value, bytes):
            return bytes(self.value)
        return self.value


def parameter_type_of(value: Any) -> Optional[ParameterType]:
    """Resolve the parameter type of a value, or None when unmapped."""
    for klass in type(value).__mro__:
        parameter_type = PARAMETER_TYPES.get(klass)
        if parameter_type is not None:
            return parameter_type
    return None


def bind_parameters(parameters: Optional[Mapping[str, Any]]) -> List[BoundParameter]:
    """Bind every named parameter or fail before any I/O happens.

    Raises:
        UnsupportedParameterTypeError: if a value's type is not in the map
    """
    bound = []
    for name, value in (parameters or {}).items():
        parameter_type = parameter_type_of(value)
        if parameter_type is None:
            raise UnsupportedParameterTypeError(name, type(value))
        bound.append(BoundParameter(name=name, parameter_type=parameter_type, value=value))
    return bound


def to_scalar(value: Any) -> Any:
    """Normalize a fetched value into a plain scalar.

    Keeps None, bool, int, float, str, date and datetime as they are;
    integral decimals become int, other decimals float; binary buffers
    become bytes; LOB-like objects are read; anything else is rendered
    with str().
    """
    if value is None or isinstance(value, (bool, int, float, str, datetime.date)):
        return value
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if hasattr(value, "read"):
        return to_scalar(value.read())
    return str(value)


ConnectionFactory = Callable[[], Any]
TimeoutHandler = Callable[[Any, Any, int], None]
CursorFactory = Callable[[Any], Any]


class QueryExecutor:
    """Executes SQL and streams rows as dictionaries.

    The executor is stateless between calls; every ``execute`` opens its
    own connection through ``connection_factory``.
    """

    def __init__(
        self,
        connection_factory: ConnectionFactory,
        timeout_handler: Optional[TimeoutHandler] = None,
        cursor_factory: Optional[CursorFactory] = None,
        batch_size: int = DEFAULT_BULK_READ_LIMIT,
    ):
        """Initialize the executor.

        Args:
            connection_factory: Returns a new, open DB-API connection
            timeout_handler: Applies the per-statement timeout to a
                (connection, cursor) pair; backends without timeouts omit it
            cursor_factory: Creates the cursor used for the statement
                (defaults to ``connection.cursor()``)
            batch_size: Rows fetched per round trip
        """
        self.connection_factory = connection_factory
        self.timeout_handler = timeout_handler
        self.cursor_factory = cursor_factory
        self.batch_size = batch_size if batch_size > 0 else DEFAULT_BULK_READ_LIMIT

    def execute(
        self,
        sql: str,
        parameters: Optional[Mapping[str, Any]] = None,
        timeout: int = DEFAULT_TIMEOUT,
        max_result: int = 0,
    ) -> Iterator[Row]:
        """Execute a statement and return a lazy, single-pass row iterator.

        Parameters are bound eagerly, so an unsupported parameter type
        raises here, before a connection is opened. Iterating again
        requires calling ``execute`` again.

        Args:
            sql: SQL text using the backend's named placeholder style
            parameters: Named parameter values
            timeout: Seconds allowed for the statement
            max_result: Stop after this many rows; zero or less means all rows

        Returns:
            Iterator of ordered ``{column: value}`` dictionaries
        """
        bound = bind_parameters(parameters)
        return self._stream(sql, bound, timeout, max_result)

    def _stream(
        self,
        sql: str,
        bound: List[BoundParameter],
        timeout: int,
        max_result: int,
    ) -> Iterator[Row]:
        logger.debug("execute: sql=%s parameters=%s", " ".join(sql.split()), [p.name for p in bound])
        connection = None
        cursor = None
        count = 0
        try:
            try:
                connection = self.connection_factory()
                cursor = self.cursor_factory(connection) if self.cursor_factory else connection.cursor()
                if self.timeout_handler is not None:
                    self.timeout_handler(connection, cursor, timeout)
                if bound:
                    cursor.execute(sql, {p.name: p.to_driver_value() for p in bound})
                else:
                    cursor.execute(sql)
            except DriveError:
                raise
            except Exception as e:
                raise BackendError(f"Failed to execute query: {e}", details={"sql": sql}, source=e) from e

            columns = None
            while True:
                try:
                    batch = cursor.fetchmany(self.batch_size)
                    if columns is None:
                        columns = [d[0] for d in cursor.description or ()]
                except Exception as e:
                    raise BackendError(f"Failed to fetch rows: {e}", details={"sql": sql}, source=e) from e
                if not batch:
                    return
                for values in batch:
                    yield dict(zip(columns, (to_scalar(v) for v in values)))
                    count += 1
                    if 0 < max_result <= count:
                        return
        finally:
            _release(cursor, connection)
            logger.debug("execute: released after %d rows", count)


def _release(cursor: Any, connection: Any) -> None:
    """Close cursor then connection; a failing close never masks the other."""
    if cursor is not None:
        try:
            cursor.close()
        except Exception as e:
            logger.warning("Failed to close cursor: %s", e)
    if connection is not None:
        try:
            connection.close()
        except Exception as e:
            logger.warning("Failed to close connection: %s", e)

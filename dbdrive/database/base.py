"""Abstract base class for catalog drivers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..errors import BackendError
from ..paths import ObjectType, validate_name
from ..query import (
    DEFAULT_BULK_READ_LIMIT,
    DEFAULT_MAX_READ_RESULT,
    DEFAULT_TIMEOUT,
    ConnectionFactory,
    QueryExecutor,
    Row,
)
from .models import ColumnInfo, SchemaInfo, TableInfo, ViewInfo
from .type_mappers import TypeMapper

logger = logging.getLogger(__name__)


class CatalogDriver(ABC):
    """Abstract base class for browsing a database catalog.

    A driver translates the catalog operations into backend SQL. Subclasses
    provide the SQL text (as class attributes, in the backend's named
    placeholder style), open connections, and build metadata objects from
    result rows; the operations themselves are implemented here.

    SQL templates may use ``{fold}`` around compared names: it expands to
    nothing for case-sensitive matching and to ``FOLD_FUNCTION`` otherwise,
    e.g. ``{fold}(USERNAME) = {fold}(:schemaname)``.

    Every call opens and releases its own connection, so an instance holds
    no connection between calls. An instance is not meant to be shared
    between threads.
    """

    PROVIDER: str = ""
    CASE_SENSITIVE: bool = True
    FOLD_FUNCTION: str = "UPPER"

    # Override in subclasses to hide system schemas
    EXCLUDED_SCHEMAS: set = set()

    SELECT_SCHEMAS: str = ""
    SELECT_SCHEMA: str = ""
    SELECT_SCHEMA_EXISTS: str = ""
    SELECT_SCHEMA_NAMES: str = ""
    SELECT_SCHEMA_NAMES_REGEXP: str = ""

    SELECT_TABLES: str = ""
    SELECT_TABLE: str = ""
    SELECT_TABLE_EXISTS: str = ""
    SELECT_TABLE_NAMES: str = ""
    SELECT_TABLE_NAMES_REGEXP: str = ""

    SELECT_VIEWS: str = ""
    SELECT_VIEW: str = ""
    SELECT_VIEW_EXISTS: str = ""
    SELECT_VIEW_NAMES: str = ""
    SELECT_VIEW_NAMES_REGEXP: str = ""

    SELECT_COLUMNS: str = ""

    def __init__(
        self,
        connection_string: Optional[str] = None,
        connection_factory: Optional[ConnectionFactory] = None,
        timeout: int = DEFAULT_TIMEOUT,
        max_read_result: int = DEFAULT_MAX_READ_RESULT,
        bulk_read_limit: int = DEFAULT_BULK_READ_LIMIT,
        case_sensitive: Optional[bool] = None,
    ):
        """Initialize the driver.

        Args:
            connection_string: Backend connection string, already validated
            connection_factory: Returns a new open DB-API connection; when
                given it replaces the backend library's connect call
            timeout: Seconds allowed for each SQL statement
            max_read_result: Default row cap for ``stream_rows``
            bulk_read_limit: Rows fetched per round trip
            case_sensitive: Name matching policy (default: the backend's)
        """
        self.connection_string = connection_string
        self._connection_factory = connection_factory
        self.timeout = timeout
        self.max_read_result = max_read_result
        self.bulk_read_limit = bulk_read_limit
        self.case_sensitive = self.CASE_SENSITIVE if case_sensitive is None else case_sensitive
        self._type_mapper = self.create_type_mapper()

    # Connection handling

    def connect(self):
        """Open a new DB-API connection."""
        if self._connection_factory is not None:
            return self._connection_factory()
        return self._open_connection()

    @abstractmethod
    def _open_connection(self):
        """Open a connection with the backend library."""
        pass

    @abstractmethod
    def create_type_mapper(self) -> TypeMapper:
        """Return the type mapper for this backend's column metadata."""
        pass

    def apply_timeout(self, connection, cursor, timeout: int) -> None:
        """Bound the statement about to run on ``cursor`` by ``timeout`` seconds."""
        pass

    def open_cursor(self, connection):
        """Create the cursor rows are streamed from."""
        return connection.cursor()

    @property
    def executor(self) -> QueryExecutor:
        return QueryExecutor(
            self.connect,
            timeout_handler=self.apply_timeout,
            cursor_factory=self.open_cursor,
            batch_size=self.bulk_read_limit,
        )

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    # Query helpers

    def _sql(self, template: str) -> str:
        if not template:
            raise BackendError(f"{type(self).__name__} does not support this catalog query")
        return template.format(fold="" if self.case_sensitive else self.FOLD_FUNCTION)

    def _query(self, template: str, parameters: Optional[Dict[str, Any]] = None, max_result: int = 0) -> Iterator[Row]:
        return self.executor.execute(self._sql(template), parameters, timeout=self.timeout, max_result=max_result)

    def _first(self, template: str, parameters: Dict[str, Any]) -> Optional[Row]:
        rows = self._query(template, parameters, max_result=1)
        try:
            return next(rows, None)
        finally:
            rows.close()

    def _names(self, template: str, parameters: Dict[str, Any]) -> Iterator[str]:
        for row in self._query(template, parameters):
            yield next(iter(row.values()))

    # Builders

    @abstractmethod
    def _build_schema(self, row: Row) -> SchemaInfo:
        pass

    @abstractmethod
    def _build_table(self, row: Row) -> TableInfo:
        pass

    @abstractmethod
    def _build_view(self, row: Row) -> ViewInfo:
        pass

    @abstractmethod
    def _build_column(self, row: Row) -> ColumnInfo:
        pass

    def _is_excluded(self, schema_name: str) -> bool:
        return schema_name.lower() in {s.lower() for s in self.EXCLUDED_SCHEMAS}

    # Schemas

    def list_schemas(self) -> Iterator[SchemaInfo]:
        """Stream all user schemas."""
        for row in self._query(self.SELECT_SCHEMAS):
            schema = self._build_schema(row)
            if not self._is_excluded(schema.schema_name):
                yield schema

    def get_schema(self, schema_name: str) -> Optional[SchemaInfo]:
        """Return the named schema, or None if it does not exist."""
        row = self._first(self.SELECT_SCHEMA, {"schemaname": schema_name})
        return self._build_schema(row) if row is not None else None

    def schema_exists(self, schema_name: str) -> bool:
        return self._first(self.SELECT_SCHEMA_EXISTS, {"schemaname": schema_name}) is not None

    def list_schema_names(self, pattern: Optional[str] = None) -> Iterator[str]:
        """Stream schema names, optionally filtered by a server-side regular expression."""
        if pattern:
            names = self._names(self.SELECT_SCHEMA_NAMES_REGEXP, {"regexp": pattern})
        else:
            names = self._names(self.SELECT_SCHEMA_NAMES, {})
        for name in names:
            if not self._is_excluded(name):
                yield name

    def supported_object_types(self, schema_name: str) -> List[ObjectType]:
        """Object types that have a node under the given schema."""
        return list(ObjectType)

    # Columns

    def list_columns(self, schema_name: str, object_name: str) -> List[ColumnInfo]:
        """Columns of a table or view, in declaration order."""
        rows = self._query(self.SELECT_COLUMNS, {"schemaname": schema_name, "tablename": object_name})
        return [self._build_column(row) for row in rows]

    # Tables

    def list_tables(self, schema_name: str) -> Iterator[TableInfo]:
        """Stream the tables of a schema with their columns populated."""
        for row in self._query(self.SELECT_TABLES, {"schemaname": schema_name}):
            table = self._build_table(row)
            table.columns = self.list_columns(schema_name, table.table_name)
            yield table

    def get_table(self, schema_name: str, table_name: str) -> Optional[TableInfo]:
        """Return the named table with its columns, or None."""
        row = self._first(self.SELECT_TABLE, {"schemaname": schema_name, "tablename": table_name})
        if row is None:
            return None
        table = self._build_table(row)
        table.columns = self.list_columns(table.schema_name, table.table_name)
        return table

    def table_exists(self, schema_name: str, table_name: str) -> bool:
        row = self._first(self.SELECT_TABLE_EXISTS, {"schemaname": schema_name, "tablename": table_name})
        return row is not None

    def list_table_names(self, schema_name: str, pattern: Optional[str] = None) -> Iterator[str]:
        """Stream table names, optionally filtered by a server-side regular expression."""
        if pattern:
            return self._names(self.SELECT_TABLE_NAMES_REGEXP, {"schemaname": schema_name, "regexp": pattern})
        return self._names(self.SELECT_TABLE_NAMES, {"schemaname": schema_name})

    # Views

    def list_views(self, schema_name: str) -> Iterator[ViewInfo]:
        """Stream the views of a schema with their columns populated."""
        for row in self._query(self.SELECT_VIEWS, {"schemaname": schema_name}):
            view = self._build_view(row)
            view.columns = self.list_columns(schema_name, view.view_name)
            yield view

    def get_view(self, schema_name: str, view_name: str) -> Optional[ViewInfo]:
        """Return the named view with its columns, or None."""
        row = self._first(self.SELECT_VIEW, {"schemaname": schema_name, "viewname": view_name})
        if row is None:
            return None
        view = self._build_view(row)
        view.columns = self.list_columns(view.schema_name, view.view_name)
        return view

    def view_exists(self, schema_name: str, view_name: str) -> bool:
        row = self._first(self.SELECT_VIEW_EXISTS, {"schemaname": schema_name, "viewname": view_name})
        return row is not None

    def list_view_names(self, schema_name: str, pattern: Optional[str] = None) -> Iterator[str]:
        """Stream view names, optionally filtered by a server-side regular expression."""
        if pattern:
            return self._names(self.SELECT_VIEW_NAMES_REGEXP, {"schemaname": schema_name, "regexp": pattern})
        return self._names(self.SELECT_VIEW_NAMES, {"schemaname": schema_name})

    # Objects and rows

    def object_exists(self, schema_name: str, object_type: ObjectType, object_path: Sequence[str]) -> bool:
        if not object_path:
            return False
        if object_type == ObjectType.TABLE:
            return self.table_exists(schema_name, object_path[0])
        if object_type == ObjectType.VIEW:
            return self.view_exists(schema_name, object_path[0])
        return False

    def resolve_object_name(self, schema_name: str, object_name: str) -> Tuple[str, str]:
        """Catalog spelling of a table or view name.

        Quoted identifiers match exactly, so a case-insensitive lookup has
        to be mapped back to the stored names before the row listing is
        built. Names that match nothing are returned unchanged.
        """
        if self.case_sensitive:
            return schema_name, object_name
        row = self._first(self.SELECT_TABLE, {"schemaname": schema_name, "tablename": object_name})
        if row is not None:
            table = self._build_table(row)
            return table.schema_name, table.table_name
        row = self._first(self.SELECT_VIEW, {"schemaname": schema_name, "viewname": object_name})
        if row is not None:
            view = self._build_view(row)
            return view.schema_name, view.view_name
        return schema_name, object_name

    def select_rows_sql(self, schema_name: str, object_name: str) -> str:
        """Row listing statement; both identifiers are name-validated first."""
        schema = self.quote_identifier(validate_name(schema_name))
        name = self.quote_identifier(validate_name(object_name))
        return f"SELECT * FROM {schema}.{name}"

    def stream_rows(self, schema_name: str, object_name: str, max_result: Optional[int] = None) -> Iterator[Row]:
        """Stream the rows of a table or view.

        Args:
            schema_name: Schema name
            object_name: Table or view name
            max_result: Row cap (default ``max_read_result``); zero or less
                streams every row

        Returns:
            Iterator of ``{column: value}`` dictionaries
        """
        validate_name(schema_name)
        validate_name(object_name)
        sql = self.select_rows_sql(*self.resolve_object_name(schema_name, object_name))
        if max_result is None:
            max_result = self.max_read_result
        logger.debug("stream_rows: %s.%s max_result=%s", schema_name, object_name, max_result)
        return self.executor.execute(sql, timeout=self.timeout, max_result=max_result)

"""DuckDB catalog driver."""

from typing import Optional

from .base import CatalogDriver
from .models import DuckDBColumnInfo, DuckDBSchemaInfo, DuckDBTableInfo, DuckDBViewInfo
from .type_mappers import DuckDBTypeMapper

MEMORY_DATABASE = ":memory:"


def parse_database_path(connection_string: Optional[str]) -> str:
    """Extract the database file from a path or a ``duckdb:///`` URL."""
    if not connection_string:
        return MEMORY_DATABASE
    path = connection_string
    # Remove duckdb:/// prefix if present
    if path.startswith('duckdb:///'):
        path = path[10:]
    elif path.startswith('duckdb://'):
        path = path[9:]
    # Remove query parameters if any
    if '?' in path:
        path = path.split('?')[0]
    return path or MEMORY_DATABASE


class DuckDBDriver(CatalogDriver):
    """Catalog driver for an embedded DuckDB database.

    The catalog comes from ``information_schema`` restricted to the current
    database, enriched with ``duckdb_tables()`` / ``duckdb_views()``. DuckDB
    resolves identifiers case-insensitively, so names are matched the same
    way by default.
    """

    PROVIDER = "duckdb"
    CASE_SENSITIVE = False
    FOLD_FUNCTION = "lower"

    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog'}

    SELECT_SCHEMAS = """
        SELECT schema_name, catalog_name, schema_owner
        FROM information_schema.schemata
        WHERE catalog_name = current_database()
        ORDER BY schema_name
    """
    SELECT_SCHEMA = """
        SELECT schema_name, catalog_name, schema_owner
        FROM information_schema.schemata
        WHERE catalog_name = current_database()
          AND {fold}(schema_name) = {fold}($schemaname)
    """
    SELECT_SCHEMA_EXISTS = """
        SELECT 1 FROM information_schema.schemata
        WHERE catalog_name = current_database()
          AND {fold}(schema_name) = {fold}($schemaname)
    """
    SELECT_SCHEMA_NAMES = """
        SELECT schema_name FROM information_schema.schemata
        WHERE catalog_name = current_database()
        ORDER BY schema_name
    """
    SELECT_SCHEMA_NAMES_REGEXP = """
        SELECT schema_name FROM information_schema.schemata
        WHERE catalog_name = current_database()
          AND regexp_matches(schema_name, $regexp)
        ORDER BY schema_name
    """

    _TABLE_FROM = """
        SELECT t.table_catalog, t.table_schema, t.table_name,
               d.estimated_size AS row_count, d.column_count,
               d.has_primary_key, d.temporary
        FROM information_schema.tables t
        LEFT JOIN duckdb_tables() d
          ON d.database_name = t.table_catalog
         AND d.schema_name = t.table_schema
         AND d.table_name = t.table_name
        WHERE t.table_type = 'BASE TABLE'
          AND t.table_catalog = current_database()
    """
    SELECT_TABLES = _TABLE_FROM + """
          AND {fold}(t.table_schema) = {fold}($schemaname)
        ORDER BY t.table_name
    """
    SELECT_TABLE = _TABLE_FROM + """
          AND {fold}(t.table_schema) = {fold}($schemaname)
          AND {fold}(t.table_name) = {fold}($tablename)
    """
    SELECT_TABLE_EXISTS = """
        SELECT 1 FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
          AND {fold}(table_name) = {fold}($tablename)
    """
    SELECT_TABLE_NAMES = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
        ORDER BY table_name
    """
    SELECT_TABLE_NAMES_REGEXP = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
          AND regexp_matches(table_name, $regexp)
        ORDER BY table_name
    """

    _VIEW_FROM = """
        SELECT t.table_catalog, t.table_schema, t.table_name,
               v.sql AS view_definition, v.temporary
        FROM information_schema.tables t
        LEFT JOIN duckdb_views() v
          ON v.database_name = t.table_catalog
         AND v.schema_name = t.table_schema
         AND v.view_name = t.table_name
        WHERE t.table_type = 'VIEW'
          AND t.table_catalog = current_database()
    """
    SELECT_VIEWS = _VIEW_FROM + """
          AND {fold}(t.table_schema) = {fold}($schemaname)
        ORDER BY t.table_name
    """
    SELECT_VIEW = _VIEW_FROM + """
          AND {fold}(t.table_schema) = {fold}($schemaname)
          AND {fold}(t.table_name) = {fold}($viewname)
    """
    SELECT_VIEW_EXISTS = """
        SELECT 1 FROM information_schema.tables
        WHERE table_type = 'VIEW'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
          AND {fold}(table_name) = {fold}($viewname)
    """
    SELECT_VIEW_NAMES = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'VIEW'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
        ORDER BY table_name
    """
    SELECT_VIEW_NAMES_REGEXP = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'VIEW'
          AND table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
          AND regexp_matches(table_name, $regexp)
        ORDER BY table_name
    """

    SELECT_COLUMNS = """
        SELECT table_schema, table_name, column_name, data_type, is_nullable,
               character_maximum_length, numeric_precision, numeric_scale,
               ordinal_position, column_default
        FROM information_schema.columns
        WHERE table_catalog = current_database()
          AND {fold}(table_schema) = {fold}($schemaname)
          AND {fold}(table_name) = {fold}($tablename)
        ORDER BY ordinal_position
    """

    def __init__(self, connection_string: Optional[str] = None, read_only: bool = True, **kwargs):
        """Initialize the DuckDB driver.

        Args:
            connection_string: Path to a .duckdb file, a ``duckdb:///`` URL,
                or nothing for an in-memory database
            read_only: Open the database file in read-only mode
            **kwargs: Passed through to CatalogDriver
        """
        super().__init__(connection_string=connection_string, **kwargs)
        self.read_only = read_only
        self.database_path = parse_database_path(connection_string)

    def create_type_mapper(self):
        return DuckDBTypeMapper()

    def _open_connection(self):
        """Connect directly to the DuckDB database file."""
        try:
            import duckdb
        except ImportError:
            raise ImportError(
                "duckdb is required. "
                "Install it with: pip install duckdb"
            )

        if self.database_path == MEMORY_DATABASE:
            return duckdb.connect(MEMORY_DATABASE)
        return duckdb.connect(self.database_path, read_only=self.read_only)

    def _build_schema(self, row):
        return DuckDBSchemaInfo(
            schema_name=row["schema_name"],
            catalog_name=row.get("catalog_name"),
            schema_owner=row.get("schema_owner"),
        )

    def _build_table(self, row):
        return DuckDBTableInfo(
            schema_name=row["table_schema"],
            table_name=row["table_name"],
            row_count=row.get("row_count"),
            table_catalog=row.get("table_catalog"),
            column_count=row.get("column_count"),
            has_primary_key=row.get("has_primary_key"),
            temporary=row.get("temporary"),
        )

    def _build_view(self, row):
        return DuckDBViewInfo(
            schema_name=row["table_schema"],
            view_name=row["table_name"],
            definition=row.get("view_definition"),
            table_catalog=row.get("table_catalog"),
            temporary=row.get("temporary"),
        )

    def _build_column(self, row):
        return DuckDBColumnInfo(
            schema_name=row["table_schema"],
            table_name=row["table_name"],
            column_name=row["column_name"],
            data_type=row["data_type"],
            nullable=(row.get("is_nullable") == 'YES'),
            length=row.get("character_maximum_length"),
            precision=row.get("numeric_precision"),
            scale=row.get("numeric_scale"),
            ordinal_position=row.get("ordinal_position"),
            _type_mapper=self._type_mapper,
            column_default=row.get("column_default"),
        )

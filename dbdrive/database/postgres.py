"""PostgreSQL catalog driver."""

from .base import CatalogDriver
from .models import PostgresColumnInfo, PostgresSchemaInfo, PostgresTableInfo, PostgresViewInfo
from .type_mappers import PostgresTypeMapper

STREAM_CURSOR_NAME = "dbdrive_stream"


def _yes(value):
    """information_schema reports booleans as 'YES'/'NO'."""
    if value is None:
        return None
    return str(value).upper() == "YES"


class PostgresDriver(CatalogDriver):
    """Catalog driver for PostgreSQL.

    Schemas, tables, views and columns come from ``information_schema``;
    the table row count is the planner estimate from ``pg_class``. Rows are
    streamed through a server-side (named) cursor so large tables are never
    materialized on the client.
    """

    PROVIDER = "postgres"
    CASE_SENSITIVE = True
    FOLD_FUNCTION = "lower"

    EXCLUDED_SCHEMAS = {'information_schema', 'pg_catalog', 'pg_toast'}

    SELECT_SCHEMAS = """
        SELECT schema_name, catalog_name, schema_owner
        FROM information_schema.schemata
        ORDER BY schema_name
    """
    SELECT_SCHEMA = """
        SELECT schema_name, catalog_name, schema_owner
        FROM information_schema.schemata
        WHERE {fold}(schema_name) = {fold}(%(schemaname)s)
    """
    SELECT_SCHEMA_EXISTS = """
        SELECT 1 FROM information_schema.schemata
        WHERE {fold}(schema_name) = {fold}(%(schemaname)s)
    """
    SELECT_SCHEMA_NAMES = """
        SELECT schema_name FROM information_schema.schemata
        ORDER BY schema_name
    """
    SELECT_SCHEMA_NAMES_REGEXP = """
        SELECT schema_name FROM information_schema.schemata
        WHERE schema_name ~ %(regexp)s
        ORDER BY schema_name
    """

    _TABLE_COLUMNS = """
        t.table_catalog, t.table_schema, t.table_name, t.table_type,
        t.is_insertable_into, t.is_typed, t.commit_action,
        (SELECT c.reltuples::bigint
           FROM pg_catalog.pg_class c
           JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
          WHERE n.nspname = t.table_schema AND c.relname = t.table_name) AS row_count
    """
    SELECT_TABLES = f"""
        SELECT {_TABLE_COLUMNS}
        FROM information_schema.tables t
        WHERE t.table_type = 'BASE TABLE'
          AND {{fold}}(t.table_schema) = {{fold}}(%(schemaname)s)
        ORDER BY t.table_name
    """
    SELECT_TABLE = f"""
        SELECT {_TABLE_COLUMNS}
        FROM information_schema.tables t
        WHERE t.table_type = 'BASE TABLE'
          AND {{fold}}(t.table_schema) = {{fold}}(%(schemaname)s)
          AND {{fold}}(t.table_name) = {{fold}}(%(tablename)s)
    """
    SELECT_TABLE_EXISTS = """
        SELECT 1 FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND {fold}(table_schema) = {fold}(%(schemaname)s)
          AND {fold}(table_name) = {fold}(%(tablename)s)
    """
    SELECT_TABLE_NAMES = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND {fold}(table_schema) = {fold}(%(schemaname)s)
        ORDER BY table_name
    """
    SELECT_TABLE_NAMES_REGEXP = """
        SELECT table_name FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
          AND {fold}(table_schema) = {fold}(%(schemaname)s)
          AND table_name ~ %(regexp)s
        ORDER BY table_name
    """

    _VIEW_COLUMNS = """
        table_catalog, table_schema, table_name, view_definition,
        check_option, is_updatable, is_insertable_into
    """
    SELECT_VIEWS = f"""
        SELECT {_VIEW_COLUMNS}
        FROM information_schema.views
        WHERE {{fold}}(table_schema) = {{fold}}(%(schemaname)s)
        ORDER BY table_name
    """
    SELECT_VIEW = f"""
        SELECT {_VIEW_COLUMNS}
        FROM information_schema.views
        WHERE {{fold}}(table_schema) = {{fold}}(%(schemaname)s)
          AND {{fold}}(table_name) = {{fold}}(%(viewname)s)
    """
    SELECT_VIEW_EXISTS = """
        SELECT 1 FROM information_schema.views
        WHERE {fold}(table_schema) = {fold}(%(schemaname)s)
          AND {fold}(table_name) = {fold}(%(viewname)s)
    """
    SELECT_VIEW_NAMES = """
        SELECT table_name FROM information_schema.views
        WHERE {fold}(table_schema) = {fold}(%(schemaname)s)
        ORDER BY table_name
    """
    SELECT_VIEW_NAMES_REGEXP = """
        SELECT table_name FROM information_schema.views
        WHERE {fold}(table_schema) = {fold}(%(schemaname)s)
          AND table_name ~ %(regexp)s
        ORDER BY table_name
    """

    SELECT_COLUMNS = """
        SELECT table_schema, table_name, column_name, data_type, is_nullable,
               character_maximum_length, numeric_precision, numeric_scale,
               ordinal_position, column_default, udt_name, collation_name,
               is_identity, is_updatable
        FROM information_schema.columns
        WHERE {fold}(table_schema) = {fold}(%(schemaname)s)
          AND {fold}(table_name) = {fold}(%(tablename)s)
        ORDER BY ordinal_position
    """

    def create_type_mapper(self):
        return PostgresTypeMapper()

    def _open_connection(self):
        """Connect with psycopg2 using a libpq DSN or URI."""
        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL connections. "
                "Install it with: pip install psycopg2-binary"
            )

        if not self.connection_string:
            raise ValueError("PostgreSQL requires a connection string (e.g. postgresql://user@host/dbname)")
        return psycopg2.connect(self.connection_string)

    def open_cursor(self, connection):
        return connection.cursor(name=STREAM_CURSOR_NAME)

    def apply_timeout(self, connection, cursor, timeout: int) -> None:
        """Set statement_timeout for the session; a named cursor cannot run SET."""
        if not timeout or timeout <= 0:
            return
        setup = connection.cursor()
        try:
            setup.execute("SET statement_timeout = %s", (int(timeout) * 1000,))
        finally:
            setup.close()

    def _build_schema(self, row):
        return PostgresSchemaInfo(
            schema_name=row["schema_name"],
            catalog_name=row.get("catalog_name"),
            schema_owner=row.get("schema_owner"),
        )

    def _build_table(self, row):
        row_count = row.get("row_count")
        # reltuples is -1 until the table is vacuumed or analyzed
        if row_count is not None and row_count < 0:
            row_count = None
        return PostgresTableInfo(
            schema_name=row["table_schema"],
            table_name=row["table_name"],
            row_count=row_count,
            table_catalog=row.get("table_catalog"),
            table_type=row.get("table_type"),
            is_insertable_into=_yes(row.get("is_insertable_into")),
            is_typed=_yes(row.get("is_typed")),
            commit_action=row.get("commit_action"),
        )

    def _build_view(self, row):
        return PostgresViewInfo(
            schema_name=row["table_schema"],
            view_name=row["table_name"],
            definition=row.get("view_definition"),
            table_catalog=row.get("table_catalog"),
            check_option=row.get("check_option"),
            is_updatable=_yes(row.get("is_updatable")),
            is_insertable_into=_yes(row.get("is_insertable_into")),
        )

    def _build_column(self, row):
        return PostgresColumnInfo(
            schema_name=row["table_schema"],
            table_name=row["table_name"],
            column_name=row["column_name"],
            data_type=row["data_type"],
            nullable=_yes(row.get("is_nullable")) is not False,
            length=row.get("character_maximum_length"),
            precision=row.get("numeric_precision"),
            scale=row.get("numeric_scale"),
            ordinal_position=row.get("ordinal_position"),
            _type_mapper=self._type_mapper,
            column_default=row.get("column_default"),
            udt_name=row.get("udt_name"),
            collation_name=row.get("collation_name"),
            is_identity=_yes(row.get("is_identity")),
            is_updatable=_yes(row.get("is_updatable")),
        )

"""Oracle catalog driver."""

from typing import Optional

from .base import CatalogDriver
from .models import OracleColumnInfo, OracleSchemaInfo, OracleTableInfo, OracleViewInfo
from .type_mappers import OracleTypeMapper


class OracleDriver(CatalogDriver):
    """Catalog driver for Oracle Database.

    Schemas are database users (``ALL_USERS``); tables, views and columns
    come from the ``ALL_*`` dictionary views filtered by owner. Oracle
    stores unquoted identifiers in uppercase, so names are matched exactly
    by default.
    """

    PROVIDER = "oracle"
    CASE_SENSITIVE = True
    FOLD_FUNCTION = "UPPER"

    SELECT_SCHEMAS = """
        SELECT USERNAME, USER_ID, CREATED
        FROM ALL_USERS
        ORDER BY USERNAME
    """
    SELECT_SCHEMA = """
        SELECT USERNAME, USER_ID, CREATED
        FROM ALL_USERS
        WHERE {fold}(USERNAME) = {fold}(:schemaname)
    """
    SELECT_SCHEMA_EXISTS = """
        SELECT 1 FROM ALL_USERS WHERE {fold}(USERNAME) = {fold}(:schemaname)
    """
    SELECT_SCHEMA_NAMES = "SELECT USERNAME FROM ALL_USERS ORDER BY USERNAME"
    SELECT_SCHEMA_NAMES_REGEXP = """
        SELECT USERNAME FROM ALL_USERS
        WHERE REGEXP_LIKE(USERNAME, :regexp)
        ORDER BY USERNAME
    """

    _TABLE_COLUMNS = """
        OWNER, TABLE_NAME, TABLESPACE_NAME, STATUS, LOGGING, NUM_ROWS, BLOCKS,
        AVG_ROW_LEN, LAST_ANALYZED, PARTITIONED, TEMPORARY, COMPRESSION, READ_ONLY
    """
    SELECT_TABLES = f"""
        SELECT {_TABLE_COLUMNS}
        FROM ALL_TABLES
        WHERE {{fold}}(OWNER) = {{fold}}(:schemaname)
        ORDER BY TABLE_NAME
    """
    SELECT_TABLE = f"""
        SELECT {_TABLE_COLUMNS}
        FROM ALL_TABLES
        WHERE {{fold}}(OWNER) = {{fold}}(:schemaname)
          AND {{fold}}(TABLE_NAME) = {{fold}}(:tablename)
    """
    SELECT_TABLE_EXISTS = """
        SELECT 1 FROM ALL_TABLES
        WHERE {fold}(OWNER) = {fold}(:schemaname)
          AND {fold}(TABLE_NAME) = {fold}(:tablename)
    """
    SELECT_TABLE_NAMES = """
        SELECT TABLE_NAME FROM ALL_TABLES
        WHERE {fold}(OWNER) = {fold}(:schemaname)
        ORDER BY TABLE_NAME
    """
    SELECT_TABLE_NAMES_REGEXP = """
        SELECT TABLE_NAME FROM ALL_TABLES
        WHERE {fold}(OWNER) = {fold}(:schemaname)
          AND REGEXP_LIKE(TABLE_NAME, :regexp)
        ORDER BY TABLE_NAME
    """

    _VIEW_COLUMNS = "OWNER, VIEW_NAME, TEXT_LENGTH, TEXT, VIEW_TYPE_OWNER, VIEW_TYPE, SUPERVIEW_NAME"
    SELECT_VIEWS = f"""
        SELECT {_VIEW_COLUMNS}
        FROM ALL_VIEWS
        WHERE {{fold}}(OWNER) = {{fold}}(:schemaname)
        ORDER BY VIEW_NAME
    """
    SELECT_VIEW = f"""
        SELECT {_VIEW_COLUMNS}
        FROM ALL_VIEWS
        WHERE {{fold}}(OWNER) = {{fold}}(:schemaname)
          AND {{fold}}(VIEW_NAME) = {{fold}}(:viewname)
    """
    SELECT_VIEW_EXISTS = """
        SELECT 1 FROM ALL_VIEWS
        WHERE {fold}(OWNER) = {fold}(:schemaname)
          AND {fold}(VIEW_NAME) = {fold}(:viewname)
    """
    SELECT_VIEW_NAMES = """
        SELECT VIEW_NAME FROM ALL_VIEWS
        WHERE {fold}(OWNER) = {fold}(:schemaname)
        ORDER BY VIEW_NAME
    """
    SELECT_VIEW_NAMES_REGEXP = """
        SELECT VIEW_NAME FROM ALL_VIEWS
        WHERE {fold}(OWNER) = {fold}(:schemaname)
          AND REGEXP_LIKE(VIEW_NAME, :regexp)
        ORDER BY VIEW_NAME
    """

    SELECT_COLUMNS = """
        SELECT OWNER, TABLE_NAME, COLUMN_NAME, DATA_TYPE, DATA_TYPE_OWNER, DATA_LENGTH,
               DATA_PRECISION, DATA_SCALE, NULLABLE, COLUMN_ID, DATA_DEFAULT,
               CHAR_LENGTH, NUM_DISTINCT, NUM_NULLS, LAST_ANALYZED
        FROM ALL_TAB_COLUMNS
        WHERE {fold}(OWNER) = {fold}(:schemaname)
          AND {fold}(TABLE_NAME) = {fold}(:tablename)
        ORDER BY COLUMN_ID
    """

    def create_type_mapper(self):
        return OracleTypeMapper()

    def _open_connection(self):
        """Connect with python-oracledb (thin mode)."""
        try:
            import oracledb
        except ImportError:
            raise ImportError(
                "oracledb is required for Oracle connections. "
                "Install it with: pip install oracledb"
            )

        if not self.connection_string:
            raise ValueError("Oracle requires a connection string (user/password@host:port/service)")
        return oracledb.connect(dsn=self.connection_string)

    def apply_timeout(self, connection, cursor, timeout: int) -> None:
        """Oracle bounds every round trip on the connection, in milliseconds."""
        if timeout and timeout > 0:
            connection.call_timeout = timeout * 1000

    def _build_schema(self, row):
        return OracleSchemaInfo(
            schema_name=row["USERNAME"],
            user_id=row.get("USER_ID"),
            created=row.get("CREATED"),
        )

    def _build_table(self, row):
        return OracleTableInfo(
            schema_name=row["OWNER"],
            table_name=row["TABLE_NAME"],
            row_count=row.get("NUM_ROWS"),
            tablespace_name=row.get("TABLESPACE_NAME"),
            status=row.get("STATUS"),
            logging=row.get("LOGGING"),
            blocks=row.get("BLOCKS"),
            avg_row_len=row.get("AVG_ROW_LEN"),
            last_analyzed=row.get("LAST_ANALYZED"),
            partitioned=_strip(row.get("PARTITIONED")),
            temporary=_strip(row.get("TEMPORARY")),
            compression=row.get("COMPRESSION"),
            read_only=row.get("READ_ONLY"),
        )

    def _build_view(self, row):
        return OracleViewInfo(
            schema_name=row["OWNER"],
            view_name=row["VIEW_NAME"],
            definition=row.get("TEXT"),
            text_length=row.get("TEXT_LENGTH"),
            view_type_owner=row.get("VIEW_TYPE_OWNER"),
            view_type=row.get("VIEW_TYPE"),
            superview_name=row.get("SUPERVIEW_NAME"),
        )

    def _build_column(self, row):
        return OracleColumnInfo(
            schema_name=row["OWNER"],
            table_name=row["TABLE_NAME"],
            column_name=row["COLUMN_NAME"],
            data_type=row["DATA_TYPE"],
            nullable=row.get("NULLABLE") == "Y",
            length=row.get("DATA_LENGTH"),
            precision=row.get("DATA_PRECISION"),
            scale=row.get("DATA_SCALE"),
            ordinal_position=row.get("COLUMN_ID"),
            _type_mapper=self._type_mapper,
            data_type_owner=row.get("DATA_TYPE_OWNER"),
            data_default=_strip(row.get("DATA_DEFAULT")),
            char_length=row.get("CHAR_LENGTH"),
            num_distinct=row.get("NUM_DISTINCT"),
            num_nulls=row.get("NUM_NULLS"),
            last_analyzed=row.get("LAST_ANALYZED"),
        )


def _strip(value: Optional[str]) -> Optional[str]:
    # ALL_TABLES pads some flags and DATA_DEFAULT keeps trailing whitespace
    return value.strip() if isinstance(value, str) else value

"""Catalog metadata models.

The base classes carry the fields every backend fills in; the backend
subclasses add the descriptive fields their catalog exposes. Code that
only reads the base fields works unchanged across backends.
"""

import datetime
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .type_mappers import TypeMapper


def _serialize(value: Any) -> Any:
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return value


class _Record:
    """Mixin turning a metadata dataclass into an ordered field mapping."""

    def to_dict(self) -> Dict[str, Any]:
        """Public fields in declaration order; private fields are skipped."""
        return {
            f.name: _serialize(getattr(self, f.name))
            for f in fields(self)
            if not f.name.startswith("_")
        }


@dataclass
class ColumnInfo(_Record):
    """Represents a column of a table or view."""
    schema_name: str
    table_name: str
    column_name: str
    data_type: str
    nullable: bool = True
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    ordinal_position: Optional[int] = None
    _type_mapper: Optional['TypeMapper'] = field(default=None, repr=False, compare=False)

    @property
    def name(self) -> str:
        return self.column_name

    @property
    def type_name(self) -> str:
        """Declared type including length/precision where known."""
        if self._type_mapper:
            return self._type_mapper.format_type(self.data_type, self.length, self.precision, self.scale)
        return self.data_type


@dataclass
class SchemaInfo(_Record):
    """Represents a schema (an Oracle user, a PostgreSQL/DuckDB schema)."""
    schema_name: str

    @property
    def name(self) -> str:
        return self.schema_name


@dataclass
class TableInfo(_Record):
    """Represents a table."""
    schema_name: str
    table_name: str
    columns: List[ColumnInfo] = field(default_factory=list)
    row_count: Optional[int] = None

    @property
    def name(self) -> str:
        return self.table_name


@dataclass
class ViewInfo(_Record):
    """Represents a view."""
    schema_name: str
    view_name: str
    columns: List[ColumnInfo] = field(default_factory=list)
    definition: Optional[str] = None

    @property
    def name(self) -> str:
        return self.view_name


# Oracle

@dataclass
class OracleSchemaInfo(SchemaInfo):
    user_id: Optional[int] = None
    created: Optional[datetime.datetime] = None


@dataclass
class OracleColumnInfo(ColumnInfo):
    data_type_owner: Optional[str] = None
    data_default: Optional[str] = None
    char_length: Optional[int] = None
    num_distinct: Optional[int] = None
    num_nulls: Optional[int] = None
    last_analyzed: Optional[datetime.datetime] = None


@dataclass
class OracleTableInfo(TableInfo):
    tablespace_name: Optional[str] = None
    status: Optional[str] = None
    logging: Optional[str] = None
    blocks: Optional[int] = None
    avg_row_len: Optional[int] = None
    last_analyzed: Optional[datetime.datetime] = None
    partitioned: Optional[str] = None
    temporary: Optional[str] = None
    compression: Optional[str] = None
    read_only: Optional[str] = None


@dataclass
class OracleViewInfo(ViewInfo):
    text_length: Optional[int] = None
    view_type_owner: Optional[str] = None
    view_type: Optional[str] = None
    superview_name: Optional[str] = None


# PostgreSQL

@dataclass
class PostgresSchemaInfo(SchemaInfo):
    catalog_name: Optional[str] = None
    schema_owner: Optional[str] = None


@dataclass
class PostgresColumnInfo(ColumnInfo):
    column_default: Optional[str] = None
    udt_name: Optional[str] = None
    collation_name: Optional[str] = None
    is_identity: Optional[bool] = None
    is_updatable: Optional[bool] = None


@dataclass
class PostgresTableInfo(TableInfo):
    table_catalog: Optional[str] = None
    table_type: Optional[str] = None
    is_insertable_into: Optional[bool] = None
    is_typed: Optional[bool] = None
    commit_action: Optional[str] = None


@dataclass
class PostgresViewInfo(ViewInfo):
    table_catalog: Optional[str] = None
    check_option: Optional[str] = None
    is_updatable: Optional[bool] = None
    is_insertable_into: Optional[bool] = None


# DuckDB

@dataclass
class DuckDBSchemaInfo(SchemaInfo):
    catalog_name: Optional[str] = None
    schema_owner: Optional[str] = None


@dataclass
class DuckDBColumnInfo(ColumnInfo):
    column_default: Optional[str] = None


@dataclass
class DuckDBTableInfo(TableInfo):
    table_catalog: Optional[str] = None
    column_count: Optional[int] = None
    has_primary_key: Optional[bool] = None
    temporary: Optional[bool] = None


@dataclass
class DuckDBViewInfo(ViewInfo):
    table_catalog: Optional[str] = None
    temporary: Optional[bool] = None

"""Database catalog drivers for db-drive.

This module provides the backend-neutral catalog driver contract
with specific implementations for Oracle, PostgreSQL and DuckDB.
"""

from .models import (
    ColumnInfo,
    SchemaInfo,
    TableInfo,
    ViewInfo,
    OracleColumnInfo,
    OracleSchemaInfo,
    OracleTableInfo,
    OracleViewInfo,
    PostgresColumnInfo,
    PostgresSchemaInfo,
    PostgresTableInfo,
    PostgresViewInfo,
    DuckDBColumnInfo,
    DuckDBSchemaInfo,
    DuckDBTableInfo,
    DuckDBViewInfo,
)
from .base import CatalogDriver
from .type_mappers import TypeMapper, OracleTypeMapper, PostgresTypeMapper, DuckDBTypeMapper
from .oracle import OracleDriver
from .postgres import PostgresDriver
from .duckdb import DuckDBDriver
from .factory import PROVIDERS, create_driver, get_driver_class, supported_providers

__all__ = [
    # Data models
    "ColumnInfo",
    "SchemaInfo",
    "TableInfo",
    "ViewInfo",
    "OracleColumnInfo",
    "OracleSchemaInfo",
    "OracleTableInfo",
    "OracleViewInfo",
    "PostgresColumnInfo",
    "PostgresSchemaInfo",
    "PostgresTableInfo",
    "PostgresViewInfo",
    "DuckDBColumnInfo",
    "DuckDBSchemaInfo",
    "DuckDBTableInfo",
    "DuckDBViewInfo",
    # Base classes
    "CatalogDriver",
    # Type mappers
    "TypeMapper",
    "OracleTypeMapper",
    "PostgresTypeMapper",
    "DuckDBTypeMapper",
    # Drivers
    "OracleDriver",
    "PostgresDriver",
    "DuckDBDriver",
    # Factory
    "PROVIDERS",
    "create_driver",
    "get_driver_class",
    "supported_providers",
]

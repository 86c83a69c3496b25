"""Database-specific rendering of declared column types."""

from abc import ABC, abstractmethod
from typing import Optional


class TypeMapper(ABC):
    """Abstract base class for rendering a column's declared type."""

    @abstractmethod
    def format_type(
        self,
        data_type: str,
        length: Optional[int] = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
    ) -> str:
        """Render a full type name, e.g. ``NUMBER(10,2)``."""
        pass


def _with_precision(name: str, precision: Optional[int], scale: Optional[int]) -> str:
    if precision is None:
        return name
    if scale:
        return f"{name}({precision},{scale})"
    return f"{name}({precision})"


class OracleTypeMapper(TypeMapper):
    """Type mapper for Oracle ALL_TAB_COLUMNS metadata."""

    CHARACTER_TYPES = {"CHAR", "NCHAR", "VARCHAR", "VARCHAR2", "NVARCHAR2", "RAW"}

    def format_type(self, data_type, length=None, precision=None, scale=None):
        """Convert Oracle column metadata to a declared type."""
        type_upper = (data_type or "").upper()

        if type_upper in self.CHARACTER_TYPES and length:
            return f"{type_upper}({length})"
        elif type_upper == "NUMBER":
            return _with_precision(type_upper, precision, scale)
        elif type_upper == "FLOAT" and precision:
            return f"FLOAT({precision})"
        return type_upper


class PostgresTypeMapper(TypeMapper):
    """Type mapper for PostgreSQL information_schema metadata."""

    CHARACTER_TYPES = {"character varying", "character", "bit", "bit varying"}

    def format_type(self, data_type, length=None, precision=None, scale=None):
        """Convert PostgreSQL column metadata to a declared type."""
        type_lower = (data_type or "").lower()

        if type_lower in self.CHARACTER_TYPES and length:
            return f"{type_lower}({length})"
        elif type_lower in ("numeric", "decimal"):
            return _with_precision(type_lower, precision, scale)
        return type_lower


class DuckDBTypeMapper(TypeMapper):
    """Type mapper for DuckDB information_schema metadata.

    DuckDB already reports parameterized types (``DECIMAL(10,2)``) in
    ``data_type``, so only bare DECIMAL and VARCHAR get decorated.
    """

    def format_type(self, data_type, length=None, precision=None, scale=None):
        """Convert DuckDB column metadata to a declared type."""
        type_upper = (data_type or "").upper()

        if "(" in type_upper:
            return type_upper
        elif type_upper == "DECIMAL":
            return _with_precision(type_upper, precision, scale)
        elif type_upper == "VARCHAR" and length:
            return f"VARCHAR({length})"
        return type_upper

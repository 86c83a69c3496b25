"""db-drive: browse relational databases as a hierarchical drive.

Paths address ``schema\\TABLE|VIEW\\object\\row`` under a drive root such
as ``db:\\``; a catalog driver per backend (Oracle, PostgreSQL, DuckDB)
answers the lookups and streams rows.
"""

from .database import CatalogDriver, create_driver
from .errors import (
    BackendError,
    DriveError,
    InvalidPathError,
    NameRejectedError,
    NotFoundError,
    PathTooDeepError,
    UnsupportedParameterTypeError,
    UnsupportedProviderError,
)
from .navigation import ChildItem, DatabaseNavigator, DriveInfo
from .paths import ObjectType, PathDescriptor, PathType, classify, is_valid_name
from .query import QueryExecutor

__version__ = "0.1.0"

__all__ = [
    "CatalogDriver",
    "create_driver",
    "DatabaseNavigator",
    "ChildItem",
    "DriveInfo",
    "QueryExecutor",
    "ObjectType",
    "PathDescriptor",
    "PathType",
    "classify",
    "is_valid_name",
    # Errors
    "DriveError",
    "InvalidPathError",
    "PathTooDeepError",
    "NameRejectedError",
    "NotFoundError",
    "BackendError",
    "UnsupportedProviderError",
    "UnsupportedParameterTypeError",
]

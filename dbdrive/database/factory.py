"""Driver factory keyed by provider identifier."""

import logging
from typing import Dict, List, Type

from ..errors import UnsupportedProviderError
from .base import CatalogDriver
from .duckdb import DuckDBDriver
from .oracle import OracleDriver
from .postgres import PostgresDriver

logger = logging.getLogger(__name__)

# Provider identifiers (lowercased) -> driver class; ADO.NET invariant
# names are accepted as aliases.
PROVIDERS: Dict[str, Type[CatalogDriver]] = {
    "oracle": OracleDriver,
    "oracle.manageddataaccess.client": OracleDriver,
    "postgres": PostgresDriver,
    "postgresql": PostgresDriver,
    "npgsql": PostgresDriver,
    "duckdb": DuckDBDriver,
}


def supported_providers() -> List[str]:
    return sorted(PROVIDERS)


def get_driver_class(provider: str) -> Type[CatalogDriver]:
    """Resolve a provider identifier, case-insensitively.

    Raises:
        UnsupportedProviderError: for unknown or empty identifiers
    """
    driver_class = PROVIDERS.get((provider or "").strip().lower())
    if driver_class is None:
        raise UnsupportedProviderError(provider, supported=supported_providers())
    return driver_class


def create_driver(provider: str, **kwargs) -> CatalogDriver:
    """Create the catalog driver for a provider.

    No connection is opened here; drivers connect on each call.

    Args:
        provider: Provider identifier, e.g. ``oracle``, ``postgres``, ``duckdb``
        **kwargs: Driver constructor arguments (connection_string, timeout, ...)

    Returns:
        A CatalogDriver instance
    """
    driver_class = get_driver_class(provider)
    logger.debug("create_driver: provider=%s -> %s", provider, driver_class.__name__)
    return driver_class(**kwargs)

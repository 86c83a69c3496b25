"""Configuration management for db-drive."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional

from .query import DEFAULT_BULK_READ_LIMIT, DEFAULT_MAX_READ_RESULT, DEFAULT_TIMEOUT


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.db-drive/.env
    3. Package directory (where this file is located)
    """
    # Current directory
    if os.path.exists(".env"):
        return ".env"

    # User config directory
    user_env = Path.home() / ".db-drive" / ".env"
    if user_env.exists():
        return str(user_env)

    # Package directory
    package_dir = Path(__file__).parent.parent
    package_env = package_dir / ".env"
    if package_env.exists():
        return str(package_env)

    return None


class Settings(BaseSettings):
    """Application settings loaded from DBDRIVE_* environment variables."""

    # Backend connection
    provider: str = Field(
        default="postgres",
        description="Provider identifier (oracle, postgres, duckdb)"
    )
    connection_string: Optional[str] = Field(
        default=None,
        description="Connection string handed to the backend library"
    )

    # Drive
    drive_name: str = Field(
        default="db",
        description="Drive name; the drive root is <drive_name>:\\"
    )

    # Query limits
    max_read_result: int = Field(
        default=DEFAULT_MAX_READ_RESULT,
        description="Default number of rows returned per table listing (0 = all rows)"
    )
    bulk_read_limit: int = Field(
        default=DEFAULT_BULK_READ_LIMIT,
        description="Rows fetched from the backend per round trip"
    )
    timeout: int = Field(
        default=DEFAULT_TIMEOUT,
        description="Seconds allowed for each SQL statement"
    )
    case_sensitive: Optional[bool] = Field(
        default=None,
        description="Override the backend's name matching policy"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level for the command line"
    )

    class Config:
        env_prefix = "DBDRIVE_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"

    def masked_connection_string(self) -> Optional[str]:
        """Connection string with any password replaced by ***."""
        return mask_connection_string(self.connection_string)


def mask_connection_string(value: Optional[str]) -> Optional[str]:
    """Hide passwords in ``user/password@dsn``, URL and ``key=value`` forms."""
    if not value:
        return value
    if "://" in value:
        scheme, rest = value.split("://", 1)
        if "@" in rest:
            credentials, host = rest.rsplit("@", 1)
            user = credentials.split(":", 1)[0]
            if ":" in credentials:
                return f"{scheme}://{user}:***@{host}"
        return value
    if "@" in value:
        credentials, dsn = value.split("@", 1)
        if "/" in credentials:
            user = credentials.split("/", 1)[0]
            return f"{user}/***@{dsn}"
        return value
    if "=" in value:
        parts = []
        for part in value.replace(";", " ").split():
            key, sep, val = part.partition("=")
            if sep and key.lower() in ("password", "pwd"):
                part = f"{key}=***"
            parts.append(part)
        return " ".join(parts)
    return value


# Global settings instance
settings = Settings()

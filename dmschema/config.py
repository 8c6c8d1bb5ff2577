"""Configuration management for dmschema."""

from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional

from .database.rows import RowCase


def _env_file_candidates() -> List[Path]:
    return [
        Path(".env"),
        Path.home() / ".dmschema" / ".env",
        Path(__file__).resolve().parent.parent / ".env",
    ]


def _find_env_file() -> Optional[str]:
    """Return the first .env found: working directory, ~/.dmschema, then the install root."""
    for candidate in _env_file_candidates():
        if candidate.is_file():
            return str(candidate)
    return None


class Settings(BaseSettings):
    """Application settings loaded from DMSCHEMA_* environment variables."""

    # DM server connection
    host: str = Field(
        default="localhost",
        description="DM server host"
    )
    port: int = Field(
        default=5236,
        description="DM server port"
    )
    user: str = Field(
        default="SYSDBA",
        description="User to authenticate as; also the default schema"
    )
    password: Optional[str] = Field(
        default=None,
        description="Password for the DM user"
    )

    # Introspection
    default_schema: Optional[str] = Field(
        default=None,
        description="Schema for unqualified table names (default: upper-cased user)"
    )
    row_case: RowCase = Field(
        default=RowCase.NATURAL,
        description="Case of column labels returned by the driver: natural, upper or lower"
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the dmschema loggers"
    )

    class Config:
        env_prefix = "DMSCHEMA_"
        env_file = _find_env_file()
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()

"""
Cardapio Configuration

Every setting comes from the environment (or a .env file) through Pydantic
Settings and is cached by get_settings().

ENV_MODE picks the postal-code lookup:
    - development: built-in CEP table, no network
    - staging/production: ViaCEP over HTTP

STORAGE_BACKEND picks where records live (memory, a lock-guarded JSON file,
or a SQL table) independently of ENV_MODE.

Usage:
    from cardapio.core.config import get_settings

    settings = get_settings()
    backend_name = settings.storage_backend.value

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Deployment modes.

    Attributes:
        DEVELOPMENT: Offline work, CEPs answered from the built-in table
        PRODUCTION: CEPs looked up on ViaCEP
        STAGING: Same services as production, separate data
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class StorageBackend(str, Enum):
    """Key-value backends available for persistence."""
    MEMORY = "memory"
    FILE = "file"
    SQL = "sql"


class Settings(BaseSettings):
    """
    Cardapio settings loaded from environment variables.

    Names are case-insensitive; unknown variables are ignored.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging

        # Storage
        storage_namespace: Root of every persisted key ("@cardapio")
        storage_backend: memory / file / sql
        data_directory: Directory holding the file backend document
        storage_filename: File backend document name
        storage_lock_timeout: Seconds to wait for the file lock
        database_url: SQLAlchemy async URL for the sql backend

        # Session
        session_ttl_hours: Hours before a login session expires

        # Postal code lookup
        viacep_base_url: ViaCEP endpoint root
        postal_lookup_timeout: HTTP timeout for lookups in seconds
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Cardapio Digital",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # ==========================================================================
    # STORAGE
    # ==========================================================================

    storage_namespace: str = Field(
        default="@cardapio",
        description="Prefix shared by every persisted key"
    )
    storage_backend: StorageBackend = Field(
        default=StorageBackend.FILE,
        description="Key-value backend (memory, file or sql)"
    )
    data_directory: str = Field(
        default="data",
        description="Directory for data files"
    )
    storage_filename: str = Field(
        default="cardapio.json",
        description="JSON document used by the file backend"
    )
    storage_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the storage file lock"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///data/cardapio.db",
        description="SQLAlchemy async URL used by the sql backend"
    )

    # ==========================================================================
    # SESSION
    # ==========================================================================

    session_ttl_hours: int = Field(
        default=24,
        description="Hours a login session stays valid"
    )

    # ==========================================================================
    # POSTAL CODE LOOKUP (ViaCEP)
    # ==========================================================================

    viacep_base_url: str = Field(
        default="https://viacep.com.br/ws",
        description="ViaCEP API base URL"
    )
    postal_lookup_timeout: float = Field(
        default=10.0,
        description="Timeout for postal code lookups in seconds"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", "storage_backend", mode="before")
    @classmethod
    def parse_choice(cls, v, info):
        """Accept enum members or case-insensitive names ("SQL", "Production")."""
        enum_type = EnvironmentMode if info.field_name == "env_mode" else StorageBackend
        if isinstance(v, enum_type):
            return v
        try:
            return enum_type(str(v).strip().lower())
        except ValueError:
            choices = ", ".join(e.value for e in enum_type)
            raise ValueError(f"Invalid {info.field_name} {v!r}; expected one of: {choices}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def storage_file_path(self) -> Path:
        """Full path of the file backend document."""
        return Path(self.data_directory) / self.storage_filename

    @property
    def session_ttl_seconds(self) -> int:
        """Session lifetime in seconds."""
        return self.session_ttl_hours * 60 * 60


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.storage_backend)
        StorageBackend.FILE
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "filelock")


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure logging for scripts and interactive use.

    DEBUG=true forces DEBUG level. Client libraries are kept at WARNING so
    storage and lookup chatter does not drown the app's own messages.

    Returns:
        The "cardapio" package logger
    """
    if get_settings().debug:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s │ %(levelname)-8s │ %(name)-32s │ %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger("cardapio")

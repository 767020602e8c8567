"""
Core module initialization.
Exports configuration, logging utilities and the error taxonomy.
"""

from cardapio.core.config import (
    EnvironmentMode,
    Settings,
    StorageBackend,
    get_settings,
    setup_logging,
)
from cardapio.core.exceptions import (
    CardapioError,
    DomainError,
    EmailAlreadyRegisteredError,
    NotFoundError,
    SessionNotFoundError,
    StorageError,
    TaxIdAlreadyRegisteredError,
)

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "StorageBackend",
    "CardapioError",
    "DomainError",
    "EmailAlreadyRegisteredError",
    "NotFoundError",
    "SessionNotFoundError",
    "StorageError",
    "TaxIdAlreadyRegisteredError",
]

"""
Storage Backend Factory

Provides a single entry point for obtaining the key-value backend.
Selects memory, file or SQL persistence from STORAGE_BACKEND.

Usage:
    from cardapio.services.storage import get_kv_backend, KeyValueStore

    backend = get_kv_backend()
    await backend.initialize()
    store = KeyValueStore(backend, "@cardapio:produtos")

Version: 1.0.0
"""

import logging
from functools import lru_cache

from cardapio.core.config import StorageBackend, get_settings
from cardapio.services.storage.base import BaseKeyValueBackend
from cardapio.services.storage.collection import Collection
from cardapio.services.storage.file import FileKeyValueBackend
from cardapio.services.storage.kv_store import (
    PRODUCTS,
    RESTAURANTS,
    SESSION,
    USERS,
    KeyValueStore,
    collection_prefix,
)
from cardapio.services.storage.memory import MemoryKeyValueBackend
from cardapio.services.storage.sql import SQLKeyValueBackend

logger = logging.getLogger(__name__)


@lru_cache()
def get_kv_backend() -> BaseKeyValueBackend:
    """
    Get the configured key-value backend instance.

    Returns:
        BaseKeyValueBackend: Memory, file or SQL backend
    """
    settings = get_settings()

    if settings.storage_backend == StorageBackend.MEMORY:
        logger.info("Storage: Using MemoryKeyValueBackend")
        return MemoryKeyValueBackend()

    if settings.storage_backend == StorageBackend.SQL:
        logger.info(f"Storage: Using SQLKeyValueBackend ({settings.database_url})")
        return SQLKeyValueBackend(settings.database_url, echo=settings.debug)

    logger.info(f"Storage: Using FileKeyValueBackend ({settings.storage_file_path})")
    return FileKeyValueBackend(
        settings.storage_file_path,
        lock_timeout=settings.storage_lock_timeout,
    )


def reset_kv_backend() -> None:
    """
    Clear the cached backend instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_kv_backend.cache_clear()
    logger.debug("Storage backend cache cleared")


__all__ = [
    "get_kv_backend",
    "reset_kv_backend",
    "BaseKeyValueBackend",
    "MemoryKeyValueBackend",
    "FileKeyValueBackend",
    "SQLKeyValueBackend",
    "KeyValueStore",
    "Collection",
    "collection_prefix",
    "USERS",
    "RESTAURANTS",
    "PRODUCTS",
    "SESSION",
]

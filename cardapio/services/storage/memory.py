"""
Memory Key-Value Backend

Keeps every key in a dict owned by the backend instance. Used in development
and by the test-suite; nothing survives the process.
"""

import logging
from typing import Optional

from cardapio.services.storage.base import BaseKeyValueBackend

logger = logging.getLogger(__name__)


class MemoryKeyValueBackend(BaseKeyValueBackend):
    """
    In-memory implementation of the key-value backend.

    Example:
        >>> backend = MemoryKeyValueBackend()
        >>> await backend.set_item("k", "v")
        >>> await backend.get_all_keys()
        ['k']
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})
        logger.debug(f"MemoryKeyValueBackend initialized ({len(self._items)} keys)")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "memory"

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def get_all_keys(self) -> list[str]:
        return list(self._items)

    async def health_check(self) -> bool:
        """Memory backend is always available."""
        return True

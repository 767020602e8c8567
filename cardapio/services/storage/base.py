"""
Key-Value Backend Abstract Base Class

Defines the interface contract for every persistence substrate. The API
mirrors a device async storage: string keys, string values, bulk variants
and a full key listing. Keys arrive already namespaced; backends know
nothing about prefixes or JSON.

Implementations:
    - MemoryKeyValueBackend: in-process dict (development, tests)
    - FileKeyValueBackend: one JSON document guarded by a lock file
    - SQLKeyValueBackend: SQLAlchemy async table

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence


class BaseKeyValueBackend(ABC):
    """
    Abstract base class for key-value backends.

    Backends raise whatever their substrate raises; KeyValueStore turns
    those failures into StorageError.

    Example:
        >>> backend = get_kv_backend()
        >>> await backend.set_item("@cardapio:produtos:abc", '{"nome": "Pizza"}')
        >>> await backend.get_item("@cardapio:produtos:abc")
        '{"nome": "Pizza"}'
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the backend.

        Returns:
            str: Provider name (e.g., "memory", "file", "sql")
        """
        pass

    async def initialize(self) -> None:
        """Prepare the substrate (create files, tables). Idempotent."""

    async def close(self) -> None:
        """Release connections or handles held by the backend."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read one raw value.

        Returns:
            The stored text, or None when the key is absent
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Create or overwrite one raw value."""
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete one key. Deleting an absent key is not an error."""
        pass

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """Return every key held by the backend."""
        pass

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, Optional[str]]]:
        """Read several keys; pairs come back in request order."""
        return [(key, await self.get_item(key)) for key in keys]

    async def multi_set(self, items: Sequence[tuple[str, str]]) -> None:
        """Write several key/value pairs."""
        for key, value in items:
            await self.set_item(key, value)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        """Delete several keys."""
        for key in keys:
            await self.remove_item(key)

    async def health_check(self) -> bool:
        """
        Verify the backend can be reached.

        Returns:
            bool: True if the backend answers a key listing
        """
        try:
            await self.get_all_keys()
            return True
        except Exception:
            return False

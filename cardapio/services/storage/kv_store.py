"""
Namespaced Key-Value Store

The only component that talks to a backend. Every key is written as
"<prefix>:<key>" and every value as JSON text; callers only see their own
relative keys and decoded values.

Error contract:
    - get(): missing key or undecodable JSON -> None
    - any backend failure -> StorageError with a generic message; the
      original exception is logged and chained, never shown to users
"""

import json
import logging
from typing import Any, Optional, Sequence

from cardapio.core.exceptions import StorageError
from cardapio.services.storage.base import BaseKeyValueBackend

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    JSON key-value access scoped to one prefix.

    Example:
        >>> store = KeyValueStore(backend, "@cardapio:produtos")
        >>> await store.save("abc", {"nome": "Pizza"})
        >>> await store.list_keys()
        ['abc']
    """

    def __init__(self, backend: BaseKeyValueBackend, prefix: str):
        self.backend = backend
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def _relative(self, full_key: str) -> str:
        return full_key[len(self.prefix) + 1:]

    @staticmethod
    def _decode(raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable value")
            return None

    async def save(self, key: str, value: Any) -> None:
        try:
            await self.backend.set_item(self._key(key), json.dumps(value, ensure_ascii=False))
        except Exception as e:
            logger.error(f"Error saving {self._key(key)}: {e}", exc_info=True)
            raise StorageError("Failed to save data") from e

    async def get(self, key: str) -> Any:
        try:
            raw = await self.backend.get_item(self._key(key))
        except Exception as e:
            logger.error(f"Error reading {self._key(key)}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve data") from e
        return self._decode(raw)

    async def remove(self, key: str) -> None:
        try:
            await self.backend.remove_item(self._key(key))
        except Exception as e:
            logger.error(f"Error removing {self._key(key)}: {e}", exc_info=True)
            raise StorageError("Failed to remove data") from e

    async def list_keys(self, prefix: Optional[str] = None) -> list[str]:
        """
        List keys under this store's namespace.

        Args:
            prefix: Optional extra filter applied to the relative key

        Returns:
            Relative keys (without "<prefix>:")
        """
        search = self._key(prefix or "")
        try:
            all_keys = await self.backend.get_all_keys()
        except Exception as e:
            logger.error(f"Error listing keys under {search}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve keys") from e
        return [self._relative(key) for key in all_keys if key.startswith(search)]

    async def get_multiple(self, keys: Sequence[str]) -> list[Any]:
        """Read several keys; undecodable or missing values come back as None."""
        try:
            pairs = await self.backend.multi_get([self._key(key) for key in keys])
        except Exception as e:
            logger.error(f"Error reading {len(keys)} keys under {self.prefix}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve multiple data") from e
        return [self._decode(raw) for _, raw in pairs]

    async def save_multiple(self, items: Sequence[tuple[str, Any]]) -> None:
        try:
            encoded = [
                (self._key(key), json.dumps(value, ensure_ascii=False))
                for key, value in items
            ]
            await self.backend.multi_set(encoded)
        except Exception as e:
            logger.error(f"Error saving {len(items)} keys under {self.prefix}: {e}", exc_info=True)
            raise StorageError("Failed to save multiple data") from e

    async def clear(self) -> None:
        """Remove every key under this store's namespace."""
        keys = await self.list_keys()
        if not keys:
            return
        try:
            await self.backend.multi_remove([self._key(key) for key in keys])
        except Exception as e:
            logger.error(f"Error clearing {self.prefix}: {e}", exc_info=True)
            raise StorageError("Failed to clear data") from e

    async def exists(self, key: str) -> bool:
        try:
            return await self.backend.get_item(self._key(key)) is not None
        except Exception as e:
            logger.error(f"Error checking {self._key(key)}: {e}")
            return False


# =============================================================================
# COLLECTION NAMES
# =============================================================================

USERS = "usuarios"
RESTAURANTS = "restaurantes"
PRODUCTS = "produtos"
SESSION = "sessao"


def collection_prefix(namespace: str, collection: str) -> str:
    """Build a collection prefix such as "@cardapio:produtos"."""
    return f"{namespace}:{collection}"

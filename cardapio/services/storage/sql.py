"""
SQL Key-Value Backend

Stores keys in the kv_store table through SQLAlchemy's async engine. Any
async driver works; SQLite via aiosqlite is the default URL.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.engine import make_url

from cardapio.database import create_engine, create_session_maker, init_db
from cardapio.models import KeyValueEntry
from cardapio.services.storage.base import BaseKeyValueBackend

logger = logging.getLogger(__name__)


class SQLKeyValueBackend(BaseKeyValueBackend):
    """
    SQLAlchemy implementation of the key-value backend.

    Example:
        >>> backend = SQLKeyValueBackend("sqlite+aiosqlite:///data/cardapio.db")
        >>> await backend.initialize()
        >>> await backend.set_item("k", "v")
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._engine = create_engine(database_url, echo=echo)
        self._session_maker = create_session_maker(self._engine)
        self._initialized = False
        logger.info("SQLKeyValueBackend initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "sql"

    async def initialize(self) -> None:
        if self._initialized:
            return
        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        await init_db(self._engine)
        self._initialized = True
        logger.debug("kv_store table ready")

    async def close(self) -> None:
        await self._engine.dispose()

    async def get_item(self, key: str) -> Optional[str]:
        async with self._session_maker() as session:
            entry = await session.get(KeyValueEntry, key)
            return entry.value if entry else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._session_maker() as session:
            await session.merge(KeyValueEntry(key=key, value=value))
            await session.commit()

    async def remove_item(self, key: str) -> None:
        async with self._session_maker() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await session.commit()

    async def get_all_keys(self) -> list[str]:
        async with self._session_maker() as session:
            result = await session.execute(select(KeyValueEntry.key))
            return list(result.scalars().all())

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, Optional[str]]]:
        if not keys:
            return []
        async with self._session_maker() as session:
            result = await session.execute(
                select(KeyValueEntry.key, KeyValueEntry.value).where(KeyValueEntry.key.in_(keys))
            )
            found = {row.key: row.value for row in result}
        return [(key, found.get(key)) for key in keys]

    async def multi_set(self, items: Sequence[tuple[str, str]]) -> None:
        async with self._session_maker() as session:
            for key, value in items:
                await session.merge(KeyValueEntry(key=key, value=value))
            await session.commit()

    async def multi_remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        async with self._session_maker() as session:
            await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key.in_(keys)))
            await session.commit()

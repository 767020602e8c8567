"""
Generic Keyed Collection

CRUD over one KeyValueStore prefix for one record type. Entity services
(users, restaurants, products) each own a Collection and add their lookups
on top of it.

Every query is a full scan: list() enumerates the keys under the prefix
and reads them one by one. That is fine at device scale.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Optional, Type, TypeVar

from pydantic import ValidationError

from cardapio.core.exceptions import CardapioError, NotFoundError
from cardapio.core.utils import as_utc, generate_id, utc_now
from cardapio.schemas import RecordModel, normalize_fields
from cardapio.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=RecordModel)

IMMUTABLE_FIELDS = ("id", "created_at")


class Collection(Generic[T]):
    """
    Records of one type stored as "<prefix>:<id>".

    Attributes:
        store: Namespaced key-value store for this collection
        model: Pydantic record type (must have id and created_at)
        label: Human name used in not-found messages ("Product")
    """

    def __init__(
        self,
        store: KeyValueStore,
        model: Type[T],
        label: str,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.model = model
        self.label = label
        self._id_factory = id_factory
        self._clock = clock

    def _changes(self, data: Mapping[str, Any]) -> dict[str, Any]:
        changes = normalize_fields(self.model, data)
        for name in IMMUTABLE_FIELDS:
            changes.pop(name, None)
        return changes

    def _parse(self, key: str, raw: Any) -> Optional[T]:
        if raw is None:
            return None
        try:
            return self.model.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed {self.label.lower()} record {key}: {e.error_count()} errors")
            return None

    async def save(self, payload: Mapping[str, Any]) -> T:
        """
        Persist a new record with a fresh id and creation timestamp.

        Any id/created_at present in the payload is ignored.
        """
        record = self.model.model_validate({
            **self._changes(payload),
            "id": self._id_factory(),
            "created_at": self._clock(),
        })
        await self.store.save(record.id, record.to_record())
        logger.debug(f"{self.label} {record.id} saved")
        return record

    async def find_by_id(self, record_id: str) -> Optional[T]:
        return self._parse(record_id, await self.store.get(record_id))

    async def list(self) -> list[T]:
        """All readable records, newest first."""
        records: list[T] = []
        for key in await self.store.list_keys():
            record = await self.find_by_id(key)
            if record is not None:
                records.append(record)
        return sorted(records, key=lambda record: as_utc(record.created_at), reverse=True)

    def merge(self, existing: T, changes: Mapping[str, Any]) -> T:
        """Overlay changes on a record, keeping its id and created_at."""
        return self.model.model_validate({
            **existing.model_dump(),
            **self._changes(changes),
            "id": existing.id,
            "created_at": existing.created_at,
        })

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> T:
        """
        Merge partial changes into an existing record.

        Raises:
            NotFoundError: No record with this id
        """
        existing = await self.find_by_id(record_id)
        if existing is None:
            raise NotFoundError(f"{self.label} not found")
        updated = self.merge(existing, changes)
        await self.store.save(record_id, updated.to_record())
        logger.debug(f"{self.label} {record_id} updated")
        return updated

    async def remove(self, record_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True when a record existed and was removed; False when it was
            missing or the backend failed (both are logged)
        """
        try:
            if not await self.store.exists(record_id):
                raise NotFoundError(f"{self.label} not found")
            await self.store.remove(record_id)
            logger.debug(f"{self.label} {record_id} removed")
            return True
        except CardapioError as e:
            logger.error(f"Error removing {self.label.lower()} {record_id}: {e.message}")
            return False

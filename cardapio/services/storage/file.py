"""
File Key-Value Backend with Concurrency Control

Persists every key in a single JSON document on disk, the closest match to
device storage. Each operation takes a FileLock on a sibling ".lock" file,
so several processes (the app and the operator scripts) can share the same
document safely. Blocking file I/O runs in a worker thread.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar, Union

from filelock import FileLock, Timeout

from cardapio.services.storage.base import BaseKeyValueBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FileKeyValueBackend(BaseKeyValueBackend):
    """Lock-protected JSON file backend."""

    def __init__(self, file_path: Union[Path, str], lock_timeout: int = 10):
        self.file_path = Path(file_path)
        self.lock_path = self.file_path.with_name(self.file_path.name + ".lock")
        self.lock_timeout = lock_timeout
        logger.info(f"FileKeyValueBackend initialized ({self.file_path})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "file"

    # -------------------------------------------------------------------------
    # file helpers (blocking, always called under the lock)
    # -------------------------------------------------------------------------

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        directory = self.file_path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {directory}")

    def _load(self) -> dict[str, str]:
        if not self.file_path.exists():
            return {}
        with self.file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Storage document {self.file_path} is not a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.file_path)

    def _locked(self, operation: Callable[[dict[str, str]], T], *, write: bool) -> T:
        self._ensure_data_dir()
        lock = FileLock(str(self.lock_path), timeout=self.lock_timeout)
        try:
            with lock:
                data = self._load()
                result = operation(data)
                if write:
                    self._write(data)
                return result
        except Timeout:
            logger.error(f"Lock timeout ({self.lock_timeout}s) on {self.lock_path}")
            raise

    async def _run(self, operation: Callable[[dict[str, str]], T], *, write: bool = False) -> T:
        return await asyncio.to_thread(self._locked, operation, write=write)

    # -------------------------------------------------------------------------
    # backend API
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        if not self.file_path.exists():
            await self._run(lambda data: None, write=True)

    async def get_item(self, key: str) -> Optional[str]:
        return await self._run(lambda data: data.get(key))

    async def set_item(self, key: str, value: str) -> None:
        def store(data: dict[str, str]) -> None:
            data[key] = value

        await self._run(store, write=True)

    async def remove_item(self, key: str) -> None:
        await self._run(lambda data: data.pop(key, None), write=True)

    async def get_all_keys(self) -> list[str]:
        return await self._run(lambda data: list(data))

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, Optional[str]]]:
        return await self._run(lambda data: [(key, data.get(key)) for key in keys])

    async def multi_set(self, items: Sequence[tuple[str, str]]) -> None:
        await self._run(lambda data: data.update(items), write=True)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        def drop(data: dict[str, str]) -> None:
            for key in keys:
                data.pop(key, None)

        await self._run(drop, write=True)

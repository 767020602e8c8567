from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cardapio.context import open_context
from cardapio.core.config import EnvironmentMode, Settings, StorageBackend, get_settings
from cardapio.services.postal import MockPostalCodeService
from cardapio.services.storage import (
    FileKeyValueBackend,
    MemoryKeyValueBackend,
    SQLKeyValueBackend,
    get_kv_backend,
)

from conftest import PASSWORD


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.env_mode == EnvironmentMode.DEVELOPMENT
    assert settings.storage_backend == StorageBackend.FILE
    assert settings.storage_namespace == "@cardapio"
    assert settings.session_ttl_seconds == 24 * 3600
    assert settings.storage_file_path == Path("data") / "cardapio.json"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "PRODUCTION")
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("SESSION_TTL_HOURS", "2")

    settings = get_settings()

    assert settings.is_production and settings.use_real_services
    assert settings.storage_backend == StorageBackend.SQL
    assert settings.session_ttl_seconds == 7200
    assert get_settings() is settings


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "floppy")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)

    monkeypatch.delenv("STORAGE_BACKEND")
    monkeypatch.setenv("ENV_MODE", "qa")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("backend_name, expected", [
    ("memory", MemoryKeyValueBackend),
    ("file", FileKeyValueBackend),
    ("sql", SQLKeyValueBackend),
])
def test_backend_factory(monkeypatch, tmp_path, backend_name, expected):
    monkeypatch.setenv("STORAGE_BACKEND", backend_name)
    monkeypatch.setenv("DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cardapio.db'}")

    backend = get_kv_backend()

    assert isinstance(backend, expected)
    assert get_kv_backend() is backend


def test_file_backend_uses_data_directory(monkeypatch, tmp_path):
    monkeypatch.setenv("STORAGE_BACKEND", "file")
    monkeypatch.setenv("DATA_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("STORAGE_FILENAME", "menu.json")

    assert get_kv_backend().file_path == tmp_path / "menu.json"


async def test_session_survives_reopening_file_storage(tmp_path):
    settings = Settings(
        _env_file=None,
        storage_backend="file",
        data_directory=str(tmp_path),
    )

    async with open_context(
        settings=settings,
        backend=FileKeyValueBackend(settings.storage_file_path),
        postal_service=MockPostalCodeService(),
    ) as ctx:
        registered = await ctx.auth.register("Ana", "ana@example.com", PASSWORD, PASSWORD)
        assert registered.success

    async with open_context(
        settings=settings,
        backend=FileKeyValueBackend(settings.storage_file_path),
        postal_service=MockPostalCodeService(),
    ) as ctx:
        assert (await ctx.auth.get_current_user()).id == registered.user.id
        assert (await ctx.users.find_by_email("ana@example.com")) is not None

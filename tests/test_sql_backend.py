"""
Smoke tests for the SQL backend against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from cardapio.services.storage import KeyValueStore, SQLKeyValueBackend


@pytest.fixture()
async def sql_backend(tmp_path):
    db_file = tmp_path / "db" / "test.db"
    backend = SQLKeyValueBackend(f"sqlite+aiosqlite:///{db_file}")
    await backend.initialize()
    yield backend
    await backend.close()


async def test_set_get_overwrite_remove(sql_backend):
    await sql_backend.set_item("@cardapio:produtos:a", '{"nome": "Coxinha"}')
    assert await sql_backend.get_item("@cardapio:produtos:a") == '{"nome": "Coxinha"}'

    await sql_backend.set_item("@cardapio:produtos:a", '{"nome": "Pastel"}')
    assert await sql_backend.get_item("@cardapio:produtos:a") == '{"nome": "Pastel"}'

    await sql_backend.remove_item("@cardapio:produtos:a")
    assert await sql_backend.get_item("@cardapio:produtos:a") is None


async def test_bulk_operations_keep_request_order(sql_backend):
    await sql_backend.multi_set([("k1", "1"), ("k2", "2"), ("k3", "3")])

    assert await sql_backend.multi_get(["k3", "nope", "k1"]) == [("k3", "3"), ("nope", None), ("k1", "1")]
    assert sorted(await sql_backend.get_all_keys()) == ["k1", "k2", "k3"]

    await sql_backend.multi_remove(["k1", "k2"])
    assert await sql_backend.get_all_keys() == ["k3"]


async def test_store_round_trip_over_sql(sql_backend):
    store = KeyValueStore(sql_backend, "@cardapio:usuarios")
    await store.save("u1", {"nome": "Ana", "email": "ana@example.com"})

    assert await store.list_keys() == ["u1"]
    assert await store.get("u1") == {"nome": "Ana", "email": "ana@example.com"}


async def test_data_survives_reopen(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'persist.db'}"

    first = SQLKeyValueBackend(url)
    await first.initialize()
    await first.set_item("k", "v")
    await first.close()

    second = SQLKeyValueBackend(url)
    await second.initialize()
    assert await second.get_item("k") == "v"
    assert await second.health_check() is True
    await second.close()

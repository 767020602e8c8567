"""
Shared fixtures: an in-memory app context, sign-in helpers and valid
payload builders.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Make the cardapio package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cardapio.context import open_context  # noqa: E402
from cardapio.core.config import Settings, get_settings  # noqa: E402
from cardapio.schemas import UserRole  # noqa: E402
from cardapio.services.postal import MockPostalCodeService, reset_postal_code_service  # noqa: E402
from cardapio.services.storage import MemoryKeyValueBackend, reset_kv_backend  # noqa: E402

ADMIN_EMAIL = "admin@cardapio.com"
CLIENT_EMAIL = "cliente@cardapio.com"
PASSWORD = "senha123"


def make_restaurant_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "Cantina da Nonna",
        "tax_id": "12.345.678/0001-90",
        "address": {
            "street": "Avenida Paulista",
            "number": "1000",
            "postal_code": "01310-100",
            "neighborhood": "Bela Vista",
            "city": "São Paulo",
            "state": "SP",
            "latitude": -23.5614,
            "longitude": -46.6559,
        },
    }
    data.update(overrides)
    return data


def make_product_data(restaurant_id: str, **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "Pizza Margherita",
        "description": "Molho de tomate, mussarela e manjericão fresco",
        "price": 49.9,
        "image_url": "https://example.com/img/pizza.jpg",
        "restaurant_id": restaurant_id,
        "category": "Pizzas",
    }
    data.update(overrides)
    return data


@pytest.fixture(autouse=True)
def clear_caches():
    get_settings.cache_clear()
    reset_kv_backend()
    reset_postal_code_service()
    yield
    get_settings.cache_clear()
    reset_kv_backend()
    reset_postal_code_service()


@pytest.fixture()
def settings() -> Settings:
    return Settings(env_mode="development", storage_backend="memory")


@pytest.fixture()
def backend() -> MemoryKeyValueBackend:
    return MemoryKeyValueBackend()


@pytest.fixture()
def postal() -> MockPostalCodeService:
    return MockPostalCodeService()


@pytest.fixture()
async def ctx(settings, backend, postal):
    async with open_context(settings=settings, backend=backend, postal_service=postal) as context:
        yield context


@pytest.fixture()
def restaurant_data() -> Callable[..., dict[str, Any]]:
    return make_restaurant_data


@pytest.fixture()
def product_data() -> Callable[..., dict[str, Any]]:
    return make_product_data


@pytest.fixture()
async def admin(ctx):
    """Register an administrator and leave them signed in."""
    result = await ctx.auth.register("Admin", ADMIN_EMAIL, PASSWORD, PASSWORD, role=UserRole.ADMIN)
    assert result.success, result.error
    return result.user


@pytest.fixture()
async def client_user(ctx):
    """Register a client account and leave it signed in."""
    result = await ctx.auth.register("Cliente", CLIENT_EMAIL, PASSWORD, PASSWORD)
    assert result.success, result.error
    return result.user


@pytest.fixture()
async def restaurant(ctx, admin):
    result = await ctx.restaurant_controller.create_restaurant(make_restaurant_data())
    assert result.success, result.error
    return result.restaurant

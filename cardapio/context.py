"""
Application Context

Wires one key-value backend, the entity services, the device session and
the controllers together. Controllers never reach for a global session:
they all receive the SessionStore created here.

Usage:
    from cardapio.context import open_context

    async with open_context() as ctx:
        result = await ctx.auth.login("admin@example.com", "admin123")
        menu = await ctx.menu.load_menu()

Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import AsyncIterator, Optional

from cardapio.controllers import (
    AuthController,
    MenuController,
    ProductController,
    RestaurantController,
)
from cardapio.core.config import Settings, get_settings
from cardapio.services.postal import (
    BasePostalCodeService,
    get_postal_code_service,
    reset_postal_code_service,
)
from cardapio.services.products import ProductService
from cardapio.services.restaurants import RestaurantService
from cardapio.services.sessions import SessionStore
from cardapio.services.storage import (
    PRODUCTS,
    RESTAURANTS,
    SESSION,
    USERS,
    BaseKeyValueBackend,
    KeyValueStore,
    collection_prefix,
    get_kv_backend,
)
from cardapio.services.users import UserService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything a caller needs to drive the app."""
    settings: Settings
    backend: BaseKeyValueBackend
    users: UserService
    restaurants: RestaurantService
    products: ProductService
    sessions: SessionStore
    postal: BasePostalCodeService
    auth: AuthController
    restaurant_controller: RestaurantController
    product_controller: ProductController
    menu: MenuController


def build_context(
    settings: Settings,
    backend: BaseKeyValueBackend,
    postal: BasePostalCodeService,
) -> AppContext:
    """Assemble services and controllers over an already chosen backend."""
    namespace = settings.storage_namespace

    def store(collection: str) -> KeyValueStore:
        return KeyValueStore(backend, collection_prefix(namespace, collection))

    users = UserService(store(USERS))
    restaurants = RestaurantService(store(RESTAURANTS))
    products = ProductService(store(PRODUCTS))
    sessions = SessionStore(store(SESSION), ttl=timedelta(hours=settings.session_ttl_hours))

    restaurant_controller = RestaurantController(restaurants, sessions, postal)
    product_controller = ProductController(products, sessions)

    return AppContext(
        settings=settings,
        backend=backend,
        users=users,
        restaurants=restaurants,
        products=products,
        sessions=sessions,
        postal=postal,
        auth=AuthController(users, sessions),
        restaurant_controller=restaurant_controller,
        product_controller=product_controller,
        menu=MenuController(restaurant_controller, product_controller),
    )


@asynccontextmanager
async def open_context(
    settings: Optional[Settings] = None,
    backend: Optional[BaseKeyValueBackend] = None,
    postal_service: Optional[BasePostalCodeService] = None,
) -> AsyncIterator[AppContext]:
    """
    Open the app: initialize storage and load the current session.

    Arguments left out come from the configured factories. The backend is
    closed on exit, and so is the postal service when it came from the
    factory.
    """
    settings = settings or get_settings()
    backend = backend or get_kv_backend()
    owns_postal = postal_service is None
    postal = postal_service or get_postal_code_service()

    logger.info(f"Starting {settings.app_name} {settings.app_version} ({settings.env_mode.value})")
    await backend.initialize()
    logger.info(f"Storage: {backend.provider_name} | Postal lookup: {postal.provider_name}")

    ctx = build_context(settings, backend, postal)

    user = await ctx.sessions.get_session()
    if user is not None:
        logger.info(f"Signed in as {user.email} ({user.role.value})")
    else:
        logger.info("No active session")

    try:
        yield ctx
    finally:
        await backend.close()
        logger.debug("Storage closed")
        if owns_postal:
            await postal.close()
            reset_postal_code_service()

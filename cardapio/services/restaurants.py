"""
Restaurant Storage Service

Restaurants under "@cardapio:restaurantes". Tax ids (CNPJ) are compared on
their digits only, so "12.345.678/0001-90" and "12345678000190" collide.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from cardapio.core.exceptions import TaxIdAlreadyRegisteredError
from cardapio.core.utils import only_digits
from cardapio.schemas import Restaurant, normalize_fields
from cardapio.services.storage.collection import Collection
from cardapio.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class RestaurantService:
    """CRUD and lookups for restaurants."""

    def __init__(self, store: KeyValueStore, **collection_options: Any):
        self.records: Collection[Restaurant] = Collection(
            store, Restaurant, "Restaurant", **collection_options
        )

    async def save(self, payload: Mapping[str, Any]) -> Restaurant:
        """
        Register a restaurant.

        Raises:
            TaxIdAlreadyRegisteredError: Another restaurant has this tax id
        """
        tax_id = normalize_fields(Restaurant, payload).get("tax_id", "")
        if await self.find_by_tax_id(tax_id):
            raise TaxIdAlreadyRegisteredError("Tax id already registered")
        restaurant = await self.records.save(payload)
        logger.info(f"Restaurant {restaurant.id} created ({restaurant.name})")
        return restaurant

    async def find_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        return await self.records.find_by_id(restaurant_id)

    async def find_by_tax_id(self, tax_id: str) -> Optional[Restaurant]:
        digits = only_digits(tax_id)
        if not digits:
            return None
        for restaurant in await self.records.list():
            if only_digits(restaurant.tax_id) == digits:
                return restaurant
        return None

    async def list(self) -> list[Restaurant]:
        return await self.records.list()

    async def update(self, restaurant_id: str, changes: Mapping[str, Any]) -> Restaurant:
        """
        Update a restaurant, re-checking tax id uniqueness when it changes.

        Raises:
            NotFoundError: No restaurant with this id
            TaxIdAlreadyRegisteredError: New tax id belongs to another restaurant
        """
        tax_id = normalize_fields(Restaurant, changes).get("tax_id")
        if tax_id:
            owner = await self.find_by_tax_id(tax_id)
            if owner is not None and owner.id != restaurant_id:
                raise TaxIdAlreadyRegisteredError("Tax id already in use by another restaurant")
        return await self.records.update(restaurant_id, changes)

    async def remove(self, restaurant_id: str) -> bool:
        return await self.records.remove(restaurant_id)

    async def tax_id_exists(self, tax_id: str) -> bool:
        return await self.find_by_tax_id(tax_id) is not None

    async def search_by_city(self, city: str) -> list[Restaurant]:
        """Restaurants whose city contains the text, ignoring case."""
        wanted = city.lower()
        return [
            restaurant for restaurant in await self.records.list()
            if wanted in restaurant.address.city.lower()
        ]

    async def search_by_name(self, name: str) -> list[Restaurant]:
        wanted = name.lower()
        return [
            restaurant for restaurant in await self.records.list()
            if wanted in restaurant.name.lower()
        ]

"""
Product Storage Service

Products under "@cardapio:produtos". Every query filters the full list in
memory and keeps its newest-first order unless stated otherwise.

A product's restaurant_id is stored as given; nothing checks that the
restaurant exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from cardapio.schemas import PriceOrder, Product
from cardapio.services.storage.collection import Collection
from cardapio.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class ProductFilters:
    """
    Criteria for ProductService.search. Unset criteria are ignored.

    Attributes:
        name: Substring of the product name (case-insensitive)
        category: Exact category (case-insensitive)
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound
        restaurant_id: Owning restaurant
    """
    name: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    restaurant_id: Optional[str] = None

    def matches(self, product: Product) -> bool:
        if self.name and self.name.lower() not in product.name.lower():
            return False
        if self.category and (product.category or "").lower() != self.category.lower():
            return False
        if self.min_price is not None and product.price < self.min_price:
            return False
        if self.max_price is not None and product.price > self.max_price:
            return False
        if self.restaurant_id and product.restaurant_id != self.restaurant_id:
            return False
        return True


class ProductService:
    """CRUD and queries for menu products."""

    def __init__(self, store: KeyValueStore, **collection_options: Any):
        self.records: Collection[Product] = Collection(store, Product, "Product", **collection_options)

    async def save(self, payload: Mapping[str, Any]) -> Product:
        product = await self.records.save(payload)
        logger.info(f"Product {product.id} created for restaurant {product.restaurant_id}")
        return product

    async def find_by_id(self, product_id: str) -> Optional[Product]:
        return await self.records.find_by_id(product_id)

    async def list(self) -> list[Product]:
        return await self.records.list()

    async def list_by_restaurant(self, restaurant_id: str) -> list[Product]:
        return [p for p in await self.records.list() if p.restaurant_id == restaurant_id]

    async def update(self, product_id: str, changes: Mapping[str, Any]) -> Product:
        """
        Raises:
            NotFoundError: No product with this id
        """
        return await self.records.update(product_id, changes)

    async def remove(self, product_id: str) -> bool:
        return await self.records.remove(product_id)

    async def search_by_name(self, name: str) -> list[Product]:
        wanted = name.lower()
        return [p for p in await self.records.list() if wanted in p.name.lower()]

    async def search_text(self, text: str) -> list[Product]:
        """Products whose name or description contains the text."""
        wanted = text.lower()
        return [
            p for p in await self.records.list()
            if wanted in p.name.lower() or wanted in p.description.lower()
        ]

    async def search_by_category(self, category: str) -> list[Product]:
        wanted = category.lower()
        return [p for p in await self.records.list() if (p.category or "").lower() == wanted]

    async def search_by_price_range(self, min_price: float, max_price: float) -> list[Product]:
        """Products priced within [min_price, max_price]."""
        return [p for p in await self.records.list() if min_price <= p.price <= max_price]

    async def list_sorted_by_price(self, order: PriceOrder = PriceOrder.ASC) -> list[Product]:
        return sorted(
            await self.records.list(),
            key=lambda p: p.price,
            reverse=PriceOrder(order) == PriceOrder.DESC,
        )

    async def search(self, filters: ProductFilters) -> list[Product]:
        """Apply every set criterion of the filters at once."""
        return [p for p in await self.records.list() if filters.matches(p)]

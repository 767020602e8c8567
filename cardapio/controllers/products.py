"""
Product Controller

Admin-only product management plus the public listing and search calls
used by the menu.
"""

import logging
from typing import Any, Mapping

from cardapio.controllers.results import (
    INTERNAL_ERROR,
    OperationResult,
    ProductListResult,
    ProductResult,
    access_denied,
)
from cardapio.core.exceptions import DomainError
from cardapio.schemas import Product, normalize_fields
from cardapio.services.products import ProductFilters, ProductService
from cardapio.services.sessions import SessionStore
from cardapio.validators import validate_product

logger = logging.getLogger(__name__)


class ProductController:

    def __init__(self, products: ProductService, sessions: SessionStore):
        self.products = products
        self.sessions = sessions

    async def create_product(self, data: Mapping[str, Any]) -> ProductResult:
        try:
            if not await self.sessions.is_admin():
                return ProductResult(success=False, error=access_denied("register products"))

            payload = normalize_fields(Product, data)
            report = validate_product(payload)
            if not report.valid:
                return ProductResult(success=False, error=report.message)

            product = await self.products.save(payload)
            return ProductResult(success=True, product=product)

        except DomainError as e:
            return ProductResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error creating product: {e}")
            return ProductResult(success=False, error=INTERNAL_ERROR)

    async def list_products(self) -> ProductListResult:
        try:
            return ProductListResult(success=True, products=await self.products.list())
        except Exception as e:
            logger.exception(f"Error listing products: {e}")
            return ProductListResult(success=False, error=INTERNAL_ERROR)

    async def list_products_by_restaurant(self, restaurant_id: str) -> ProductListResult:
        try:
            products = await self.products.list_by_restaurant(restaurant_id)
            return ProductListResult(success=True, products=products)
        except Exception as e:
            logger.exception(f"Error listing products of restaurant {restaurant_id}: {e}")
            return ProductListResult(success=False, error=INTERNAL_ERROR)

    async def get_product(self, product_id: str) -> ProductResult:
        try:
            product = await self.products.find_by_id(product_id)
            if product is None:
                return ProductResult(success=False, error="Product not found")
            return ProductResult(success=True, product=product)
        except Exception as e:
            logger.exception(f"Error loading product {product_id}: {e}")
            return ProductResult(success=False, error=INTERNAL_ERROR)

    async def update_product(self, product_id: str, changes: Mapping[str, Any]) -> ProductResult:
        try:
            if not await self.sessions.is_admin():
                return ProductResult(success=False, error=access_denied("edit products"))

            existing = await self.products.find_by_id(product_id)
            if existing is None:
                return ProductResult(success=False, error="Product not found")

            normalized = normalize_fields(Product, changes)
            report = validate_product({**existing.model_dump(), **normalized})
            if not report.valid:
                return ProductResult(success=False, error=report.message)

            product = await self.products.update(product_id, normalized)
            return ProductResult(success=True, product=product)

        except DomainError as e:
            return ProductResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error updating product {product_id}: {e}")
            return ProductResult(success=False, error=INTERNAL_ERROR)

    async def remove_product(self, product_id: str) -> OperationResult:
        try:
            if not await self.sessions.is_admin():
                return OperationResult(success=False, error=access_denied("remove products"))

            if not await self.products.remove(product_id):
                return OperationResult(success=False, error="Product not found")
            return OperationResult(success=True)

        except Exception as e:
            logger.exception(f"Error removing product {product_id}: {e}")
            return OperationResult(success=False, error=INTERNAL_ERROR)

    async def search_products_by_name(self, name: str) -> ProductListResult:
        try:
            return ProductListResult(success=True, products=await self.products.search_by_name(name))
        except Exception as e:
            logger.exception(f"Error searching products: {e}")
            return ProductListResult(success=False, error=INTERNAL_ERROR)

    async def filter_products(self, filters: ProductFilters) -> ProductListResult:
        try:
            return ProductListResult(success=True, products=await self.products.search(filters))
        except Exception as e:
            logger.exception(f"Error filtering products: {e}")
            return ProductListResult(success=False, error=INTERNAL_ERROR)

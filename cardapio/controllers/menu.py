"""
Menu Controller

Builds the browsable menu (restaurants with their products) and removes a
restaurant together with its products.

The cascade is a sequence of independent removals with no rollback: if a
product cannot be removed the restaurant removal is still attempted, and
the result lists which products were and were not removed.
"""

import logging

from cardapio.controllers.products import ProductController
from cardapio.controllers.restaurants import RestaurantController
from cardapio.controllers.results import (
    INTERNAL_ERROR,
    CascadeDeleteResult,
    MenuResult,
    MenuSection,
    access_denied,
)

logger = logging.getLogger(__name__)

# restaurant_id given to products created before any restaurant existed
PLACEHOLDER_RESTAURANT_ID = "default"


class MenuController:

    def __init__(self, restaurants: RestaurantController, products: ProductController):
        self.restaurants = restaurants
        self.products = products

    async def _rehome_placeholder_products(self, newest_restaurant_id: str) -> int:
        """
        Point products with the placeholder restaurant id to a real restaurant.

        Goes through the admin-gated product update, so only an admin's menu
        load moves anything. A product that cannot be moved stays where it is.
        """
        if not await self.restaurants.sessions.is_admin():
            return 0

        moved = 0
        for product in await self.products.products.list():
            if product.restaurant_id != PLACEHOLDER_RESTAURANT_ID:
                continue
            result = await self.products.update_product(
                product.id, {"restaurant_id": newest_restaurant_id}
            )
            if result.success:
                moved += 1
            else:
                logger.warning(f"Placeholder product {product.id} not moved: {result.error}")
        if moved:
            logger.info(f"Moved {moved} placeholder products to restaurant {newest_restaurant_id}")
        return moved

    async def load_menu(self) -> MenuResult:
        """
        Group every product under its restaurant, newest restaurant first.

        Restaurants without products are included with an empty list;
        products whose restaurant no longer exists are left out.
        """
        try:
            restaurants = await self.restaurants.restaurants.list()
            if restaurants:
                await self._rehome_placeholder_products(restaurants[0].id)

            products = await self.products.products.list()
            sections = [
                MenuSection(
                    restaurant=restaurant,
                    products=[p for p in products if p.restaurant_id == restaurant.id],
                )
                for restaurant in restaurants
            ]
            logger.debug(f"Menu loaded: {len(sections)} restaurants, {len(products)} products")
            return MenuResult(success=True, sections=sections)

        except Exception as e:
            logger.exception(f"Error loading menu: {e}")
            return MenuResult(success=False, error=INTERNAL_ERROR)

    async def delete_restaurant_cascade(self, restaurant_id: str) -> CascadeDeleteResult:
        """Remove every product of the restaurant one by one, then the restaurant."""
        if not await self.restaurants.sessions.is_admin():
            return CascadeDeleteResult(success=False, error=access_denied("remove restaurants"))

        result = CascadeDeleteResult(success=False)

        try:
            products = await self.products.products.list_by_restaurant(restaurant_id)
        except Exception as e:
            logger.exception(f"Error listing products of restaurant {restaurant_id}: {e}")
            products = []

        for product in products:
            removal = await self.products.remove_product(product.id)
            if removal.success:
                result.removed_product_ids.append(product.id)
            else:
                logger.warning(f"Product {product.id} not removed: {removal.error}")
                result.failed_product_ids.append(product.id)

        removal = await self.restaurants.remove_restaurant(restaurant_id)
        result.restaurant_removed = removal.success
        result.success = removal.success
        result.error = removal.error

        logger.info(
            f"Cascade delete of restaurant {restaurant_id}: "
            f"restaurant_removed={removal.success}, "
            f"products removed={len(result.removed_product_ids)}, "
            f"failed={len(result.failed_product_ids)}"
        )
        return result

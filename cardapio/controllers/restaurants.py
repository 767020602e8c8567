"""
Restaurant Controller

Admin-only registration, editing and removal of restaurants, public
listing and search, and the CEP lookup used to pre-fill an address.
"""

import logging
from typing import Any, Mapping, Optional

from cardapio.controllers.results import (
    INTERNAL_ERROR,
    AddressLookupResult,
    OperationResult,
    RestaurantListResult,
    RestaurantResult,
    access_denied,
)
from cardapio.core.exceptions import DomainError
from cardapio.schemas import Restaurant, normalize_fields
from cardapio.services.postal.base import BasePostalCodeService
from cardapio.services.restaurants import RestaurantService
from cardapio.services.sessions import SessionStore
from cardapio.validators import validate_restaurant

logger = logging.getLogger(__name__)


class RestaurantController:
    """
    Attributes:
        restaurants: Restaurant storage
        sessions: Device session, read on every admin-only call
        postal: Optional CEP lookup for address pre-fill
    """

    def __init__(
        self,
        restaurants: RestaurantService,
        sessions: SessionStore,
        postal: Optional[BasePostalCodeService] = None,
    ):
        self.restaurants = restaurants
        self.sessions = sessions
        self.postal = postal

    async def create_restaurant(self, data: Mapping[str, Any]) -> RestaurantResult:
        try:
            if not await self.sessions.is_admin():
                return RestaurantResult(success=False, error=access_denied("register restaurants"))

            payload = normalize_fields(Restaurant, data)
            report = validate_restaurant(payload)
            if not report.valid:
                return RestaurantResult(success=False, error=report.message)

            if await self.restaurants.tax_id_exists(payload["tax_id"]):
                return RestaurantResult(success=False, error="Tax id already registered")

            restaurant = await self.restaurants.save(payload)
            return RestaurantResult(success=True, restaurant=restaurant)

        except DomainError as e:
            return RestaurantResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error creating restaurant: {e}")
            return RestaurantResult(success=False, error=INTERNAL_ERROR)

    async def list_restaurants(self) -> RestaurantListResult:
        try:
            return RestaurantListResult(success=True, restaurants=await self.restaurants.list())
        except Exception as e:
            logger.exception(f"Error listing restaurants: {e}")
            return RestaurantListResult(success=False, error=INTERNAL_ERROR)

    async def get_restaurant(self, restaurant_id: str) -> RestaurantResult:
        try:
            restaurant = await self.restaurants.find_by_id(restaurant_id)
            if restaurant is None:
                return RestaurantResult(success=False, error="Restaurant not found")
            return RestaurantResult(success=True, restaurant=restaurant)
        except Exception as e:
            logger.exception(f"Error loading restaurant {restaurant_id}: {e}")
            return RestaurantResult(success=False, error=INTERNAL_ERROR)

    async def update_restaurant(self, restaurant_id: str, changes: Mapping[str, Any]) -> RestaurantResult:
        """
        Apply partial changes. A partial address is merged into the stored
        one, and the merged restaurant must pass validation.
        """
        try:
            if not await self.sessions.is_admin():
                return RestaurantResult(success=False, error=access_denied("edit restaurants"))

            existing = await self.restaurants.find_by_id(restaurant_id)
            if existing is None:
                return RestaurantResult(success=False, error="Restaurant not found")

            normalized = normalize_fields(Restaurant, changes)
            if isinstance(normalized.get("address"), Mapping):
                normalized["address"] = {
                    **existing.address.model_dump(),
                    **normalized["address"],
                }

            report = validate_restaurant({**existing.model_dump(), **normalized})
            if not report.valid:
                return RestaurantResult(success=False, error=report.message)

            restaurant = await self.restaurants.update(restaurant_id, normalized)
            return RestaurantResult(success=True, restaurant=restaurant)

        except DomainError as e:
            return RestaurantResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error updating restaurant {restaurant_id}: {e}")
            return RestaurantResult(success=False, error=INTERNAL_ERROR)

    async def remove_restaurant(self, restaurant_id: str) -> OperationResult:
        """Remove only the restaurant; see MenuController for the cascade."""
        try:
            if not await self.sessions.is_admin():
                return OperationResult(success=False, error=access_denied("remove restaurants"))

            if not await self.restaurants.remove(restaurant_id):
                return OperationResult(success=False, error="Restaurant not found")
            return OperationResult(success=True)

        except Exception as e:
            logger.exception(f"Error removing restaurant {restaurant_id}: {e}")
            return OperationResult(success=False, error=INTERNAL_ERROR)

    async def search_restaurants(
        self,
        name: Optional[str] = None,
        city: Optional[str] = None,
    ) -> RestaurantListResult:
        """Case-insensitive substring search; both criteria must match when given."""
        try:
            if name and city:
                wanted_city = city.lower()
                restaurants = [
                    r for r in await self.restaurants.search_by_name(name)
                    if wanted_city in r.address.city.lower()
                ]
            elif name:
                restaurants = await self.restaurants.search_by_name(name)
            elif city:
                restaurants = await self.restaurants.search_by_city(city)
            else:
                restaurants = await self.restaurants.list()
            return RestaurantListResult(success=True, restaurants=restaurants)

        except Exception as e:
            logger.exception(f"Error searching restaurants: {e}")
            return RestaurantListResult(success=False, error=INTERNAL_ERROR)

    async def lookup_address(self, postal_code: str) -> AddressLookupResult:
        if self.postal is None:
            return AddressLookupResult(success=False, error="Postal code lookup is not available")

        try:
            address = await self.postal.lookup(postal_code)
        except Exception as e:
            logger.exception(f"Error looking up postal code: {e}")
            return AddressLookupResult(success=False, error=INTERNAL_ERROR)

        if not address.found:
            return AddressLookupResult(success=False, address=address, error=address.error_message)
        return AddressLookupResult(success=True, address=address)

"""
                        Controllers Module

Orchestrate validation, the admin gate and storage calls, returning result
envelopes instead of raising.

Controllers:
    - auth: login, registration, session and profile
    - restaurants: restaurant management and CEP lookup
    - products: product management and search
    - menu: menu assembly and cascading restaurant removal
"""

from cardapio.controllers.auth import AuthController
from cardapio.controllers.menu import MenuController
from cardapio.controllers.products import ProductController
from cardapio.controllers.restaurants import RestaurantController
from cardapio.controllers.results import (
    INTERNAL_ERROR,
    AddressLookupResult,
    AuthResult,
    CascadeDeleteResult,
    MenuResult,
    MenuSection,
    OperationResult,
    ProductListResult,
    ProductResult,
    RestaurantListResult,
    RestaurantResult,
    SessionStatus,
)

__all__ = [
    "AuthController",
    "RestaurantController",
    "ProductController",
    "MenuController",
    "INTERNAL_ERROR",
    "AuthResult",
    "SessionStatus",
    "OperationResult",
    "RestaurantResult",
    "RestaurantListResult",
    "ProductResult",
    "ProductListResult",
    "AddressLookupResult",
    "MenuResult",
    "MenuSection",
    "CascadeDeleteResult",
]

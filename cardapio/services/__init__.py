"""
                        Services Module

Storage and lookup services behind the controllers.

Services:
    - storage: key-value backends (memory, file, sql) and the namespaced store
    - users / restaurants / products: entity collections
    - sessions: the device login session
    - postal: CEP lookup (mock or ViaCEP)
"""

from cardapio.services.products import ProductFilters, ProductService
from cardapio.services.restaurants import RestaurantService
from cardapio.services.sessions import SessionStore
from cardapio.services.users import UserService

__all__ = [
    "UserService",
    "RestaurantService",
    "ProductService",
    "ProductFilters",
    "SessionStore",
]

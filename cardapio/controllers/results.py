"""
Controller Result Envelopes

Every controller method returns one of these instead of raising. Failed
results carry a display-ready error message; the underlying cause is only
ever logged.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from cardapio.schemas import Product, Restaurant, User
from cardapio.services.postal.base import PostalAddress

INTERNAL_ERROR = "Internal error"


def access_denied(action: str) -> str:
    """Message for a non-admin attempting an admin-only action."""
    return f"Access denied. Only administrators can {action}."


def _user_dict(user: Optional[User]) -> Optional[dict[str, Any]]:
    if user is None:
        return None
    return user.model_dump(mode="json", exclude={"password"})


def _record_dict(record: Any) -> Optional[dict[str, Any]]:
    return record.model_dump(mode="json") if record is not None else None


@dataclass
class AuthResult:
    success: bool
    user: Optional[User] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"success": self.success, "user": _user_dict(self.user), "error": self.error}


@dataclass
class SessionStatus:
    logged_in: bool
    user: Optional[User] = None

    def to_dict(self) -> dict:
        return {"logged_in": self.logged_in, "user": _user_dict(self.user)}


@dataclass
class OperationResult:
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"success": self.success, "error": self.error}


@dataclass
class RestaurantResult:
    success: bool
    restaurant: Optional[Restaurant] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "restaurant": _record_dict(self.restaurant),
            "error": self.error,
        }


@dataclass
class RestaurantListResult:
    success: bool
    restaurants: list[Restaurant] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "restaurants": [_record_dict(r) for r in self.restaurants],
            "error": self.error,
        }


@dataclass
class ProductResult:
    success: bool
    product: Optional[Product] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "product": _record_dict(self.product),
            "error": self.error,
        }


@dataclass
class ProductListResult:
    success: bool
    products: list[Product] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "products": [_record_dict(p) for p in self.products],
            "error": self.error,
        }


@dataclass
class AddressLookupResult:
    """Outcome of a CEP lookup made to pre-fill a restaurant address."""
    success: bool
    address: Optional[PostalAddress] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "address": self.address.to_dict() if self.address else None,
            "error": self.error,
        }


@dataclass
class MenuSection:
    """One restaurant and the products listed under it."""
    restaurant: Restaurant
    products: list[Product] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "restaurant": _record_dict(self.restaurant),
            "products": [_record_dict(p) for p in self.products],
        }


@dataclass
class MenuResult:
    success: bool
    sections: list[MenuSection] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def product_count(self) -> int:
        return sum(len(section.products) for section in self.sections)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "sections": [s.to_dict() for s in self.sections],
            "error": self.error,
        }


@dataclass
class CascadeDeleteResult:
    """
    Outcome of removing a restaurant together with its products.

    The steps are independent: some products may be gone even when the
    overall result is a failure.
    """
    success: bool
    restaurant_removed: bool = False
    removed_product_ids: list[str] = field(default_factory=list)
    failed_product_ids: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "restaurant_removed": self.restaurant_removed,
            "removed_product_ids": list(self.removed_product_ids),
            "failed_product_ids": list(self.failed_product_ids),
            "error": self.error,
        }

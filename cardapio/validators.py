"""
Field and Record Validators

Pure functions, no I/O. Field validators return a bool (the password check
also returns a message). Record validators collect every violated rule, in
order, into a ValidationReport instead of stopping at the first one.

Record validators read attribute names (name, tax_id, address, ...); pass
payloads through schemas.normalize_fields first when they may carry the
persisted aliases.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from cardapio.core.utils import only_digits
from cardapio.schemas import UserRole

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
POSTAL_CODE_PATTERN = re.compile(r"^\d{5}-?\d{3}$")
REPEATED_DIGITS_PATTERN = re.compile(r"^(\d)\1+$")

MIN_PASSWORD_LENGTH = 6
MIN_DESCRIPTION_LENGTH = 10


@dataclass
class ValidationReport:
    """Outcome of a record validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        """All errors joined into one display string."""
        return ", ".join(self.errors)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


@dataclass
class PasswordCheck:
    valid: bool
    message: str


# =============================================================================
# FIELD VALIDATORS
# =============================================================================

def is_valid_email(email: Optional[str]) -> bool:
    if not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email))


def is_valid_tax_id(tax_id: Optional[str]) -> bool:
    """
    Basic CNPJ check: 14 digits once punctuation is removed, and not a
    single digit repeated. Check digits are not verified.
    """
    if not isinstance(tax_id, str):
        return False
    digits = only_digits(tax_id)
    if len(digits) != 14:
        return False
    return not REPEATED_DIGITS_PATTERN.match(digits)


def is_valid_postal_code(postal_code: Optional[str]) -> bool:
    """CEP in the 00000-000 or 00000000 format."""
    if not isinstance(postal_code, str):
        return False
    return bool(POSTAL_CODE_PATTERN.match(postal_code))


def are_valid_coordinates(latitude: float, longitude: float) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_price(price: Any) -> bool:
    return _is_number(price) and price > 0


def is_valid_url(url: Optional[str]) -> bool:
    """A URL needs at least a scheme and a network location."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def check_password_strength(password: str) -> PasswordCheck:
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordCheck(False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not re.search(r"[A-Za-z]", password):
        return PasswordCheck(False, "Password must contain at least one letter")
    if not re.search(r"\d", password):
        return PasswordCheck(False, "Password must contain at least one number")
    return PasswordCheck(True, "Valid password")


# =============================================================================
# RECORD VALIDATORS
# =============================================================================

def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def validate_user(user: Mapping[str, Any]) -> ValidationReport:
    errors: list[str] = []

    if len(_text(user.get("name"))) < 2:
        errors.append("Name must be at least 2 characters long")

    if not is_valid_email(user.get("email")):
        errors.append("Invalid email")

    password = user.get("password")
    if not password or not isinstance(password, str):
        errors.append("Password is required")
    else:
        check = check_password_strength(password)
        if not check.valid:
            errors.append(check.message)

    role = user.get("role")
    if isinstance(role, UserRole):
        role = role.value
    if role not in {r.value for r in UserRole}:
        errors.append("Invalid user role")

    return ValidationReport(valid=not errors, errors=errors)


def _validate_address(address: Mapping[str, Any], errors: list[str]) -> None:
    if len(_text(address.get("street"))) < 3:
        errors.append("Street must be at least 3 characters long")

    if len(_text(address.get("number"))) < 1:
        errors.append("Number is required")

    if not is_valid_postal_code(address.get("postal_code")):
        errors.append("Invalid postal code")

    if len(_text(address.get("neighborhood"))) < 2:
        errors.append("Neighborhood must be at least 2 characters long")

    if len(_text(address.get("city"))) < 2:
        errors.append("City must be at least 2 characters long")

    state = address.get("state")
    if not isinstance(state, str) or len(state) != 2:
        errors.append("State must have 2 characters")

    latitude = address.get("latitude")
    longitude = address.get("longitude")
    if not _is_number(latitude) or not _is_number(longitude):
        errors.append("Coordinates must be numbers")
    elif not are_valid_coordinates(latitude, longitude):
        errors.append("Invalid coordinates")


def validate_restaurant(restaurant: Mapping[str, Any]) -> ValidationReport:
    errors: list[str] = []

    if len(_text(restaurant.get("name"))) < 2:
        errors.append("Restaurant name must be at least 2 characters long")

    if not is_valid_tax_id(restaurant.get("tax_id")):
        errors.append("Invalid tax id")

    address = restaurant.get("address")
    if not address or not isinstance(address, Mapping):
        errors.append("Address is required")
    else:
        _validate_address(address, errors)

    return ValidationReport(valid=not errors, errors=errors)


def validate_product(product: Mapping[str, Any]) -> ValidationReport:
    errors: list[str] = []

    if len(_text(product.get("name"))) < 2:
        errors.append("Product name must be at least 2 characters long")

    if len(_text(product.get("description"))) < MIN_DESCRIPTION_LENGTH:
        errors.append(f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters long")

    if not is_valid_price(product.get("price")):
        errors.append("Price must be a positive value")

    image_url = product.get("image_url")
    if not image_url:
        errors.append("Image is required")
    elif not is_valid_url(image_url):
        errors.append("Invalid image URL")

    if not _text(product.get("restaurant_id")):
        errors.append("Restaurant id is required")

    return ValidationReport(valid=not errors, errors=errors)

"""
Postal Code Service Abstract Base Class

Defines the interface contract for postal-code (CEP) lookups. The restaurant
registration flow uses a lookup to pre-fill the address; a failed lookup
never blocks registration.

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from cardapio.core.utils import only_digits

POSTAL_CODE_DIGITS = 8


@dataclass
class PostalAddress:
    """
    Standardized result from a postal code lookup.

    Attributes:
        found: Whether the postal code resolved to an address
        postal_code: The 8 digits that were looked up
        street: Street name (may be empty for city-wide codes)
        neighborhood: Neighborhood name
        city: City name
        state: Two-letter state code
        error_message: Error description if the lookup failed
        error_code: Machine-readable error code
        response_time_ms: Lookup time
    """
    found: bool
    postal_code: Optional[str] = None
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    response_time_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "found": self.found,
            "postal_code": self.postal_code,
            "street": self.street,
            "neighborhood": self.neighborhood,
            "city": self.city,
            "state": self.state,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "response_time_ms": self.response_time_ms,
        }


def clean_postal_code(postal_code: str) -> Optional[str]:
    """
    Strip the mask from a CEP.

    Returns:
        The 8 digits, or None if the input does not hold exactly 8 digits
    """
    digits = only_digits(postal_code)
    return digits if len(digits) == POSTAL_CODE_DIGITS else None


def invalid_postal_code(postal_code: str) -> PostalAddress:
    return PostalAddress(
        found=False,
        postal_code=postal_code,
        error_message="Postal code must have 8 digits",
        error_code="invalid_postal_code",
    )


class BasePostalCodeService(ABC):
    """
    Abstract base class for postal code lookups.

    Example:
        >>> service = get_postal_code_service()
        >>> address = await service.lookup("01310-100")
        >>> if address.found:
        ...     print(address.street, address.city)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the lookup provider.

        Returns:
            str: Provider name (e.g., "mock", "viacep")
        """
        pass

    @abstractmethod
    async def lookup(self, postal_code: str) -> PostalAddress:
        """
        Resolve a postal code into address fields.

        Never raises; failures are reported through error_code.

        Args:
            postal_code: CEP with or without mask ("01310-100" or "01310100")

        Returns:
            PostalAddress: Address fields or the failure reason
        """
        pass

    async def health_check(self) -> bool:
        """
        Verify the lookup provider answers.

        Returns:
            bool: True if service is operational
        """
        return True

    async def close(self) -> None:
        """Release HTTP clients held by the service."""

"""
Postal Code Service Factory

Provides a single entry point for obtaining a postal code lookup.
Automatically selects Mock or ViaCEP based on ENV_MODE configuration.

Usage:
    from cardapio.services.postal import get_postal_code_service

    postal = get_postal_code_service()
    address = await postal.lookup("01310-100")

Version: 1.0.0
"""

import logging
from functools import lru_cache

from cardapio.core.config import get_settings
from cardapio.services.postal.base import BasePostalCodeService, PostalAddress
from cardapio.services.postal.mock import MockPostalCodeService
from cardapio.services.postal.viacep import ViaCepPostalCodeService

logger = logging.getLogger(__name__)


@lru_cache()
def get_postal_code_service() -> BasePostalCodeService:
    """
    Get the configured postal code service instance.

    Returns:
        BasePostalCodeService: Mock in development, ViaCEP otherwise
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Postal Service: Using MockPostalCodeService (development mode)")
        return MockPostalCodeService(
            failure_rate=0.05,
            min_latency=0.05,
            max_latency=0.2,
        )

    logger.info(
        f"Postal Service: Using ViaCepPostalCodeService "
        f"({settings.env_mode.value} mode)"
    )
    return ViaCepPostalCodeService()


def reset_postal_code_service() -> None:
    """
    Clear the cached postal code service instance.

    Useful for testing or when configuration changes at runtime.
    """
    get_postal_code_service.cache_clear()
    logger.debug("Postal code service cache cleared")


__all__ = [
    "get_postal_code_service",
    "reset_postal_code_service",
    "BasePostalCodeService",
    "PostalAddress",
    "MockPostalCodeService",
    "ViaCepPostalCodeService",
]

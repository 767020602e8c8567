"""
Mock Postal Code Service Implementation

Answers lookups from a small built-in table without network access.
Used in development mode (ENV_MODE=development) and by the tests.

Behavior:
    - Known CEPs resolve to fixed addresses
    - Any other well-formed CEP is reported as not found
    - Optional simulated latency and random failure rate

Version: 1.0.0
"""

import asyncio
import logging
import random
from datetime import datetime
from typing import Optional

from cardapio.services.postal.base import (
    BasePostalCodeService,
    PostalAddress,
    clean_postal_code,
    invalid_postal_code,
)

logger = logging.getLogger(__name__)

# digits -> (street, neighborhood, city, state)
KNOWN_ADDRESSES: dict[str, tuple[str, str, str, str]] = {
    "01310100": ("Avenida Paulista", "Bela Vista", "São Paulo", "SP"),
    "20040020": ("Rua da Assembleia", "Centro", "Rio de Janeiro", "RJ"),
    "30130010": ("Praça Sete de Setembro", "Centro", "Belo Horizonte", "MG"),
    "40020000": ("Praça da Sé", "Sé", "Salvador", "BA"),
    "70040010": ("Esplanada dos Ministérios", "Zona Cívico-Administrativa", "Brasília", "DF"),
    "80010000": ("Praça Tiradentes", "Centro", "Curitiba", "PR"),
    "90010150": ("Rua dos Andradas", "Centro Histórico", "Porto Alegre", "RS"),
}


class MockPostalCodeService(BasePostalCodeService):
    """
    Mock implementation of the postal code lookup.

    Attributes:
        failure_rate: Probability of simulated provider failure (0.0-1.0)
        min_latency: Minimum response time in seconds
        max_latency: Maximum response time in seconds
        addresses: Lookup table (digits -> street, neighborhood, city, state)
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
        addresses: Optional[dict[str, tuple[str, str, str, str]]] = None,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.addresses = dict(KNOWN_ADDRESSES if addresses is None else addresses)

        logger.info(
            f"MockPostalCodeService initialized "
            f"(failure_rate={failure_rate:.0%}, known={len(self.addresses)} CEPs)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> float:
        latency = random.uniform(self.min_latency, self.max_latency)
        await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def lookup(self, postal_code: str) -> PostalAddress:
        digits = clean_postal_code(postal_code)
        if digits is None:
            return invalid_postal_code(postal_code)

        start_time = datetime.now()
        await self._simulate_latency()
        elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

        if self._should_fail():
            logger.debug("Mock: Simulated lookup failure")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="Postal code service temporarily unavailable",
                error_code="service_unavailable",
                response_time_ms=elapsed_ms,
            )

        entry = self.addresses.get(digits)
        if entry is None:
            logger.debug(f"Mock: CEP {digits} not found")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="Postal code not found",
                error_code="not_found",
                response_time_ms=elapsed_ms,
            )

        street, neighborhood, city, state = entry
        logger.info(f"Mock: CEP {digits} resolved to {city}/{state}")
        return PostalAddress(
            found=True,
            postal_code=digits,
            street=street,
            neighborhood=neighborhood,
            city=city,
            state=state,
            response_time_ms=elapsed_ms,
        )

"""
ViaCEP Postal Code Service Implementation

Production lookup against the public ViaCEP API.
Used when ENV_MODE=production or ENV_MODE=staging.

API:
    GET {VIACEP_BASE_URL}/{cep}/json/
    Unknown CEPs answer 200 with {"erro": true}.

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from cardapio.core.config import get_settings
from cardapio.services.postal.base import (
    BasePostalCodeService,
    PostalAddress,
    clean_postal_code,
    invalid_postal_code,
)

logger = logging.getLogger(__name__)


class ViaCepPostalCodeService(BasePostalCodeService):
    """
    ViaCEP postal code lookup over httpx.

    Example:
        >>> service = ViaCepPostalCodeService()
        >>> address = await service.lookup("01310-100")
        >>> address.city
        'São Paulo'
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root (defaults to VIACEP_BASE_URL)
            timeout: Request timeout in seconds (defaults to POSTAL_LOOKUP_TIMEOUT)
            transport: Custom httpx transport, used by tests
        """
        settings = get_settings()
        self.base_url = (base_url or settings.viacep_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.postal_lookup_timeout
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

        logger.info(f"ViaCepPostalCodeService initialized ({self.base_url})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "viacep"

    async def close(self) -> None:
        await self._client.aclose()

    async def lookup(self, postal_code: str) -> PostalAddress:
        digits = clean_postal_code(postal_code)
        if digits is None:
            return invalid_postal_code(postal_code)

        start_time = datetime.now()
        url = f"{self.base_url}/{digits}/json/"
        logger.debug(f"ViaCEP: Looking up {digits}")

        try:
            response = await self._client.get(url)
            response.raise_for_status()
            data = response.json()
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

            if not isinstance(data, dict) or data.get("erro"):
                logger.info(f"ViaCEP: CEP {digits} not found")
                return PostalAddress(
                    found=False,
                    postal_code=digits,
                    error_message="Postal code not found",
                    error_code="not_found",
                    response_time_ms=elapsed_ms,
                )

            logger.info(f"ViaCEP: CEP {digits} resolved to {data.get('localidade')}/{data.get('uf')}")
            return PostalAddress(
                found=True,
                postal_code=digits,
                street=data.get("logradouro") or "",
                neighborhood=data.get("bairro") or "",
                city=data.get("localidade") or "",
                state=data.get("uf") or "",
                response_time_ms=elapsed_ms,
            )

        except httpx.TimeoutException:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error("ViaCEP: API timeout")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="Postal code lookup timed out. Please try again.",
                error_code="timeout",
                response_time_ms=elapsed_ms,
            )

        except httpx.HTTPStatusError as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"ViaCEP: HTTP {e.response.status_code} for {digits}")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="Postal code service error",
                error_code="http_error",
                response_time_ms=elapsed_ms,
            )

        except httpx.TransportError as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.error(f"ViaCEP: Transport error - {e}")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="Unable to reach postal code service",
                error_code="transport_error",
                response_time_ms=elapsed_ms,
            )

        except Exception as e:
            elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000
            logger.exception(f"ViaCEP: Unexpected error - {e}")
            return PostalAddress(
                found=False,
                postal_code=digits,
                error_message="An unexpected error occurred",
                error_code="unknown_error",
                response_time_ms=elapsed_ms,
            )

    async def health_check(self) -> bool:
        """Look up a well-known CEP to verify connectivity."""
        address = await self.lookup("01310100")
        if address.error_code in (None, "not_found"):
            logger.debug("ViaCEP: Health check passed")
            return True
        logger.error(f"ViaCEP: Health check failed - {address.error_code}")
        return False

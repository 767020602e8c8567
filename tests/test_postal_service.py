from __future__ import annotations

import httpx
import pytest

from cardapio.services.postal import (
    MockPostalCodeService,
    ViaCepPostalCodeService,
    get_postal_code_service,
)
from cardapio.services.postal.base import clean_postal_code

VIACEP_PAULISTA = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "complemento": "de 612 a 1510 - lado par",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


def viacep(handler) -> ViaCepPostalCodeService:
    return ViaCepPostalCodeService(
        base_url="https://viacep.test/ws/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.parametrize("raw, expected", [
    ("01310-100", "01310100"),
    (" 01310100 ", "01310100"),
    ("01.310-100", "01310100"),
    ("1310100", None),
    ("", None),
])
def test_clean_postal_code(raw, expected):
    assert clean_postal_code(raw) == expected


async def test_viacep_found():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=VIACEP_PAULISTA)

    service = viacep(handler)
    address = await service.lookup("01310-100")
    await service.close()

    assert requested == ["https://viacep.test/ws/01310100/json/"]
    assert address.found
    assert (address.street, address.neighborhood, address.city, address.state) == (
        "Avenida Paulista", "Bela Vista", "São Paulo", "SP",
    )
    assert address.error_code is None


async def test_viacep_unknown_cep():
    service = viacep(lambda request: httpx.Response(200, json={"erro": True}))
    address = await service.lookup("99999999")

    assert not address.found
    assert address.error_code == "not_found"
    assert address.error_message == "Postal code not found"


async def test_viacep_http_error():
    service = viacep(lambda request: httpx.Response(500, text="boom"))
    address = await service.lookup("01310100")

    assert not address.found
    assert address.error_code == "http_error"


async def test_viacep_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    address = await viacep(handler).lookup("01310100")
    assert address.error_code == "timeout"


async def test_viacep_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route", request=request)

    address = await viacep(handler).lookup("01310100")
    assert address.error_code == "transport_error"


async def test_viacep_rejects_malformed_cep_without_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    address = await viacep(handler).lookup("123")

    assert not address.found
    assert address.error_code == "invalid_postal_code"


async def test_viacep_health_check():
    healthy = viacep(lambda request: httpx.Response(200, json=VIACEP_PAULISTA))
    broken = viacep(lambda request: httpx.Response(503))

    assert await healthy.health_check() is True
    assert await broken.health_check() is False


async def test_mock_known_and_unknown():
    service = MockPostalCodeService()

    found = await service.lookup("01310-100")
    missing = await service.lookup("00000-000")

    assert found.found and found.city == "São Paulo"
    assert missing.error_code == "not_found"
    assert found.to_dict()["postal_code"] == "01310100"


async def test_mock_custom_table():
    service = MockPostalCodeService(addresses={"12345678": ("Rua A", "Centro", "Cidade", "MG")})

    assert (await service.lookup("12345-678")).state == "MG"
    assert (await service.lookup("01310-100")).found is False


async def test_mock_simulated_failure():
    address = await MockPostalCodeService(failure_rate=1.0).lookup("01310-100")

    assert not address.found
    assert address.error_code == "service_unavailable"


def test_factory_uses_mock_in_development(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "development")

    service = get_postal_code_service()

    assert service.provider_name == "mock"
    assert get_postal_code_service() is service


def test_factory_uses_viacep_in_production(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "production")
    monkeypatch.setenv("VIACEP_BASE_URL", "https://viacep.test/ws")

    service = get_postal_code_service()

    assert service.provider_name == "viacep"
    assert service.base_url == "https://viacep.test/ws"

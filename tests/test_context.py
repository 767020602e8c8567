from __future__ import annotations

from cardapio import context
from cardapio.context import open_context
from cardapio.services.postal import MockPostalCodeService, get_postal_code_service


class ClosingPostalService(MockPostalCodeService):
    def __init__(self):
        super().__init__()
        self.closed = False

    async def close(self) -> None:
        self.closed = True


async def test_factory_postal_service_closed_on_exit(settings, backend, monkeypatch):
    service = ClosingPostalService()
    monkeypatch.setattr(context, "get_postal_code_service", lambda: service)

    async with open_context(settings=settings, backend=backend) as ctx:
        assert ctx.postal is service
        assert not service.closed

    assert service.closed


async def test_factory_cache_cleared_on_exit(settings, backend, monkeypatch):
    monkeypatch.setenv("ENV_MODE", "development")
    get_postal_code_service()

    async with open_context(settings=settings, backend=backend):
        assert get_postal_code_service.cache_info().currsize == 1

    assert get_postal_code_service.cache_info().currsize == 0


async def test_caller_postal_service_left_open(settings, backend):
    service = ClosingPostalService()

    async with open_context(settings=settings, backend=backend, postal_service=service):
        pass

    assert not service.closed

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cardapio.core.exceptions import SessionNotFoundError
from cardapio.schemas import User, UserRole
from cardapio.services.sessions import CURRENT_SESSION_KEY, SessionStore
from cardapio.services.storage import KeyValueStore, MemoryKeyValueBackend

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock():
    return FakeClock(NOW)


@pytest.fixture()
def kv():
    return KeyValueStore(MemoryKeyValueBackend(), "@cardapio:sessao")


@pytest.fixture()
def sessions(kv, clock):
    return SessionStore(kv, clock=clock)


def make_user(role: UserRole = UserRole.CLIENT, **overrides) -> User:
    data = {
        "id": "u1",
        "name": "Ana",
        "email": "ana@example.com",
        "password": "abc123",
        "role": role,
        "created_at": NOW - timedelta(days=30),
    }
    data.update(overrides)
    return User(**data)


async def test_save_and_get_session(sessions, kv):
    user = make_user()
    await sessions.save_session(user)

    assert await sessions.get_session() == user
    assert await sessions.has_active_session()

    raw = await kv.get(CURRENT_SESSION_KEY)
    assert raw["ativo"] is True
    assert raw["usuario"]["email"] == "ana@example.com"
    assert "dataLogin" in raw


async def test_session_key_is_fixed(sessions, kv):
    await sessions.save_session(make_user())
    assert await kv.list_keys() == ["current"]


async def test_expired_session_is_purged(sessions, kv):
    await kv.save(CURRENT_SESSION_KEY, {
        "usuario": make_user().to_record(),
        "dataLogin": (NOW - timedelta(hours=25)).isoformat(),
        "ativo": True,
    })

    assert await sessions.get_session() is None
    assert await kv.get(CURRENT_SESSION_KEY) is None


async def test_session_just_inside_ttl_is_kept(sessions, clock):
    await sessions.save_session(make_user())
    clock.now = NOW + timedelta(hours=23, minutes=59)
    assert await sessions.get_session() is not None


async def test_naive_login_time_is_treated_as_utc(sessions, kv):
    await kv.save(CURRENT_SESSION_KEY, {
        "usuario": make_user().to_record(),
        "dataLogin": (NOW - timedelta(hours=1)).replace(tzinfo=None).isoformat(),
        "ativo": True,
    })
    assert await sessions.get_session() is not None


async def test_inactive_session_is_absent(sessions, kv):
    await kv.save(CURRENT_SESSION_KEY, {
        "usuario": make_user().to_record(),
        "dataLogin": NOW.isoformat(),
        "ativo": False,
    })
    assert await sessions.get_session() is None
    assert await sessions.has_active_session() is False


async def test_unreadable_session_is_absent(sessions, kv):
    await kv.save(CURRENT_SESSION_KEY, {"usuario": "nobody"})
    assert await sessions.get_session() is None


async def test_clear_session(sessions):
    await sessions.save_session(make_user())
    await sessions.clear_session()
    assert await sessions.get_session() is None


async def test_is_admin(sessions):
    assert await sessions.is_admin() is False

    await sessions.save_session(make_user())
    assert await sessions.is_admin() is False

    await sessions.save_session(make_user(role=UserRole.ADMIN))
    assert await sessions.is_admin() is True


async def test_update_session_user_keeps_login_time(sessions, kv, clock):
    await sessions.save_session(make_user())
    clock.now = NOW + timedelta(hours=2)

    await sessions.update_session_user(make_user(name="Ana Paula"))

    assert (await sessions.get_session()).name == "Ana Paula"
    info = await sessions.get_session_info()
    assert info.login_at == NOW


async def test_update_session_user_without_session(sessions):
    with pytest.raises(SessionNotFoundError):
        await sessions.update_session_user(make_user())


async def test_renew_session_restarts_the_clock(sessions, clock):
    await sessions.save_session(make_user())

    clock.now = NOW + timedelta(hours=20)
    await sessions.renew_session()

    clock.now = NOW + timedelta(hours=30)
    assert await sessions.get_session() is not None


async def test_renew_session_without_session(sessions):
    with pytest.raises(SessionNotFoundError, match="No active session"):
        await sessions.renew_session()


async def test_session_info(sessions, clock):
    empty = await sessions.get_session_info()
    assert empty.user is None and empty.login_at is None and empty.minutes_logged_in is None

    await sessions.save_session(make_user())
    clock.now = NOW + timedelta(minutes=90, seconds=30)

    info = await sessions.get_session_info()
    assert info.user.id == "u1"
    assert info.login_at == NOW
    assert info.minutes_logged_in == 90


async def test_configurable_ttl(kv, clock):
    sessions = SessionStore(kv, ttl=timedelta(hours=1), clock=clock)
    await sessions.save_session(make_user())

    clock.now = NOW + timedelta(hours=2)
    assert await sessions.get_session() is None

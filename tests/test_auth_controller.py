from __future__ import annotations

import json
import logging

from cardapio.controllers import INTERNAL_ERROR
from cardapio.schemas import UserRole

from conftest import ADMIN_EMAIL, CLIENT_EMAIL, PASSWORD


async def test_register_trims_lowercases_and_signs_in(ctx):
    result = await ctx.auth.register("  Ana  ", "Ana@Example.COM", PASSWORD, PASSWORD)

    assert result.success
    assert result.user.name == "Ana"
    assert result.user.email == "ana@example.com"
    assert result.user.role == UserRole.CLIENT

    status = await ctx.auth.check_session()
    assert status.logged_in
    assert status.user.id == result.user.id


async def test_register_password_confirmation(ctx):
    result = await ctx.auth.register("Ana", "ana@example.com", PASSWORD, "other123")

    assert not result.success
    assert result.error == "Passwords do not match"
    assert await ctx.users.list() == []


async def test_register_reports_every_validation_error(ctx):
    result = await ctx.auth.register("A", "bad-email", "123", "123")

    assert not result.success
    assert result.error == (
        "Name must be at least 2 characters long, "
        "Invalid email, "
        "Password must be at least 6 characters long"
    )


async def test_register_duplicate_email_any_case(ctx, client_user):
    result = await ctx.auth.register("Outro", CLIENT_EMAIL.upper(), PASSWORD, PASSWORD)

    assert not result.success
    assert "already registered" in result.error
    assert len(await ctx.users.list()) == 1


async def test_login(ctx, client_user):
    await ctx.auth.logout()

    result = await ctx.auth.login(CLIENT_EMAIL, PASSWORD)

    assert result.success
    assert result.user.id == client_user.id
    assert (await ctx.auth.get_current_user()).id == client_user.id


async def test_login_failures(ctx, client_user):
    await ctx.auth.logout()

    assert (await ctx.auth.login("", PASSWORD)).error == "Email and password are required"
    assert (await ctx.auth.login(CLIENT_EMAIL, "")).error == "Email and password are required"
    assert (await ctx.auth.login("nope", PASSWORD)).error == "Invalid email"
    assert (await ctx.auth.login(CLIENT_EMAIL, "wrong99")).error == "Incorrect email or password"
    assert (await ctx.auth.check_session()).logged_in is False


async def test_logout_clears_session(ctx, admin):
    assert await ctx.auth.is_admin()

    result = await ctx.auth.logout()

    assert result.success
    assert await ctx.auth.get_current_user() is None
    assert not await ctx.auth.is_admin()


async def test_update_profile_refreshes_session(ctx, client_user):
    result = await ctx.auth.update_profile({"name": "Cliente Novo", "email": "NOVO@example.com"})

    assert result.success
    assert result.user.email == "novo@example.com"
    current = await ctx.auth.get_current_user()
    assert current.name == "Cliente Novo"
    assert current.created_at == client_user.created_at


async def test_update_profile_requires_login(ctx):
    result = await ctx.auth.update_profile({"name": "X"})
    assert result.error == "User is not logged in"


async def test_update_profile_validates_merged_user(ctx, client_user):
    result = await ctx.auth.update_profile({"password": "short"})

    assert not result.success
    assert "at least 6 characters" in result.error
    assert (await ctx.users.find_by_id(client_user.id)).password == PASSWORD


async def test_update_profile_cannot_change_role(ctx, client_user):
    result = await ctx.auth.update_profile({"tipo": "admin", "name": "Cliente"})

    assert result.success
    assert result.user.role == UserRole.CLIENT
    assert not await ctx.auth.is_admin()


async def test_update_profile_email_taken(ctx, admin):
    await ctx.auth.register("Cliente", CLIENT_EMAIL, PASSWORD, PASSWORD)

    result = await ctx.auth.update_profile({"email": ADMIN_EMAIL})

    assert not result.success
    assert result.error == "Email already in use by another user"


async def test_recover_password_does_not_leak_accounts(ctx, client_user, caplog):
    with caplog.at_level(logging.INFO, logger="cardapio.controllers.auth"):
        known = await ctx.auth.recover_password(CLIENT_EMAIL)
        unknown = await ctx.auth.recover_password("ghost@example.com")

    assert known.success and unknown.success
    assert known.to_dict() == unknown.to_dict()
    assert "Password recovery requested" in caplog.text
    assert (await ctx.auth.recover_password("bad")).error == "Invalid email"


async def test_renew_session(ctx, client_user):
    assert (await ctx.auth.renew_session()).success

    await ctx.auth.logout()
    result = await ctx.auth.renew_session()
    assert not result.success
    assert result.error == "No active session found"


async def test_unexpected_failure_becomes_internal_error(ctx, client_user, monkeypatch):
    await ctx.auth.logout()

    async def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(ctx.users, "validate_credentials", explode)

    result = await ctx.auth.login(CLIENT_EMAIL, PASSWORD)
    assert result.success is False
    assert result.error == INTERNAL_ERROR


async def test_result_dict_hides_password(ctx, client_user):
    result = await ctx.auth.login(CLIENT_EMAIL, PASSWORD)
    data = result.to_dict()
    assert data["user"]["email"] == CLIENT_EMAIL
    assert "password" not in data["user"]


async def test_register_alongside_account_with_naive_creation_time(ctx):
    await ctx.backend.set_item("@cardapio:usuarios:legacy", json.dumps({
        "id": "legacy",
        "nome": "Maria",
        "email": "maria@example.com",
        "senha": PASSWORD,
        "tipo": "cliente",
        "dataCriacao": "2023-05-01T12:00:00",
    }))

    registered = await ctx.auth.register("Ana", "ana@example.com", PASSWORD, PASSWORD)
    await ctx.auth.logout()
    legacy_login = await ctx.auth.login("maria@example.com", PASSWORD)

    assert registered.success, registered.error
    assert legacy_login.success
    assert [u.id for u in await ctx.users.list()] == [registered.user.id, "legacy"]

"""
User Storage Service

Accounts under "@cardapio:usuarios". Emails are unique regardless of case;
the uniqueness check runs here too, so a caller that skips the controller
still cannot create a duplicate.

Passwords are compared in plaintext.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from cardapio.core.exceptions import EmailAlreadyRegisteredError
from cardapio.schemas import User, UserRole, normalize_fields
from cardapio.services.storage.collection import Collection
from cardapio.services.storage.kv_store import KeyValueStore
from cardapio.validators import is_valid_email

logger = logging.getLogger(__name__)


class UserService:
    """
    CRUD and lookups for user accounts.

    Example:
        >>> users = UserService(KeyValueStore(backend, "@cardapio:usuarios"))
        >>> user = await users.save({"name": "Ana", "email": "ana@x.com", ...})
        >>> await users.find_by_email("ANA@X.COM") == user
        True
    """

    def __init__(self, store: KeyValueStore, **collection_options: Any):
        self.records: Collection[User] = Collection(store, User, "User", **collection_options)

    async def save(self, payload: Mapping[str, Any]) -> User:
        """
        Create an account.

        Raises:
            EmailAlreadyRegisteredError: Another account uses this email
        """
        email = normalize_fields(User, payload).get("email", "")
        if await self.find_by_email(email):
            raise EmailAlreadyRegisteredError("Email already registered")
        user = await self.records.save(payload)
        logger.info(f"User {user.id} created ({user.role.value})")
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self.records.find_by_id(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").lower()
        for user in await self.records.list():
            if user.email.lower() == wanted:
                return user
        return None

    async def list(self) -> list[User]:
        return await self.records.list()

    async def list_by_role(self, role: UserRole) -> list[User]:
        return [user for user in await self.records.list() if user.role == role]

    async def update(self, user_id: str, changes: Mapping[str, Any]) -> User:
        """
        Update an account.

        Raises:
            NotFoundError: No user with this id
            EmailAlreadyRegisteredError: New email belongs to another account
        """
        email = normalize_fields(User, changes).get("email")
        if email:
            owner = await self.find_by_email(email)
            if owner is not None and owner.id != user_id:
                raise EmailAlreadyRegisteredError("Email already in use by another user")
        return await self.records.update(user_id, changes)

    async def remove(self, user_id: str) -> bool:
        return await self.records.remove(user_id)

    async def email_exists(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def validate_credentials(self, email: str, password: str) -> Optional[User]:
        """
        Match an email/password pair against stored accounts.

        Returns:
            The user on a match; None for a malformed email, an unknown
            email or a wrong password
        """
        if not is_valid_email(email):
            logger.debug("Credential check with malformed email")
            return None
        user = await self.find_by_email(email)
        if user is None or user.password != password:
            return None
        return user

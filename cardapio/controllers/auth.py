"""
Authentication Controller

Login, registration, logout and profile management for the single device
session. Every method returns an envelope; nothing raises to the caller.
"""

import logging
from typing import Any, Mapping, Optional

from cardapio.controllers.results import (
    INTERNAL_ERROR,
    AuthResult,
    OperationResult,
    SessionStatus,
)
from cardapio.core.exceptions import DomainError
from cardapio.schemas import User, UserRole, normalize_fields
from cardapio.services.sessions import SessionStore
from cardapio.services.users import UserService
from cardapio.validators import is_valid_email, validate_user

logger = logging.getLogger(__name__)

# Fields a user may not change on their own profile
PROTECTED_PROFILE_FIELDS = ("role",)


class AuthController:
    """
    Account and session flows.

    Attributes:
        users: Account storage
        sessions: Device session shared with the other controllers
    """

    def __init__(self, users: UserService, sessions: SessionStore):
        self.users = users
        self.sessions = sessions

    async def login(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return AuthResult(success=False, error="Email and password are required")

        if not is_valid_email(email):
            return AuthResult(success=False, error="Invalid email")

        try:
            user = await self.users.validate_credentials(email, password)
            if user is None:
                logger.info("Login rejected: wrong credentials")
                return AuthResult(success=False, error="Incorrect email or password")

            await self.sessions.save_session(user)
            return AuthResult(success=True, user=user)

        except Exception as e:
            logger.exception(f"Error during login: {e}")
            return AuthResult(success=False, error=INTERNAL_ERROR)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        role: UserRole = UserRole.CLIENT,
    ) -> AuthResult:
        """
        Create an account and sign it in.

        The name is trimmed and the email lower-cased before saving.
        """
        if password != confirm_password:
            return AuthResult(success=False, error="Passwords do not match")

        report = validate_user({
            "name": name,
            "email": email,
            "password": password,
            "role": role,
        })
        if not report.valid:
            return AuthResult(success=False, error=report.message)

        try:
            if await self.users.email_exists(email):
                return AuthResult(success=False, error="Email already registered")

            user = await self.users.save({
                "name": name.strip(),
                "email": email.lower().strip(),
                "password": password,
                "role": UserRole(role),
            })

            await self.sessions.save_session(user)
            return AuthResult(success=True, user=user)

        except DomainError as e:
            return AuthResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error during registration: {e}")
            return AuthResult(success=False, error=INTERNAL_ERROR)

    async def logout(self) -> OperationResult:
        try:
            await self.sessions.clear_session()
            return OperationResult(success=True)
        except Exception as e:
            logger.exception(f"Error during logout: {e}")
            return OperationResult(success=False, error="Failed to log out")

    async def check_session(self) -> SessionStatus:
        user = await self.get_current_user()
        return SessionStatus(logged_in=user is not None, user=user)

    async def get_current_user(self) -> Optional[User]:
        try:
            return await self.sessions.get_session()
        except Exception as e:
            logger.exception(f"Error reading current user: {e}")
            return None

    async def is_admin(self) -> bool:
        try:
            return await self.sessions.is_admin()
        except Exception as e:
            logger.exception(f"Error checking admin permission: {e}")
            return False

    async def update_profile(self, changes: Mapping[str, Any]) -> AuthResult:
        """
        Update the signed-in user's account and refresh the session copy.

        The merged account must still pass user validation. The role cannot
        be changed through the profile.
        """
        try:
            current = await self.sessions.get_session()
            if current is None:
                return AuthResult(success=False, error="User is not logged in")

            existing = await self.users.find_by_id(current.id)
            if existing is None:
                return AuthResult(success=False, error="User not found")

            normalized = normalize_fields(User, changes)
            for name in PROTECTED_PROFILE_FIELDS:
                if normalized.pop(name, None) is not None:
                    logger.warning(f"Ignoring {name} change on profile of user {current.id}")
            if isinstance(normalized.get("email"), str):
                normalized["email"] = normalized["email"].lower().strip()

            report = validate_user({**existing.model_dump(), **normalized})
            if not report.valid:
                return AuthResult(success=False, error=report.message)

            updated = await self.users.update(current.id, normalized)
            await self.sessions.update_session_user(updated)
            return AuthResult(success=True, user=updated)

        except DomainError as e:
            return AuthResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error updating profile: {e}")
            return AuthResult(success=False, error=INTERNAL_ERROR)

    async def recover_password(self, email: str) -> OperationResult:
        """
        Pretend to send a password reset message.

        Succeeds whether or not the email has an account, so the answer
        does not reveal which emails are registered.
        """
        if not is_valid_email(email):
            return OperationResult(success=False, error="Invalid email")

        try:
            user = await self.users.find_by_email(email)
            if user is not None:
                logger.info(f"Password recovery requested for {email}")
            return OperationResult(success=True)
        except Exception as e:
            logger.exception(f"Error during password recovery: {e}")
            return OperationResult(success=False, error=INTERNAL_ERROR)

    async def renew_session(self) -> OperationResult:
        try:
            await self.sessions.renew_session()
            return OperationResult(success=True)
        except DomainError as e:
            return OperationResult(success=False, error=e.message)
        except Exception as e:
            logger.exception(f"Error renewing session: {e}")
            return OperationResult(success=False, error=INTERNAL_ERROR)

"""
Authenticate Use Case

Password login with optional remember-me token, and automatic login from a
remember-me token.
"""

from typing import Optional
from uuid import UUID

import bcrypt

from src.app.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions import SessionLifecycleManager
from src.api.utils.jwt import generate_jwt
from src.api.utils.remember_me import decode_remember_me_token, encode_remember_me_token
from .dtos import AuthenticateCommand, AuthenticateResponse

# Checked against unknown logins so both paths cost one bcrypt round
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(12))


class AuthenticateUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Logins are matched lowercase
    - Constant-time password comparison to prevent timing attacks
    - User must be activated
    - remember_me issues a persistent token through SessionLifecycleManager
    - A remember-me login rotates the persistent token
    - A remember-me token of a deactivated user is deleted on use
    """

    def __init__(self, uow: UnitOfWork, sessions: SessionLifecycleManager):
        self.uow = uow
        self.sessions = sessions

    async def authenticate(self, command: AuthenticateCommand) -> Result[AuthenticateResponse]:
        """
        Execute password login.

        Args:
            command: Credentials, remember-me flag and client audit data

        Returns:
            Result with AuthenticateResponse, or Error
        """
        login = command.login.lower()

        async with self.uow:
            user = await self.uow.users.get_by_login(login)

            if user is None:
                bcrypt.checkpw(b"dummy_password", _DUMMY_HASH)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid login or password")
                )

            password_valid = bcrypt.checkpw(
                command.password.encode(), user.password_hash.encode()
            )
            if not password_valid:
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid login or password")
                )

            if not user.activated:
                return Return.err(
                    Error("USER_NOT_ACTIVATED", f"User {login} was not activated")
                )

            user_id = user.id

        access_token = generate_jwt(user_id, login)
        remember_me_token: Optional[str] = None

        if command.remember_me:
            issued = await self.sessions.issue_token(
                login, command.ip_address, command.user_agent
            )
            if issued.is_err():
                return issued
            remember_me_token = encode_remember_me_token(
                issued.value.series, issued.value.token_value
            )

        return Return.ok(
            AuthenticateResponse(
                access_token=access_token,
                remember_me_token=remember_me_token,
            )
        )

    async def auto_login(
        self,
        remember_me_token: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[AuthenticateResponse]:
        """
        Execute remember-me login.

        Args:
            remember_me_token: Encoded credential held by the client
            ip_address: Client address
            user_agent: Client descriptor

        Returns:
            Result with a new access token and the rotated credential, or Error
        """
        decoded = decode_remember_me_token(remember_me_token)
        if decoded is None:
            return Return.err(
                Error("INVALID_REMEMBER_ME_TOKEN", "Malformed remember-me token")
            )
        series, token_value = decoded

        rotated = await self.sessions.validate_token(
            series, token_value, ip_address, user_agent
        )
        if rotated.is_err():
            return rotated

        async with self.uow:
            user = await self.uow.users.get_by_id(UUID(rotated.value.user_id))
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User could not be found"))
            if not user.activated:
                # Deactivated users keep no remember-me token
                await self.uow.persistent_tokens.delete_by_series(rotated.value.series)
                await self.uow.commit()
                return Return.err(
                    Error("USER_NOT_ACTIVATED", f"User {user.login} was not activated")
                )
            user_id = user.id
            login = user.login

        return Return.ok(
            AuthenticateResponse(
                access_token=generate_jwt(user_id, login),
                remember_me_token=encode_remember_me_token(
                    rotated.value.series, rotated.value.token_value
                ),
            )
        )

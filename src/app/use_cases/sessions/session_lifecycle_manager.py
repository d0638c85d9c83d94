"""
Session Lifecycle Manager

Business rules for remember-me (persistent login) tokens: issuance,
validation with rotation, listing, revocation and the expiry sweep.
"""

import logging
import secrets
from datetime import date, timedelta
from typing import List, Optional

from src.app.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import UserDirectory
from src.domain.entities import PersistentToken, User
from src.domain.entities.persistent_token import USER_AGENT_MAX_LENGTH
from .dtos import IssuedToken, SessionInfo

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 31

# token_urlsafe(15) yields 20 URL-safe characters
_RANDOM_BYTES = 15


def generate_series_data() -> str:
    return secrets.token_urlsafe(_RANDOM_BYTES)


def generate_token_data() -> str:
    return secrets.token_urlsafe(_RANDOM_BYTES)


def _truncate_user_agent(user_agent: Optional[str]) -> Optional[str]:
    if user_agent is not None and len(user_agent) >= USER_AGENT_MAX_LENGTH:
        return user_agent[: USER_AGENT_MAX_LENGTH - 1]
    return user_agent


class SessionLifecycleManager:
    """
    Manages the lifecycle of remember-me tokens.

    Business Rules:
    - One token per series; series is never reused
    - Users only see and revoke their own tokens
    - Revoking a foreign or unknown series is a silent success, so callers
      cannot probe which series exist
    - Tokens not refreshed within the retention window are expired
    - A token presented with the wrong value is deleted (possible theft)
    - Revocation only removes the stored token: a session already opened
      with it stays usable until the client drops it

    Errors:
        - USER_NOT_FOUND: caller identity could not be resolved
        - TOKEN_NOT_FOUND: no token with the presented series
        - TOKEN_MISMATCH: token value does not match the stored one
        - TOKEN_EXPIRED: token older than the retention window
    """

    def __init__(
        self,
        uow: UnitOfWork,
        directory: Optional[UserDirectory] = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
    ):
        self.uow = uow
        self.directory = directory
        self.retention_days = retention_days

    async def _resolve_owner(self, login: Optional[str]) -> Optional[User]:
        if self.directory is None:
            return None
        if login is None:
            login = self.directory.resolve_current_user()
        if not login:
            return None
        return await self.directory.find_by_login(login)

    def _user_not_found(self) -> Result:
        return Return.err(Error("USER_NOT_FOUND", "User could not be found"))

    async def list_sessions(self, login: Optional[str] = None) -> Result[List[SessionInfo]]:
        """
        List all remember-me sessions of a user.

        Args:
            login: User to list sessions for; defaults to the current user

        Returns:
            Result with the user's sessions (possibly empty), or
            USER_NOT_FOUND when the identity cannot be resolved
        """
        async with self.uow:
            user = await self._resolve_owner(login)
            if user is None:
                return self._user_not_found()

            tokens = await self.uow.persistent_tokens.get_by_user_id(user.id)
            return Return.ok(
                [
                    SessionInfo(
                        series=token.series,
                        token_date=token.token_date,
                        ip_address=token.ip_address,
                        user_agent=token.user_agent,
                    )
                    for token in tokens
                ]
            )

    async def revoke_session(self, series: str, login: Optional[str] = None) -> Result[None]:
        """
        Invalidate one of the user's sessions.

        Args:
            series: Already URL-decoded series of the session to revoke
            login: Owner of the session; defaults to the current user

        Returns:
            Empty Result whether or not the series belonged to the user,
            or USER_NOT_FOUND when the identity cannot be resolved
        """
        async with self.uow:
            user = await self._resolve_owner(login)
            if user is None:
                return self._user_not_found()

            tokens = await self.uow.persistent_tokens.get_by_user_id(user.id)
            if any(token.series == series for token in tokens):
                await self.uow.persistent_tokens.delete_by_series(series)
                await self.uow.commit()
                logger.info(f"Revoked persistent token for user {user.login}")

            return Return.ok(None)

    async def purge_expired_tokens(self, cutoff: Optional[date] = None) -> Result[int]:
        """
        Delete every token issued strictly before the cutoff date.

        Args:
            cutoff: Retention cutoff; defaults to today minus the retention window

        Returns:
            Result with the number of deleted tokens
        """
        if cutoff is None:
            cutoff = date.today() - timedelta(days=self.retention_days)

        async with self.uow:
            tokens = await self.uow.persistent_tokens.get_issued_before(cutoff)
            if not tokens:
                return Return.ok(0)

            deleted = await self.uow.persistent_tokens.delete_all(tokens)
            await self.uow.commit()

            logger.info(f"Purged {deleted} persistent token(s) issued before {cutoff.isoformat()}")
            return Return.ok(deleted)

    async def issue_token(
        self,
        login: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[IssuedToken]:
        """
        Create a new remember-me token for a freshly authenticated user.

        Returns:
            Result with the issued credential, or USER_NOT_FOUND
        """
        async with self.uow:
            user = await self._resolve_owner(login)
            if user is None:
                return self._user_not_found()

            token = PersistentToken(
                series=generate_series_data(),
                token_value=generate_token_data(),
                user_id=user.id,
                token_date=date.today(),
                ip_address=ip_address,
                user_agent=_truncate_user_agent(user_agent),
            )
            token = await self.uow.persistent_tokens.save(token)
            issued = IssuedToken(
                series=token.series,
                token_value=token.token_value,
                token_date=token.token_date,
                user_id=str(token.user_id),
            )

            await self.uow.commit()

            logger.debug(f"Issued persistent token for user {user.login}")
            return Return.ok(issued)

    async def validate_token(
        self,
        series: str,
        token_value: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[IssuedToken]:
        """
        Validate a presented remember-me credential and rotate its value.

        Args:
            series: Series from the client's credential
            token_value: Token value from the client's credential
            ip_address: Client address recorded on the rotated token
            user_agent: Client descriptor recorded on the rotated token

        Returns:
            Result with the rotated credential, or Error
        """
        async with self.uow:
            token = await self.uow.persistent_tokens.get_by_series(series)
            if token is None:
                return Return.err(
                    Error("TOKEN_NOT_FOUND", "No persistent token found for series")
                )

            if not secrets.compare_digest(token.token_value.encode(), token_value.encode()):
                # Someone replayed an old value for a live series
                await self.uow.persistent_tokens.delete_by_series(series)
                await self.uow.commit()
                logger.warning("Persistent token value mismatch, token deleted")
                return Return.err(
                    Error("TOKEN_MISMATCH", "Invalid remember-me token")
                )

            if token.token_date + timedelta(days=self.retention_days) < date.today():
                await self.uow.persistent_tokens.delete_by_series(series)
                await self.uow.commit()
                return Return.err(
                    Error("TOKEN_EXPIRED", "Remember-me token has expired")
                )

            token.token_value = generate_token_data()
            token.token_date = date.today()
            token.ip_address = ip_address
            token.user_agent = _truncate_user_agent(user_agent)
            token = await self.uow.persistent_tokens.save(token)
            rotated = IssuedToken(
                series=token.series,
                token_value=token.token_value,
                token_date=token.token_date,
                user_id=str(token.user_id),
            )

            await self.uow.commit()

            return Return.ok(rotated)

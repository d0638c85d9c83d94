from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.persistent_token_repository import IPersistentTokenRepository
from src.domain.entities import PersistentToken


class PersistentTokenRepository(IPersistentTokenRepository):
    """Persistent token repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_series(self, series: str) -> Optional[PersistentToken]:
        """Get token by series"""
        stmt = select(PersistentToken).where(PersistentToken.series == series)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[PersistentToken]:
        """Get all tokens owned by a user"""
        stmt = select(PersistentToken).where(PersistentToken.user_id == user_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_issued_before(self, cutoff: date) -> List[PersistentToken]:
        """Get all tokens whose token_date is strictly before cutoff"""
        stmt = select(PersistentToken).where(PersistentToken.token_date < cutoff)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def save(self, token: PersistentToken) -> PersistentToken:
        """Insert or update a token keyed by series"""
        token = await self.session.merge(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def delete_by_series(self, series: str) -> None:
        """Delete a token by series"""
        stmt = delete(PersistentToken).where(PersistentToken.series == series)
        await self.session.execute(stmt)
        await self.session.flush()

    async def delete_all(self, tokens: Sequence[PersistentToken]) -> int:
        """
        Delete tokens one row at a time.

        Each delete is keyed by series, so a row already removed by a
        concurrent revocation simply matches nothing and is not counted.
        """
        series_list = [token.series for token in tokens]
        deleted = 0
        for series in series_list:
            stmt = delete(PersistentToken).where(PersistentToken.series == series)
            result = await self.session.execute(stmt)
            deleted += result.rowcount
        await self.session.flush()
        return deleted

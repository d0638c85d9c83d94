from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from src.domain.entities import PersistentToken


class IPersistentTokenRepository(ABC):
    """Persistent token repository interface - application layer"""

    @abstractmethod
    async def get_by_series(self, series: str) -> Optional[PersistentToken]:
        """Get token by series"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[PersistentToken]:
        """Get all tokens owned by a user"""
        pass

    @abstractmethod
    async def get_issued_before(self, cutoff: date) -> List[PersistentToken]:
        """Get all tokens whose token_date is strictly before cutoff"""
        pass

    @abstractmethod
    async def save(self, token: PersistentToken) -> PersistentToken:
        """Insert or update a token keyed by series"""
        pass

    @abstractmethod
    async def delete_by_series(self, series: str) -> None:
        """Delete a token by series. No-op when it does not exist."""
        pass

    @abstractmethod
    async def delete_all(self, tokens: Sequence[PersistentToken]) -> int:
        """Delete the given tokens one row at a time. Returns rows actually deleted."""
        pass

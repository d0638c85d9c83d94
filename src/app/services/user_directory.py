from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import User


class UserDirectory(ABC):
    """Resolves the caller's identity and looks users up by login"""

    @abstractmethod
    def resolve_current_user(self) -> Optional[str]:
        """Login of the authenticated caller, or None"""
        pass

    @abstractmethod
    async def find_by_login(self, login: str) -> Optional[User]:
        """Get user by login"""
        pass

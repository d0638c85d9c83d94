from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import UserDirectory
from src.domain.entities import User


class JwtUserDirectory(UserDirectory):
    """
    User directory backed by the verified JWT of the current request.

    The caller is the ``login`` claim of the token payload. Lookups go
    through the unit of work's user repository, so they must happen inside
    an entered unit of work.
    """

    def __init__(self, payload: Optional[dict], uow: UnitOfWork):
        self.payload = payload
        self.uow = uow

    def resolve_current_user(self) -> Optional[str]:
        if not self.payload:
            return None
        return self.payload.get("login") or None

    async def find_by_login(self, login: str) -> Optional[User]:
        return await self.uow.users.get_by_login(login)

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.user_directory import JwtUserDirectory
from src.api.utils.jwt import verify_jwt
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import UserDirectory

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# Missing credentials are not rejected here: an unresolved caller surfaces
# as USER_NOT_FOUND from the use case
security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header, if any

    Returns:
        Decoded JWT payload containing user_id and login, or None when the
        header is missing or the token is invalid or expired
    """
    if credentials is None:
        return None
    return verify_jwt(credentials.credentials)


async def get_user_directory(
    current_user: Optional[dict] = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> UserDirectory:
    return JwtUserDirectory(current_user, uow)

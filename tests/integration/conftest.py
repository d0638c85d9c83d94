from datetime import date

import bcrypt
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.depends import get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.entities import PersistentToken, User

DEFAULT_LOGIN = "johndoe"
DEFAULT_PASSWORD = "SecurePass123!"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def create_user(db_session):
    async def _create_user(login=DEFAULT_LOGIN, password=DEFAULT_PASSWORD, activated=True):
        user = User(
            login=login,
            email=f"{login}@localhost",
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
            activated=activated,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _create_user


@pytest_asyncio.fixture
async def create_token(db_session):
    async def _create_token(user_id, series, token_date=None):
        token = PersistentToken(
            series=series,
            token_value=f"{series}-data",
            user_id=user_id,
            token_date=token_date or date.today(),
            ip_address="127.0.0.1",
            user_agent="Test agent",
        )
        db_session.add(token)
        await db_session.commit()
        return token

    return _create_token

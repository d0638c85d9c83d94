"""
Integration tests for Authentication API (password and remember-me login)
"""

import pytest
from datetime import date, timedelta
from httpx import AsyncClient
from sqlmodel import select

from src.api.utils.jwt import verify_jwt
from src.api.utils.remember_me import decode_remember_me_token, encode_remember_me_token
from src.domain.entities import PersistentToken

PASSWORD = "SecurePass123!"


async def tokens_of(db_session, user_id):
    result = await db_session.exec(
        select(PersistentToken).where(PersistentToken.user_id == user_id)
    )
    return list(result.all())


@pytest.mark.asyncio
async def test_authenticate_without_remember_me(client: AsyncClient, db_session, create_user):
    """Test password login returns an access token and creates no session"""
    user = await create_user()
    user_id = user.id

    response = await client.post(
        "/api/auth/authenticate",
        json={"login": "johndoe", "password": PASSWORD},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["remember_me_token"] is None
    assert verify_jwt(data["access_token"])["login"] == "johndoe"
    assert await tokens_of(db_session, user_id) == []


@pytest.mark.asyncio
async def test_authenticate_with_remember_me(client: AsyncClient, db_session, create_user):
    """Test remember-me login records a session with audit data"""
    user = await create_user()
    user_id = user.id

    response = await client.post(
        "/api/auth/authenticate",
        json={"login": "johndoe", "password": PASSWORD, "remember_me": True},
        headers={"User-Agent": "Test agent"},
    )

    assert response.status_code == 200
    series, token_value = decode_remember_me_token(response.json()["remember_me_token"])

    tokens = await tokens_of(db_session, user_id)
    assert len(tokens) == 1
    assert tokens[0].series == series
    assert tokens[0].token_value == token_value
    assert tokens[0].token_date == date.today()
    assert tokens[0].user_agent == "Test agent"

    # The new session is visible to its owner
    access_token = response.json()["access_token"]
    sessions = await client.get(
        "/api/account/sessions",
        headers={"Authorization": f"Bearer {access_token}"},
    )
    assert [s["series"] for s in sessions.json()] == [series]


@pytest.mark.asyncio
async def test_authenticate_invalid_credentials(client: AsyncClient, create_user):
    """Test wrong password returns 401"""
    await create_user()

    response = await client.post(
        "/api/auth/authenticate",
        json={"login": "johndoe", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_authenticate_not_activated(client: AsyncClient, create_user):
    """Test non-activated users get 403"""
    await create_user(activated=False)

    response = await client.post(
        "/api/auth/authenticate",
        json={"login": "johndoe", "password": PASSWORD},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_NOT_ACTIVATED"


@pytest.mark.asyncio
async def test_remember_me_login_rotates_token(client: AsyncClient, db_session, create_user, create_token):
    """Test a remember-me login rotates the token value and refreshes its date"""
    user = await create_user()
    user_id = user.id
    await create_token(user_id, "1111-1111", date.today() - timedelta(days=10))

    response = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": encode_remember_me_token("1111-1111", "1111-1111-data")},
    )

    assert response.status_code == 200
    data = response.json()
    assert verify_jwt(data["access_token"])["login"] == "johndoe"
    series, token_value = decode_remember_me_token(data["remember_me_token"])
    assert series == "1111-1111"
    assert token_value != "1111-1111-data"

    tokens = await tokens_of(db_session, user_id)
    assert len(tokens) == 1
    assert tokens[0].token_value == token_value
    assert tokens[0].token_date == date.today()

    # The previous value no longer works and the series is dropped
    replay = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": encode_remember_me_token("1111-1111", "1111-1111-data")},
    )
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "TOKEN_MISMATCH"
    assert await tokens_of(db_session, user_id) == []


@pytest.mark.asyncio
async def test_remember_me_login_expired_token(client: AsyncClient, db_session, create_user, create_token):
    """Test an expired token is rejected and removed"""
    user = await create_user()
    user_id = user.id
    await create_token(user_id, "2222-2222", date.today() - timedelta(days=32))

    response = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": encode_remember_me_token("2222-2222", "2222-2222-data")},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_EXPIRED"
    assert await tokens_of(db_session, user_id) == []


@pytest.mark.asyncio
async def test_remember_me_login_malformed_token(client: AsyncClient):
    """Test a malformed credential returns 401"""
    response = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": "garbage"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_REMEMBER_ME_TOKEN"


@pytest.mark.asyncio
async def test_remember_me_login_unknown_series(client: AsyncClient):
    """Test an unknown series returns 401"""
    response = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": encode_remember_me_token("nope", "value")},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_NOT_FOUND"


@pytest.mark.asyncio
async def test_remember_me_login_deactivated_user(client: AsyncClient, db_session, create_user, create_token):
    """Test a deactivated user's remember-me login returns 403 and drops the token"""
    user = await create_user(activated=False)
    user_id = user.id
    await create_token(user_id, "1111-1111", date.today() - timedelta(days=10))

    response = await client.post(
        "/api/auth/remember-me",
        json={"remember_me_token": encode_remember_me_token("1111-1111", "1111-1111-data")},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_NOT_ACTIVATED"
    assert await tokens_of(db_session, user_id) == []

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import UserDirectory
from src.app.use_cases.auth import (
    AuthenticateCommand,
    AuthenticateResponse,
    AuthenticateUseCase,
)
from src.app.use_cases.sessions import SessionLifecycleManager
from src.depends import get_unit_of_work, get_user_directory

router = APIRouter(prefix="/auth", tags=["Authentication"])

REMEMBER_ME_ERRORS = {
    "INVALID_REMEMBER_ME_TOKEN",
    "TOKEN_NOT_FOUND",
    "TOKEN_MISMATCH",
    "TOKEN_EXPIRED",
    "USER_NOT_FOUND",
}


def _client_info(request: Request) -> tuple:
    ip_address: Optional[str] = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")


def _build_use_case(uow: UnitOfWork, directory: UserDirectory) -> AuthenticateUseCase:
    sessions = SessionLifecycleManager(
        uow, directory, retention_days=ApplicationConfig.TOKEN_RETENTION_DAYS
    )
    return AuthenticateUseCase(uow, sessions)


class AuthenticateRequest(BaseModel):
    """Login HTTP request payload"""

    login: str = Field(..., min_length=1, max_length=50, description="User login")
    password: str = Field(..., min_length=1, description="User password")
    remember_me: bool = Field(default=False, description="Issue a remember-me token")


@router.post(
    "/authenticate",
    status_code=status.HTTP_200_OK,
    response_model=AuthenticateResponse,
)
async def authenticate(
    request: AuthenticateRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    User Login

    Returns a JWT access token. With remember_me, also returns a
    remember-me token recorded as a new session.

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 403 Forbidden: USER_NOT_ACTIVATED
        - 500 Internal Server Error: Server error
    """
    ip_address, user_agent = _client_info(http_request)
    command = AuthenticateCommand(
        login=request.login,
        password=request.password,
        remember_me=request.remember_me,
        ip_address=ip_address,
        user_agent=user_agent,
    )

    result = await _build_use_case(uow, directory).authenticate(command)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_ACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class RememberMeRequest(BaseModel):
    """Remember-me login HTTP request payload"""

    remember_me_token: str = Field(..., min_length=1, max_length=512)


@router.post(
    "/remember-me",
    status_code=status.HTTP_200_OK,
    response_model=AuthenticateResponse,
)
async def remember_me_login(
    request: RememberMeRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Remember-me Login

    Exchanges a remember-me token for a new access token. The token is
    rotated: the client must keep the returned remember_me_token.

    Raises:
        - 401 Unauthorized: invalid, unknown, mismatched or expired token
        - 403 Forbidden: USER_NOT_ACTIVATED
        - 500 Internal Server Error: Server error
    """
    ip_address, user_agent = _client_info(http_request)

    result = await _build_use_case(uow, directory).auto_login(
        request.remember_me_token, ip_address, user_agent
    )

    if result.is_err():
        error = result.error
        if error.code in REMEMBER_ME_ERRORS:
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "USER_NOT_ACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value

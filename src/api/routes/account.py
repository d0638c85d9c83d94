from typing import List
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Response, status

from config import ApplicationConfig
from src.api.error import BEARER_CHALLENGE, ClientError, ServerError
from src.app.result import Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_directory import UserDirectory
from src.app.use_cases.sessions import SessionInfo, SessionLifecycleManager
from src.depends import get_unit_of_work, get_user_directory

router = APIRouter(prefix="/account", tags=["Account"])


def _build_manager(uow: UnitOfWork, directory: UserDirectory) -> SessionLifecycleManager:
    return SessionLifecycleManager(
        uow, directory, retention_days=ApplicationConfig.TOKEN_RETENTION_DAYS
    )


@router.get(
    "/sessions",
    status_code=status.HTTP_200_OK,
    response_model=List[SessionInfo],
)
async def get_current_sessions(
    uow: UnitOfWork = Depends(get_unit_of_work),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    List Current Sessions

    Returns the remember-me sessions of the authenticated user.
    Token values are never returned.

    Raises:
        - 401 Unauthorized: USER_NOT_FOUND (missing/invalid token or deleted account)
        - 500 Internal Server Error: Server error
    """
    result = await _build_manager(uow, directory).list_sessions()

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(
                error, status_code=status.HTTP_401_UNAUTHORIZED, headers=BEARER_CHALLENGE
            )
        raise ServerError(error)

    return result.value


@router.delete(
    "/sessions/{series}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def invalidate_session(
    series: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Invalidate Session

    - Only the caller's own sessions can be deleted
    - Deleting an unknown or foreign series also returns 204
    - Deleting a session only removes its remember-me token: a session
      already opened with it stays usable until the client drops it

    Raises:
        - 400 Bad Request: INVALID_SERIES (series cannot be URL-decoded)
        - 401 Unauthorized: USER_NOT_FOUND
        - 500 Internal Server Error: Server error
    """
    try:
        decoded_series = unquote(series, errors="strict")
    except UnicodeDecodeError:
        raise ClientError(
            Error("INVALID_SERIES", "Series could not be URL-decoded"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    result = await _build_manager(uow, directory).revoke_session(decoded_series)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(
                error, status_code=status.HTTP_401_UNAUTHORIZED, headers=BEARER_CHALLENGE
            )
        raise ServerError(error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)

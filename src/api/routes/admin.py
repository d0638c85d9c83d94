"""
Admin API Routes - Maintenance Endpoints

Authentication is via Admin API Key, not user JWTs.
"""

from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sessions import SessionLifecycleManager
from src.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


class PurgeTokensRequest(BaseModel):
    """Optional cutoff for a manual token purge"""

    cutoff_date: Optional[date] = Field(
        default=None,
        description="Delete tokens issued before this date (default: today - retention window)",
    )


class PurgeTokensResponse(BaseModel):
    """Response for a token purge"""

    deleted_count: int
    cutoff_date: date


@router.post(
    "/persistent-tokens/purge",
    status_code=status.HTTP_200_OK,
    response_model=PurgeTokensResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def purge_persistent_tokens(
    request: Optional[PurgeTokensRequest] = Body(default=None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Purge Expired Persistent Tokens

    Runs the same sweep as the background task, on demand.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    retention_days = ApplicationConfig.TOKEN_RETENTION_DAYS
    cutoff = request.cutoff_date if request and request.cutoff_date else None
    if cutoff is None:
        cutoff = date.today() - timedelta(days=retention_days)

    manager = SessionLifecycleManager(uow, retention_days=retention_days)
    result = await manager.purge_expired_tokens(cutoff)

    if result.is_err():
        raise ServerError(result.error)

    return PurgeTokensResponse(deleted_count=result.value, cutoff_date=cutoff)

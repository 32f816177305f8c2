"""User Routes - participant removal endpoint.

Invariants:
    - DELETE /api/v1/users/{user_id}?userCode=... returns 204 with no body on success
    - user_id must fit a signed 64-bit column (0..MAX_ID); larger ids fail validation with 400
    - Failure values are raised as RoomkeeperError and rendered by the global handler
    - Each invocation is bounded by settings.remove_user_timeout_seconds;
      expiry cancels the workflow and returns 504

Design Decisions:
    - Handler built per request from the request-scoped AsyncSession:
      both repositories share one session and one transaction
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from roomkeeper.config import Settings, get_settings
from roomkeeper.core.domain_types import MAX_ID, AuthCode, UserId
from roomkeeper.core.errors import ErrorContext, RequestTimeoutError, from_failure
from roomkeeper.core.result import Failure
from roomkeeper.infrastructure.database import get_db
from roomkeeper.infrastructure.sql_repositories import (
    SqlRoomRepository, SqlUserRepository,
)
from roomkeeper.schemas.user import ErrorResponse
from roomkeeper.services.delete_user import DeleteUserHandler, DeleteUserRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


def get_delete_user_handler(
    db: AsyncSession = Depends(get_db),
) -> DeleteUserHandler:
    return DeleteUserHandler(SqlRoomRepository(db), SqlUserRepository(db))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_504_GATEWAY_TIMEOUT: {"model": ErrorResponse},
    },
)
async def delete_user(
    user_id: int = Path(ge=0, le=MAX_ID),
    user_code: str = Query(alias="userCode", min_length=1, max_length=64),
    handler: DeleteUserHandler = Depends(get_delete_user_handler),
    settings: Settings = Depends(get_settings),
):
    """Remove a participant from the acting admin's room."""
    request = DeleteUserRequest(AuthCode(user_code), UserId(user_id))
    timeout = settings.remove_user_timeout_seconds
    try:
        async with asyncio.timeout(timeout):
            result = await handler.handle(request)
    except TimeoutError:
        logger.warning(
            f"Participant removal timed out after {timeout}s",
            extra={"user_id": user_id, "error_code": "TIMEOUT"},
        )
        raise RequestTimeoutError(timeout, ErrorContext(user_id=user_id))

    if isinstance(result, Failure):
        raise from_failure(result, ErrorContext(user_id=user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

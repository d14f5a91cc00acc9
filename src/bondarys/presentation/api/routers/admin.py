import logging

from fastapi import APIRouter

from bondarys.presentation.api.dependencies import (
    AdminOperator,
    DBSession,
    ImpersonationServiceDep,
)
from bondarys.presentation.api.schemas.admin import (
    ImpersonateRequest,
    ImpersonationResponse,
)
from bondarys.presentation.api.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/impersonate",
    summary="Act as another account",
    responses={
        400: {"model": ErrorResponse, "description": "Cannot impersonate yourself"},
        403: {"model": ErrorResponse, "description": "Admin access required"},
        404: {"model": ErrorResponse, "description": "Account not found"},
    },
)
async def impersonate(
    request: ImpersonateRequest,
    operator: AdminOperator,
    impersonation: ImpersonationServiceDep,
    session: DBSession,
) -> ImpersonationResponse:
    """
    Start acting as another account.

    Subsequent authenticated requests of this admin resolve to the target
    until the impersonation is stopped.
    """
    target = await impersonation.start(operator.operator, request.user_id)
    await session.commit()
    return ImpersonationResponse(
        message=f"Now impersonating {target.display_name}",
        user_id=target.id,
    )


@router.post(
    "/stop-impersonate",
    summary="Stop acting as another account",
    responses={403: {"model": ErrorResponse, "description": "Admin access required"}},
)
async def stop_impersonate(
    operator: AdminOperator,
    impersonation: ImpersonationServiceDep,
    session: DBSession,
) -> ImpersonationResponse:
    await impersonation.stop(operator.operator)
    await session.commit()
    return ImpersonationResponse(message="Impersonation stopped")

"""Admin schemas for impersonation."""

from uuid import UUID

from pydantic import ConfigDict

from bondarys.presentation.api.schemas.common import CamelModel


class ImpersonateRequest(CamelModel):
    """Request schema for starting an impersonation."""

    user_id: UUID

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"userId": "550e8400-e29b-41d4-a716-446655440000"},
        },
    )


class ImpersonationResponse(CamelModel):
    message: str
    user_id: UUID | None = None

"""Impersonation session repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID


class ImpersonationRepository(ABC):
    """Stores at most one impersonation target per operator."""

    @abstractmethod
    async def get_target(self, operator_id: UUID) -> UUID | None:
        """Return the account the operator currently acts as, if any."""

    @abstractmethod
    async def start(self, operator_id: UUID, target_id: UUID, started_at: datetime) -> None:
        """Associate the operator with a target, replacing any previous one."""

    @abstractmethod
    async def stop(self, operator_id: UUID) -> UUID | None:
        """Clear the association. Returns the previous target, if any."""

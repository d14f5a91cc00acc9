from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any
from uuid import UUID


class AuditTrail(ABC):
    """Records security-relevant actions taken by operators."""

    @abstractmethod
    def record(
        self,
        event: str,
        operator_id: UUID,
        target_id: UUID | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        pass

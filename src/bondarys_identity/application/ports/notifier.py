from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class Notifier(ABC):
    """Outbound message delivery addressed by template name.

    Delivery is fire-and-forget from the caller's point of view: callers log
    failures and carry on.
    """

    @abstractmethod
    async def send(self, template: str, to: str, data: Mapping[str, Any]) -> None:
        pass
